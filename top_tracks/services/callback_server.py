"""
Local OAuth redirect listener.
Receives the authorization code from Spotify, exchanges it for a token and hands
an authenticated client back to the caller.
"""

import asyncio
import logging
import webbrowser
from typing import Optional

import aiohttp
from aiohttp import web

from config.settings import Settings
from top_tracks.api.auth import SpotifyAuth
from top_tracks.api.base_client import AuthenticationError
from top_tracks.api.spotify_client import SpotifyClient

logger = logging.getLogger(__name__)

class CallbackServer:
    """Loopback HTTP server completing the Authorization Code flow."""

    def __init__(
        self,
        auth: SpotifyAuth,
        state: str,
        host: str = "localhost",
        port: int = 8080,
        path: str = "/callback",
        api_base_url: str = "https://api.spotify.com/v1",
        timeout: int = 30
    ):
        self.auth = auth
        self.state = state
        self.host = host
        self.port = port
        self.path = path
        self.api_base_url = api_base_url
        self.timeout = timeout
        self._runner: Optional[web.AppRunner] = None
        self._client_future: Optional[asyncio.Future] = None

    def _handoff(self) -> asyncio.Future:
        if self._client_future is None:
            self._client_future = asyncio.get_running_loop().create_future()
        return self._client_future

    def _resolve(self, client: SpotifyClient):
        future = self._handoff()
        if not future.done():
            future.set_result(client)

    def _fail(self, error: Exception):
        future = self._handoff()
        if not future.done():
            future.set_exception(error)

    def build_app(self) -> web.Application:
        """Create the aiohttp app serving the redirect endpoint."""
        app = web.Application()
        app.router.add_get(self.path, self._handle_callback)
        app.router.add_route("*", "/{tail:.*}", self._handle_other)
        return app

    async def start(self):
        """Start listening for the redirect."""
        self._handoff()
        self._runner = web.AppRunner(self.build_app())
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()
        logger.info(f"Listening for OAuth callback on http://{self.host}:{self.port}{self.path}")

    async def stop(self):
        if self._runner:
            await self._runner.cleanup()
            self._runner = None

    async def wait_for_client(self) -> SpotifyClient:
        """Block until the redirect has been handled, then return the authenticated client."""
        return await self._handoff()

    async def _handle_other(self, request: web.Request) -> web.Response:
        logger.info(f"Got request for: {request.url}")
        return web.Response(text="")

    async def _handle_callback(self, request: web.Request) -> web.Response:
        """Handle OAuth callback from Spotify: check state, exchange code, hand off client."""
        error = request.query.get("error")
        if error:
            self._fail(AuthenticationError(f"Spotify authorization failed: {error}"))
            return web.Response(text=f"Spotify authorization failed: {error}", status=403)

        received_state = request.query.get("state", "")
        if received_state != self.state:
            logger.error(f"State mismatch: {received_state} != {self.state}")
            self._fail(AuthenticationError(f"State mismatch: {received_state} != {self.state}"))
            raise web.HTTPNotFound()

        code = request.query.get("code", "")
        if not code:
            self._fail(AuthenticationError("Redirect did not carry an authorization code"))
            return web.Response(text="Couldn't get token", status=403)

        try:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                token = await self.auth.exchange_code(session, code)
        except AuthenticationError as e:
            self._fail(e)
            return web.Response(text="Couldn't get token", status=403)

        client = SpotifyClient(self.auth, token, base_url=self.api_base_url, timeout=self.timeout)
        self._resolve(client)
        return web.Response(text="Login Completed!")

def open_browser(url: str) -> bool:
    """Open the authorization URL in the user's browser."""
    print("🎵 Opening Spotify authorization in your browser...")
    print(f"🔗 If it doesn't open automatically, visit: {url}")
    try:
        return webbrowser.open(url)
    except webbrowser.Error as e:
        logger.warning(f"Could not open browser: {e}")
        return False

async def authenticate(settings: Settings) -> SpotifyClient:
    """
    Run the Authorization Code flow end to end.

    Args:
        settings: Application settings with client credentials and state

    Returns:
        Spotify client authenticated as the user who completed the login
    """
    auth = SpotifyAuth(
        client_id=settings.SPOTIFY_CLIENT_ID,
        client_secret=settings.SPOTIFY_CLIENT_SECRET,
        redirect_uri=settings.redirect_uri,
        scopes=settings.SCOPES,
        accounts_url=settings.spotify.accounts_url
    )
    server = CallbackServer(
        auth,
        settings.SPOTIFY_STATE,
        host=settings.callback.host,
        port=settings.callback.port,
        path=settings.callback.path,
        api_base_url=settings.spotify.base_url,
        timeout=settings.spotify.timeout
    )
    await server.start()
    try:
        open_browser(auth.authorization_url(settings.SPOTIFY_STATE))
        return await server.wait_for_client()
    finally:
        await server.stop()
