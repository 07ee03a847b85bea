#!/usr/bin/env python3
"""
HTTP transport

One GET per request, response body returned as text.  HTTP and network
failures are mapped onto the FSAPI error types here so the client only
ever sees FsapiError subclasses.
"""

import asyncio
import logging

import aiohttp

from .protocol import mask_pin
from .types import HttpStatusError, Timeout, TransportError, WrongPin


class Transport:
    """fetch text over HTTP with an aiohttp session"""

    def __init__(self, session: aiohttp.ClientSession | None = None, timeout: float = 5.0):
        self.session: aiohttp.ClientSession | None = session
        self.timeout: float = timeout
        self._owns_session: bool = session is None

    def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession()
            self._owns_session = True
        return self.session

    async def fetch_text(self, url: str, timeout: float | None = None) -> str:
        """GET url and return the body"""
        total = self.timeout if timeout is None else timeout
        logging.debug("GET %s", mask_pin(url))
        try:
            async with self._get_session().get(  # pylint: disable=not-async-context-manager
                url, timeout=aiohttp.ClientTimeout(total=total)
            ) as response:
                if response.status == 403:
                    raise WrongPin("Device rejected the pin")
                if response.status != 200:
                    raise HttpStatusError(response.status, mask_pin(url))
                return await response.text()
        except (asyncio.TimeoutError, aiohttp.ServerTimeoutError) as err:
            raise Timeout(f"No answer from {mask_pin(url)} within {total}s") from err
        except aiohttp.ClientError as err:
            raise TransportError(f"Cannot reach {mask_pin(url)}: {err}") from err

    async def close(self) -> None:
        """close the session if we created it"""
        if self.session and self._owns_session:
            await self.session.close()
        self.session = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
