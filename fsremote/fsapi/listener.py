#!/usr/bin/env python3
"""
Notification long-poll loop

Keeps a state mirror in step with the device by polling GET_NOTIFIES over
and over.  A timeout on the device or on the wire just means nothing
changed.  Any other failure ends the loop and is raised to whoever is
running it; there is no retry here.
"""

import asyncio
import contextlib
import logging
from typing import Callable, Protocol

from .client import FsapiClient
from .types import Notification


class StateMirror(Protocol):  # pylint: disable=too-few-public-methods
    """anything that can take a decoded notification"""

    def apply(self, notification: Notification, strict: bool = False) -> bool: ...


class NotificationListener:
    """drive GET_NOTIFIES for one client and apply the results"""

    def __init__(
        self,
        client: FsapiClient,
        state: StateMirror | None = None,
        strict: bool = False,
        callback: Callable[[Notification], None] | None = None,
    ):
        self.client = client
        self.state = state
        self.strict = strict
        self.callback = callback
        self._shutdown_event = asyncio.Event()

    async def poll_once(self) -> int:
        """one long-poll; returns how many notifications were applied"""
        batch = await self.client.get_notifications()
        if batch is None:
            logging.debug("No changes on %s", self.client.host)
            return 0

        applied = 0
        for notification in batch:
            if self.callback:
                self.callback(notification)
            if self.state is not None and self.state.apply(notification, strict=self.strict):
                applied += 1
        return applied

    async def run(self) -> None:
        """poll until shutdown() or cancellation"""
        if self.client.session_id is None:
            await self.client.create_session()

        logging.info("Listening for notifications from %s", self.client.host)
        stopper = asyncio.create_task(self._shutdown_event.wait())
        poller: asyncio.Task | None = None
        try:
            while not self._shutdown_event.is_set():
                poller = asyncio.create_task(self.poll_once())
                await asyncio.wait({poller, stopper}, return_when=asyncio.FIRST_COMPLETED)
                if not poller.done():
                    # abandoning the request needs no cleanup on the device
                    poller.cancel()
                    with contextlib.suppress(asyncio.CancelledError):
                        await poller
                    break
                poller.result()
        except asyncio.CancelledError:
            logging.info("Notification listener cancelled")
            raise
        finally:
            for task in (poller, stopper):
                if task and not task.done():
                    task.cancel()
                    with contextlib.suppress(asyncio.CancelledError):
                        await task
            logging.info("Stopped listening to %s", self.client.host)

    def shutdown(self) -> None:
        """ask run() to return"""
        self._shutdown_event.set()
