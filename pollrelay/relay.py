"""Module containing the pump which relays updates from the source to the sink."""

import asyncio
import enum
import logging
from collections.abc import Awaitable, Callable
from typing import Protocol

from .cursor import Cursor
from .cursor_store import CursorStore, MemoryCursorStore
from .errors import (
    ConfigurationError,
    CursorStoreError,
    MalformedResponseError,
    SinkDeliveryError,
    SourceError,
)
from .sink import UpdateSink
from .update import Update

logger = logging.getLogger(__name__)


class UpdateSource(Protocol):
    """UpdateSource is an interface describing a pull-based source of updates."""

    async def fetch_updates(self, offset: int, wait: int, timeout: float) -> list[Update]:
        """Long-poll for updates starting at the given offset."""
        ...

    async def fetch_latest(self, timeout: float) -> list[Update]:
        """Fetch only the most recent pending update."""
        ...


class RelayState(enum.Enum):
    """The state the pump is in."""

    IDLE = "idle"
    DRAINING = "draining"
    POLLING = "polling"
    BACKOFF = "backoff"
    FORWARDING = "forwarding"
    STOPPED = "stopped"


class BacklogPolicy(str, enum.Enum):
    """What to do with updates which accumulated while the pump was not running."""

    DISCARD = "discard"
    REPLAY = "replay"


class RelayPump:
    """
    Pull batches of updates from the source and push each update to the sink.

    The cursor is advanced as soon as an update is observed, before it is forwarded, so an
    update the sink rejects is never requested again. A failed poll leaves the cursor as it
    was and is retried after a fixed backoff.
    """

    def __init__(
        self,
        source: UpdateSource,
        sink: UpdateSink,
        *,
        poll_wait: int = 30,
        poll_timeout: float = 35.0,
        backoff: float = 5.0,
        drain_timeout: float = 10.0,
        backlog_policy: BacklogPolicy = BacklogPolicy.DISCARD,
        cursor_store: CursorStore | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Initialize the RelayPump.

        :param source: where updates are pulled from
        :param sink: where updates are pushed to
        :param poll_wait: how long the source may hold a long poll open, in seconds
        :param poll_timeout: client-side timeout of a long poll, must exceed `poll_wait`
        :param backoff: pause after a failed poll, in seconds
        :param drain_timeout: client-side timeout of the startup backlog drain
        :param backlog_policy: whether to discard or replay updates pending at startup
        :param cursor_store: where the offset is kept, in memory if not given
        :param sleep: coroutine used for the backoff pause
        """
        if poll_timeout <= poll_wait:
            msg = f"poll timeout ({poll_timeout}s) must exceed the poll wait ({poll_wait}s)"
            raise ConfigurationError(msg)
        self._source = source
        self._sink = sink
        self._poll_wait = poll_wait
        self._poll_timeout = poll_timeout
        self._backoff = backoff
        self._drain_timeout = drain_timeout
        self._backlog_policy = backlog_policy
        self._cursor_store = cursor_store or MemoryCursorStore()
        self._sleep = sleep
        self._stopping = False
        self.cursor = Cursor()
        self.state = RelayState.IDLE

    async def start(self) -> None:
        """Restore the saved offset, then drain the backlog unless it is to be replayed."""
        try:
            saved_offset = await self._cursor_store.load()
        except CursorStoreError as error:
            logger.warning("Ignoring saved offset: %s", error)
            saved_offset = None
        if saved_offset is not None:
            self.cursor.offset = saved_offset
            logger.info("Resuming from saved offset %d", saved_offset)

        if self._backlog_policy is BacklogPolicy.REPLAY:
            logger.info("Replaying pending updates from offset %d", self.cursor.offset)
            return
        await self.drain_backlog()

    async def drain_backlog(self) -> None:
        """
        Skip every update pending at the source without forwarding any of them.

        A failure here is not fatal: the pump carries on from the current offset, which may
        make the source replay its retained backlog on the first poll.
        """
        self.state = RelayState.DRAINING
        try:
            updates = await self._source.fetch_latest(self._drain_timeout)
        except SourceError as error:
            logger.error("Failed to clear pending updates: %s", error)
            return
        if not updates:
            return
        self.cursor.advance(updates[-1].update_id)
        await self._save_cursor()
        logger.info(
            "Cleared %d old update(s), starting from offset %d", len(updates), self.cursor.offset
        )

    async def step(self) -> list[Update]:
        """
        Run a single iteration: poll once, then forward every update received.

        :return: the batch which was forwarded, empty after a timeout or a failed poll.
        """
        self.state = RelayState.POLLING
        offset = self.cursor.offset
        try:
            updates = await self._source.fetch_updates(
                offset, self._poll_wait, self._poll_timeout
            )
        except SourceError as error:
            logger.error("Polling at offset %d failed: %s", offset, error)
            if isinstance(error, MalformedResponseError) and error.updates:
                await self._forward_all(error.updates)
            self.state = RelayState.BACKOFF
            await self._sleep(self._backoff)
            self.state = RelayState.POLLING
            return []

        await self._forward_all(updates)
        return updates

    async def run(self) -> None:
        """Start the pump and relay updates until `stop` is called."""
        self._stopping = False
        await self.start()
        while not self._stopping:
            await self.step()
        self.state = RelayState.STOPPED
        logger.info("Relay stopped at offset %d", self.cursor.offset)

    def stop(self) -> None:
        """Ask the pump to stop once the current iteration is over."""
        self._stopping = True

    async def _forward_all(self, updates: list[Update]) -> None:
        if not updates:
            return
        self.state = RelayState.FORWARDING
        for update in updates:
            await self._forward(update)
        self.state = RelayState.POLLING

    async def _forward(self, update: Update) -> None:
        self.cursor.advance(update.update_id)
        await self._save_cursor()

        if (summary := update.summary()) is not None:
            logger.info("<- %s", summary)
        try:
            await self._sink.deliver(update)
        except SinkDeliveryError as error:
            logger.error(
                "-> Forward of update %d failed: %s. Is the sink at %s reachable?",
                update.update_id,
                error,
                error.url,
            )
            return
        logger.info("-> Forwarded update %d", update.update_id)

    async def _save_cursor(self) -> None:
        try:
            await self._cursor_store.save(self.cursor.offset)
        except CursorStoreError as error:
            logger.warning("Offset %d kept in memory only: %s", self.cursor.offset, error)
