"""Run the relay as a long-lived foreground process: ``python -m pollrelay``."""

import asyncio
import logging
import sys

import httpx

from .client import SourceClient
from .config import Settings, load_settings
from .cursor_store import CursorStore, FileCursorStore
from .errors import RelayError
from .relay import RelayPump
from .sink import WebhookSink

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logger = logging.getLogger("pollrelay")


async def serve(settings: Settings) -> None:
    """Build the relay from the settings and run it until the process is interrupted."""
    cursor_store: CursorStore | None = None
    if settings.cursor_file is not None:
        cursor_store = FileCursorStore(settings.cursor_file)

    async with httpx.AsyncClient(timeout=settings.request_timeout) as http_client:
        source = SourceClient(settings.telegram_api_base, settings.telegram_bot_token, http_client)
        sink = WebhookSink(settings.webhook_url, http_client, timeout=settings.request_timeout)
        pump = RelayPump(
            source,
            sink,
            poll_wait=settings.poll_wait,
            poll_timeout=settings.poll_timeout,
            backoff=settings.backoff,
            drain_timeout=settings.request_timeout,
            backlog_policy=settings.backlog_policy,
            cursor_store=cursor_store,
        )
        logger.info("Starting update polling")
        logger.info("Forwarding to %s", settings.webhook_url)
        logger.info("Press Ctrl+C to stop")
        await pump.run()


def main() -> int:
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, stream=sys.stderr)
    # httpx logs every request URL at INFO, and the source URL carries the bot token.
    logging.getLogger("httpx").setLevel(logging.WARNING)

    try:
        settings = load_settings()
    except RelayError as err:
        if not err.fatal:
            raise
        logger.error("%s", err)
        return 1
    logging.getLogger().setLevel(settings.log_level)

    try:
        asyncio.run(serve(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
        return 0
    except RelayError as err:
        if err.fatal:
            logger.error("%s", err)
        else:
            logger.exception("Unhandled relay error")
        return 1
    except Exception:  # pylint: disable=broad-except
        logger.exception("Fatal error")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
