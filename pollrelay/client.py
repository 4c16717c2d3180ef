"""Module containing the client used to pull updates from the Telegram Bot API."""

from typing import Any

import httpx

from .cursor import LATEST_OFFSET
from .errors import MalformedResponseError, SourceAPIError, SourceTransportError
from .update import Update


class SourceClient:
    """Client-side code to long-poll the Bot API `getUpdates` method for pending updates."""

    def __init__(
        self,
        api_base: str,
        token: str,
        http_client: httpx.AsyncClient,
    ) -> None:
        """
        Initializes a new instance of the SourceClient class.

        :param api_base: The base URL of the Bot API, e.g. https://api.telegram.org
        :param token: The bot token. It is part of the request URL and so is never logged.
        :param http_client: A httpx AsyncClient under which to make the HTTP requests.
            Sharing it with the sink allows connection pooling across both.
        """
        self.url = f"{api_base.rstrip('/')}/bot{token}/getUpdates"
        self._http_client = http_client

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Return the http_client being used by this client."""
        return self._http_client

    async def fetch_updates(self, offset: int, wait: int, timeout: float) -> list[Update]:
        """
        Long-poll the source for updates starting at the given offset.

        :param offset: The identifier of the first update to return.
        :param wait: How long the source may hold the request open, in seconds.
        :param timeout: Client-side timeout in seconds, which must exceed `wait`.
        :return: the batch of updates, empty if the long poll expired with nothing pending.
        :raises SourceAPIError: if the source responded with `ok: false`.
        :raises SourceTransportError: if the source could not be reached.
        :raises MalformedResponseError: if the response is not a valid batch.
        """
        params = {"offset": offset, "timeout": wait}
        try:
            res = await self._http_client.get(self.url, params=params, timeout=timeout)
        except httpx.ReadTimeout:
            return []
        except httpx.HTTPError as error:
            raise SourceTransportError(_describe(error)) from error
        return self._process_response(res)

    async def fetch_latest(self, timeout: float) -> list[Update]:
        """
        Fetch only the most recent pending update without waiting for new ones.

        :param timeout: Client-side timeout in seconds.
        :raises SourceAPIError: if the source responded with `ok: false`.
        :raises SourceTransportError: if the source could not be reached or timed out.
        :raises MalformedResponseError: if the response is not a valid batch.
        """
        try:
            res = await self._http_client.get(
                self.url, params={"offset": LATEST_OFFSET}, timeout=timeout
            )
        except httpx.HTTPError as error:
            raise SourceTransportError(_describe(error)) from error
        return self._process_response(res)

    def _process_response(self, res: httpx.Response) -> list[Update]:
        """
        Process the response from the source.

        The Bot API reports failures as a JSON body with a non-2xx status, so the body is
        inspected whatever the status code is.

        :param res: the source response
        """
        try:
            body: dict[str, Any] = res.json()
        except ValueError as error:
            msg = f"response is not valid JSON (HTTP {res.status_code})"
            raise MalformedResponseError(msg) from error

        if not isinstance(body, dict):
            msg = f"unexpected response body (HTTP {res.status_code})"
            raise MalformedResponseError(msg)

        if not body.get("ok"):
            description = body.get("description") or f"HTTP {res.status_code}"
            raise SourceAPIError(description, body.get("error_code"))

        result = body.get("result")
        if not isinstance(result, list):
            msg = "response is missing the list of updates"
            raise MalformedResponseError(msg)
        updates: list[Update] = []
        for raw_update in result:
            try:
                updates.append(self._parse_update(raw_update))
            except MalformedResponseError as error:
                # the updates before the bad one are still handed back for forwarding
                error.updates = updates
                raise
        return updates

    def _parse_update(self, raw_update: Any) -> Update:
        """
        Parse a single update from the response.

        :param raw_update: The raw JSON object from the source
        :raises MalformedResponseError: if the update has no integer identifier.
        """
        try:
            update_id = raw_update["update_id"]
        except (KeyError, TypeError) as error:
            msg = "error while parsing update"
            raise MalformedResponseError(msg) from error
        if not isinstance(update_id, int) or isinstance(update_id, bool):
            msg = f"error while parsing update: invalid update_id {update_id!r}"
            raise MalformedResponseError(msg)
        return Update(update_id=update_id, payload=raw_update)


def _describe(error: httpx.HTTPError) -> str:
    """Describe a transport error without including the request URL."""
    return f"{type(error).__name__}: {error}" if str(error) else type(error).__name__
