"""Module to define the UpdateSink interface and the webhook implementation of it."""

from typing import Protocol

import httpx

from .errors import SinkDeliveryError
from .update import Update

# pylint: disable=R0903


class UpdateSink(Protocol):
    """UpdateSink is an interface describing a destination that updates are pushed to."""

    async def deliver(self, update: Update) -> None:
        """
        Push a single update to the destination.

        :param update: the update which has been received from the source
        :raises SinkDeliveryError: if the destination did not accept the update
        """


class WebhookSink(UpdateSink):
    """Deliver updates by POSTing them to a webhook endpoint, as the Bot API itself would."""

    def __init__(self, url: str, http_client: httpx.AsyncClient, timeout: float = 10.0) -> None:
        """
        Initialize the WebhookSink.

        :param url: The webhook endpoint which receives the updates.
        :param http_client: A httpx AsyncClient under which to make the HTTP requests.
        :param timeout: Timeout in seconds for a single delivery.
        """
        self.url = url
        self._http_client = http_client
        self._timeout = timeout

    async def deliver(self, update: Update) -> None:
        """
        POST the unmodified update payload as JSON. There is no retry.

        :param update: the update to deliver
        :raises SinkDeliveryError: on a non-2xx response or a transport failure.
        """
        try:
            res = await self._http_client.post(
                self.url,
                json=update.payload,
                headers={"Content-Type": "application/json"},
                timeout=self._timeout,
            )
        except httpx.HTTPError as error:
            msg = f"{type(error).__name__}: {error}" if str(error) else type(error).__name__
            raise SinkDeliveryError(msg, self.url) from error

        if not res.is_success:
            msg = f"sink responded with HTTP {res.status_code}"
            raise SinkDeliveryError(msg, self.url, res.status_code)
