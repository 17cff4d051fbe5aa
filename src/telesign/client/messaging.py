"""
TeleSign Messaging API clients.

The Messaging API sends SMS messages: alerts, reminders, notifications, or
verification messages containing one-time passcodes.
See https://developer.telesign.com/docs/messaging-api for API documentation.
"""

from collections.abc import Mapping

from .rest import AsyncRestClient, RestClient

MESSAGING_RESOURCE = "/v1/messaging"
MESSAGING_STATUS_RESOURCE = "/v1/messaging/{reference_id}"


class MessagingMixin:
    """
    Messaging operations for any REST client.

    Methods return whatever the underlying ``post``/``get`` return: a
    ``TelesignResponse`` on ``RestClient`` and an awaitable of one on
    ``AsyncRestClient``.
    """

    def message(
        self,
        phone_number: str,
        message: str,
        message_type: str,
        parameters: Mapping[str, str] | None = None,
    ):
        """
        Send a message to the target phone_number.

        Args:
            phone_number: Destination phone number, e.g. "+15551234567"
            message: Message text
            message_type: "ARN" (alerts, reminders, notifications), "OTP" or "MKT"
            parameters: Additional request parameters (not modified)
        """
        payload = dict(parameters or {})
        payload["phone_number"] = phone_number
        payload["message"] = message
        payload["message_type"] = message_type

        return self.post(MESSAGING_RESOURCE, payload)

    def status(self, reference_id: str, parameters: Mapping[str, str] | None = None):
        """Retrieve the current status of the message."""
        return self.get(
            MESSAGING_STATUS_RESOURCE.format(reference_id=reference_id), parameters
        )


class MessagingClient(MessagingMixin, RestClient):
    """Blocking Messaging API client."""


class AsyncMessagingClient(MessagingMixin, AsyncRestClient):
    """Async Messaging API client; ``message`` and ``status`` must be awaited."""
