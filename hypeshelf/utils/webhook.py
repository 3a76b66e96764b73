"""Signature verification for identity provider webhooks"""

import binascii
from datetime import datetime, timezone
from typing import Any, Mapping

from svix.webhooks import Webhook
from svix.webhooks import WebhookVerificationError as SvixVerificationError

from ..exceptions import MalformedEventError, WebhookNotConfiguredError, WebhookVerificationError

REQUIRED_HEADERS = ("svix-id", "svix-timestamp", "svix-signature")


class WebhookVerifier:
    """
    Verifies webhooks signed by the identity provider through Svix

    Svix signs "{svix-id}.{svix-timestamp}.{raw body}" and rejects
    timestamps more than five minutes away from now.
    """

    def __init__(self, secret: str):
        try:
            self._webhook = Webhook(secret)
        except binascii.Error as e:
            raise WebhookNotConfiguredError("Webhook secret is not valid base64") from e

    def sign(self, msg_id: str, timestamp: int, body: bytes) -> str:
        """Compute the svix-signature header entry for a message"""

        return self._webhook.sign(
            msg_id,
            datetime.fromtimestamp(timestamp, tz=timezone.utc),
            body.decode("utf-8"),
        )

    def verify(self, body: bytes, headers: Mapping[str, str]) -> Any:
        """
        Check a webhook request before its body is trusted

        Args:
            body: Raw request body, exactly as received
            headers: Request headers (svix-id, svix-timestamp, svix-signature)

        Returns:
            The decoded JSON payload

        Raises:
            MalformedEventError: If a signature header is missing or the body is not JSON
            WebhookVerificationError: If the timestamp or signature is invalid
        """
        headers = {key.lower(): value for key, value in headers.items()}
        if not all(headers.get(name) for name in REQUIRED_HEADERS):
            raise MalformedEventError("Missing svix headers")

        try:
            return self._webhook.verify(body, headers)
        except SvixVerificationError as e:
            raise WebhookVerificationError(str(e) or "Invalid signature") from e
        except ValueError as e:
            # Body is not UTF-8 JSON; nothing from it is applied
            raise MalformedEventError("Invalid event payload") from e
