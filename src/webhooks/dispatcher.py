"""Inbound SNS webhook classification and dispatch.

SNS delivers both subscription confirmation handshakes and topic
notifications as POST requests to the same endpoint URL. This module
reads a request body, classifies it by its ``Type`` field and either
confirms the subscription with SNS or hands the notification back to
the caller.

The dispatcher never writes an HTTP response. The web framework that
received the request acknowledges it with a 200 regardless of the
dispatch outcome, so SNS does not redeliver.
"""

from dataclasses import dataclass
from enum import Enum
from typing import IO, Any, Dict, Iterable, Optional, Union
import json
import logging


logger = logging.getLogger(__name__)


class WebhookError(Exception):
    """Base exception for inbound webhook handling."""
    pass


class PayloadParseError(WebhookError):
    """Raised when a request body is not valid JSON."""
    pass


class UnrecognizedPayloadTypeError(WebhookError):
    """Raised when a payload has no known ``Type`` discriminant."""
    pass


class WebhookMessageType(Enum):
    """Inbound message types the dispatcher handles."""

    SUBSCRIPTION_CONFIRMATION = "SubscriptionConfirmation"
    NOTIFICATION = "Notification"


@dataclass(frozen=True)
class SubscriptionConfirmationRequest:
    """Token and topic taken from a SubscriptionConfirmation payload."""

    token: Optional[str]
    topic_arn: Optional[str]

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "SubscriptionConfirmationRequest":
        return cls(token=payload.get("Token"), topic_arn=payload.get("TopicArn"))


@dataclass(frozen=True)
class WebhookResult:
    """Outcome of one dispatch: the message type and its data.

    For a confirmation ``data`` is the ConfirmSubscription response; for
    a notification it is the parsed payload.
    """

    kind: WebhookMessageType
    data: Any


Body = Union[bytes, str, IO, Iterable[Union[bytes, str]]]


class WebhookDispatcher:
    """Classifies inbound SNS webhook bodies and routes them."""

    def __init__(self, sns_client: Any) -> None:
        """Initialize webhook dispatcher.

        Args:
            sns_client: boto3 SNS client used to confirm subscriptions
        """
        self.sns_client = sns_client

    def dispatch(self, body: Body) -> WebhookResult:
        """Handle one inbound webhook request body.

        Args:
            body: The request body as bytes or str, a file-like object
                with ``read()``, or an iterable of chunks in arrival order

        Returns:
            WebhookResult tagged with the message type

        Raises:
            PayloadParseError: When the body is not valid JSON
            UnrecognizedPayloadTypeError: When ``Type`` is missing or unknown
            ClientError: When confirming the subscription fails
        """
        payload = self.parse(self.read_body(body))
        message_type = self.classify(payload)

        if message_type is WebhookMessageType.SUBSCRIPTION_CONFIRMATION:
            return self._confirm_subscription(payload)
        return self._handle_notification(payload)

    @staticmethod
    def read_body(body: Body) -> bytes:
        """Join every chunk of a request body in arrival order."""
        if hasattr(body, "read"):
            body = body.read()
        if isinstance(body, str):
            return body.encode("utf-8")
        if isinstance(body, (bytes, bytearray)):
            return bytes(body)

        chunks = []
        for chunk in body:
            if isinstance(chunk, str):
                chunk = chunk.encode("utf-8")
            chunks.append(chunk)
        return b"".join(chunks)

    @staticmethod
    def parse(raw: bytes) -> Any:
        """Parse a complete request body as JSON.

        Raises:
            PayloadParseError: When the bytes are not valid UTF-8 JSON
        """
        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            raise PayloadParseError(f"Error parsing JSON: {e}") from e

    @staticmethod
    def classify(payload: Any) -> WebhookMessageType:
        """Read the ``Type`` discriminant before any other field.

        Raises:
            UnrecognizedPayloadTypeError: When the type is absent or unknown
        """
        message_type = payload.get("Type") if isinstance(payload, dict) else None

        for known in WebhookMessageType:
            if message_type == known.value:
                logger.debug(f"Classified webhook payload as {known.value}")
                return known

        raise UnrecognizedPayloadTypeError(
            f"Invalid request: unrecognized message type {message_type!r}"
        )

    def _confirm_subscription(self, payload: Dict[str, Any]) -> WebhookResult:
        request = SubscriptionConfirmationRequest.from_payload(payload)

        response = self.sns_client.confirm_subscription(
            Token=request.token,
            TopicArn=request.topic_arn,
        )

        logger.info(f"Confirmed subscription to {request.topic_arn}")
        return WebhookResult(WebhookMessageType.SUBSCRIPTION_CONFIRMATION, response)

    def _handle_notification(self, payload: Dict[str, Any]) -> WebhookResult:
        # Content handling belongs to the caller
        return WebhookResult(WebhookMessageType.NOTIFICATION, payload)
