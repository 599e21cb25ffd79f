"""JSON-structured message publishing to SNS topics and targets."""

from dataclasses import dataclass
from typing import Any, Dict, Optional
import json
import logging


logger = logging.getLogger(__name__)


class MessageValidationError(Exception):
    """Raised when a message is rejected before it is sent."""
    pass


class MissingDestinationError(MessageValidationError):
    """Raised when neither topic_arn nor target_arn is set."""
    pass


class ConflictingDestinationError(MessageValidationError):
    """Raised when both topic_arn and target_arn are set."""
    pass


class InvalidMessageBodyError(MessageValidationError):
    """Raised when the payload is missing or not a JSON structure."""
    pass


@dataclass
class OutboundMessage:
    """A payload and the single topic or target it is published to."""

    payload: Any
    topic_arn: Optional[str] = None
    target_arn: Optional[str] = None


class Publisher:
    """Publishes JSON-structured messages through a shared SNS client."""

    # SNS reads the Message field as a JSON document when this is set
    MESSAGE_STRUCTURE = "json"

    def __init__(self, sns_client: Any) -> None:
        """Initialize publisher.

        Args:
            sns_client: boto3 SNS client or an object with the same methods
        """
        self.sns_client = sns_client

    @staticmethod
    def validate(message: OutboundMessage) -> str:
        """Check destination and payload without touching the network.

        Returns:
            The payload encoded as a JSON string

        Raises:
            MissingDestinationError: When no destination is set
            ConflictingDestinationError: When both destinations are set
            InvalidMessageBodyError: When payload is not a dict or list, or
                holds values JSON cannot encode
        """
        if not message.topic_arn and not message.target_arn:
            raise MissingDestinationError(
                "Either `topic_arn` or `target_arn` needs to be defined."
            )
        if message.topic_arn and message.target_arn:
            raise ConflictingDestinationError(
                "Only one of `topic_arn` and `target_arn` may be defined."
            )
        if not isinstance(message.payload, (dict, list)):
            raise InvalidMessageBodyError(
                "Either missing `payload` or it's not a JSON object."
            )

        try:
            return json.dumps(message.payload)
        except (TypeError, ValueError) as e:
            raise InvalidMessageBodyError(f"Payload is not JSON serializable: {e}") from e

    def build_envelope(self, message: OutboundMessage, encoded: str) -> Dict[str, str]:
        """Build the publish request parameters for a validated message."""
        envelope = {
            "Message": encoded,
            "MessageStructure": self.MESSAGE_STRUCTURE,
        }

        if message.topic_arn:
            envelope["TopicArn"] = message.topic_arn
        else:
            envelope["TargetArn"] = message.target_arn

        return envelope

    def publish(self, message: OutboundMessage) -> Dict[str, Any]:
        """Validate and publish a message.

        Args:
            message: Message to publish

        Returns:
            Backend response, including the MessageId

        Raises:
            MessageValidationError: When the message is rejected locally
            ClientError: When the backend call fails
        """
        encoded = self.validate(message)
        envelope = self.build_envelope(message, encoded)

        response = self.sns_client.publish(**envelope)

        destination = envelope.get("TopicArn") or envelope.get("TargetArn")
        logger.info(f"Published message {response.get('MessageId')} to {destination}")
        return response
