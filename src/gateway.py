"""Notification gateway facade.

Composes configuration validation, topic management, publishing and
webhook dispatch around one SNS client.
"""

from typing import Any, Dict, Optional
import logging

from src.core.aws_client import AWSClientManager
from src.core.config import (
    SUPPORTED_PLATFORMS,
    SUPPORTED_REGIONS,
    GatewayConfig,
    validate_config,
)
from src.publishing.publisher import OutboundMessage, Publisher
from src.topics.manager import Topic, TopicManager, TopicPage
from src.webhooks.dispatcher import Body, WebhookDispatcher, WebhookResult


logger = logging.getLogger(__name__)


class NotificationGateway:
    """Pub/sub gateway over Amazon SNS.

    The configuration is validated before any client is built; an
    unsupported platform, region or credential raises a
    ``ConfigurationError`` subclass and no gateway is produced.
    """

    SUPPORTED_PLATFORMS = SUPPORTED_PLATFORMS
    SUPPORTED_REGIONS = SUPPORTED_REGIONS

    def __init__(
        self,
        platform: str,
        region: str,
        access_key_id: str,
        secret_access_key: str,
        api_version: Optional[str] = None,
        sns_client: Optional[Any] = None,
    ) -> None:
        """Initialize notification gateway.

        Args:
            platform: Subscription platform, one of SUPPORTED_PLATFORMS
            region: AWS region, one of SUPPORTED_REGIONS
            access_key_id: AWS access key id
            secret_access_key: AWS secret access key
            api_version: Optional SNS API version to pin
            sns_client: Optional preconfigured client to use instead of
                building one from the credentials

        Raises:
            ConfigurationError: When the configuration is not supported
        """
        self.config = GatewayConfig(
            platform=platform,
            region=region,
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            api_version=api_version,
        )
        validate_config(self.config)

        if sns_client is None:
            sns_client = AWSClientManager(self.config).get_client()
        self.sns_client = sns_client

        self.topics = TopicManager(self.sns_client)
        self.publisher = Publisher(self.sns_client)
        self.webhooks = WebhookDispatcher(self.sns_client)

        logger.debug(f"Notification gateway ready for {self.config.region}")

    @classmethod
    def from_config(
        cls, config: GatewayConfig, sns_client: Optional[Any] = None
    ) -> "NotificationGateway":
        """Create a gateway from an existing GatewayConfig."""
        return cls(
            platform=config.platform,
            region=config.region,
            access_key_id=config.access_key_id,
            secret_access_key=config.secret_access_key,
            api_version=config.api_version,
            sns_client=sns_client,
        )

    @property
    def platform(self) -> str:
        return self.config.platform

    def get_region(self) -> str:
        """Get the region this gateway talks to."""
        return self.config.region

    def get_api_version(self) -> Optional[str]:
        """Get the pinned SNS API version, or None for the latest."""
        return self.config.api_version

    def publish_message(
        self,
        message: Any,
        topic_arn: Optional[str] = None,
        target_arn: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Publish a JSON-structured message to a topic or a direct target.

        Raises:
            MessageValidationError: When the message is rejected locally
            ClientError: When the backend call fails
        """
        return self.publisher.publish(
            OutboundMessage(payload=message, topic_arn=topic_arn, target_arn=target_arn)
        )

    def list_topics(self, next_token: Optional[str] = None) -> TopicPage:
        return self.topics.list_topics(next_token)

    def create_topic(self, name: str) -> Topic:
        return self.topics.create_topic(name)

    def get_topic(self, name: str) -> Topic:
        return self.topics.get_topic(name)

    def delete_topic(self, name: str) -> Dict[str, Any]:
        return self.topics.delete_topic(name)

    def create_subscription(
        self, protocol: str, topic_arn: str, endpoint: str
    ) -> Dict[str, Any]:
        return self.topics.create_subscription(protocol, topic_arn, endpoint)

    def handle_webhook(self, body: Body) -> WebhookResult:
        """Classify an inbound SNS request body and act on it.

        The caller's web framework still owes SNS a 200 response,
        whether this returns or raises.
        """
        return self.webhooks.dispatch(body)
