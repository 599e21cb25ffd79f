"""SNS topic and subscription lifecycle management.

This module resolves topic names to ARNs, creates and deletes topics,
pages through the topic listing and subscribes endpoints to topics.
Backend failures are raised as the botocore exceptions they arrive as.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional
import logging


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Topic:
    """A named SNS topic and its backend-assigned ARN."""

    name: str
    arn: str

    @classmethod
    def from_arn(cls, arn: str) -> "Topic":
        """Build a topic from an ARN, taking the name from its last segment."""
        return cls(name=arn.rsplit(":", 1)[-1], arn=arn)


@dataclass
class TopicPage:
    """One page of a topic listing."""

    topics: List[Topic] = field(default_factory=list)
    next_token: Optional[str] = None


class TopicManager:
    """Manages SNS topics and subscriptions through one shared client."""

    def __init__(self, sns_client: Any) -> None:
        """Initialize topic manager.

        Args:
            sns_client: boto3 SNS client or an object with the same methods
        """
        self.sns_client = sns_client

    def create_topic(self, name: str) -> Topic:
        """Create a topic, or return the existing one with this name.

        Args:
            name: Topic name, unique within the account and region

        Returns:
            Topic carrying the backend-assigned ARN

        Raises:
            ClientError: When the backend call fails
        """
        response = self.sns_client.create_topic(Name=name)
        topic = Topic(name=name, arn=response["TopicArn"])

        logger.info(f"Resolved topic {name} to {topic.arn}")
        return topic

    def get_topic(self, name: str) -> Topic:
        """Resolve a topic name to its ARN.

        SNS returns the existing topic when asked to create a name that
        already exists, so this is the same call as ``create_topic``.
        Both names are kept so call sites can say which one they mean.
        """
        return self.create_topic(name)

    def delete_topic(self, name: str) -> Dict[str, Any]:
        """Delete a topic and, on the backend, all of its subscriptions.

        Args:
            name: Topic name

        Returns:
            Backend response

        Raises:
            ClientError: When resolving or deleting fails
        """
        topic = self.get_topic(name)
        response = self.sns_client.delete_topic(TopicArn=topic.arn)

        logger.info(f"Deleted topic {name} ({topic.arn})")
        return response

    def list_topics(self, next_token: Optional[str] = None) -> TopicPage:
        """List one page of topics.

        Args:
            next_token: Continuation token from a previous page. Empty or
                None requests the first page.

        Returns:
            TopicPage with the topics and the token for the next page

        Raises:
            ClientError: When the backend call fails
        """
        params = {}
        if next_token:
            params["NextToken"] = next_token

        response = self.sns_client.list_topics(**params)

        topics = [Topic.from_arn(t["TopicArn"]) for t in response.get("Topics", [])]
        return TopicPage(topics=topics, next_token=response.get("NextToken") or None)

    def iter_topics(self) -> Iterator[Topic]:
        """Yield every topic, following continuation tokens."""
        next_token = None
        while True:
            page = self.list_topics(next_token)
            yield from page.topics

            if not page.next_token:
                return
            next_token = page.next_token

    def create_subscription(
        self, protocol: str, topic_arn: str, endpoint: str
    ) -> Dict[str, Any]:
        """Subscribe an endpoint to an existing topic.

        HTTP and HTTPS endpoints receive a SubscriptionConfirmation
        callback that the webhook dispatcher answers.

        Args:
            protocol: Delivery protocol (e.g., 'http', 'https')
            topic_arn: ARN of the topic to subscribe to
            endpoint: Endpoint that receives deliveries

        Returns:
            Backend response, including the SubscriptionArn

        Raises:
            ClientError: When the backend call fails
        """
        response = self.sns_client.subscribe(
            Protocol=protocol,
            TopicArn=topic_arn,
            Endpoint=endpoint,
        )

        logger.info(f"Requested {protocol} subscription of {endpoint} to {topic_arn}")
        return response
