"""Shared fixtures for notification gateway tests."""

import itertools

import pytest
from botocore.exceptions import ClientError

from src.gateway import NotificationGateway


class FakeSNSClient:
    """In-memory stand-in for the boto3 SNS client.

    Topic creation is idempotent per name, as on SNS, and every call is
    recorded in ``calls`` as ``(operation, kwargs)``.
    """

    ARN_PREFIX = "arn:aws:sns:us-west-2:123456789012:"

    def __init__(self, page_size=100):
        self.topics = {}
        self.calls = []
        self.page_size = page_size
        self._ids = itertools.count(1)

    def create_topic(self, Name):
        self.calls.append(("create_topic", {"Name": Name}))
        if Name not in self.topics:
            self.topics[Name] = self.ARN_PREFIX + Name
        return {"TopicArn": self.topics[Name]}

    def delete_topic(self, TopicArn):
        self.calls.append(("delete_topic", {"TopicArn": TopicArn}))
        for name, arn in list(self.topics.items()):
            if arn == TopicArn:
                del self.topics[name]
        return {"ResponseMetadata": {"HTTPStatusCode": 200}}

    def list_topics(self, **kwargs):
        self.calls.append(("list_topics", kwargs))
        arns = sorted(self.topics.values())
        start = int(kwargs.get("NextToken", 0))
        page = arns[start:start + self.page_size]
        response = {"Topics": [{"TopicArn": arn} for arn in page]}
        if start + self.page_size < len(arns):
            response["NextToken"] = str(start + self.page_size)
        return response

    def publish(self, **kwargs):
        self.calls.append(("publish", kwargs))
        return {"MessageId": f"msg-{next(self._ids)}"}

    def subscribe(self, **kwargs):
        self.calls.append(("subscribe", kwargs))
        if kwargs["TopicArn"] not in self.topics.values():
            raise ClientError(
                {"Error": {"Code": "NotFound", "Message": "Topic does not exist"}},
                "Subscribe",
            )
        return {"SubscriptionArn": "pending confirmation"}

    def confirm_subscription(self, Token, TopicArn):
        self.calls.append(("confirm_subscription", {"Token": Token, "TopicArn": TopicArn}))
        return {"SubscriptionArn": f"{TopicArn}:sub-{Token}"}

    def operations(self):
        return [operation for operation, _ in self.calls]


@pytest.fixture
def fake_sns():
    return FakeSNSClient()


@pytest.fixture
def gateway_settings():
    return {
        "platform": "HTTP",
        "region": "us-west-2",
        "access_key_id": "AKIAEXAMPLE",
        "secret_access_key": "secret",
    }


@pytest.fixture
def gateway(fake_sns, gateway_settings):
    return NotificationGateway(sns_client=fake_sns, **gateway_settings)
