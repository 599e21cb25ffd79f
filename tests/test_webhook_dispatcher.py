"""Unit tests for inbound webhook dispatch."""

import io
import json
from concurrent.futures import ThreadPoolExecutor

import pytest
from unittest.mock import Mock
from botocore.exceptions import ClientError, ParamValidationError

from src.webhooks.dispatcher import (
    PayloadParseError,
    SubscriptionConfirmationRequest,
    UnrecognizedPayloadTypeError,
    WebhookDispatcher,
    WebhookError,
    WebhookMessageType,
    WebhookResult,
)


CONFIRMATION = {
    "Type": "SubscriptionConfirmation",
    "Token": "T1",
    "TopicArn": "arn:1",
    "SubscribeURL": "https://sns.us-west-2.amazonaws.com/?Action=ConfirmSubscription",
}


@pytest.fixture
def mock_sns_client():
    client = Mock()
    client.confirm_subscription.return_value = {"SubscriptionArn": "arn:1:sub"}
    return client


@pytest.fixture
def dispatcher(mock_sns_client):
    return WebhookDispatcher(mock_sns_client)


class TestWebhookDispatcher:
    """Test cases for WebhookDispatcher class."""

    def test_notification(self, dispatcher, mock_sns_client):
        """Test notifications are returned with the original payload."""
        result = dispatcher.dispatch(b'{"Type":"Notification","Message":"hi"}')

        assert result == WebhookResult(
            WebhookMessageType.NOTIFICATION, {"Type": "Notification", "Message": "hi"}
        )
        assert mock_sns_client.method_calls == []

    def test_subscription_confirmation(self, dispatcher, mock_sns_client):
        """Test confirmations make exactly one confirm call."""
        result = dispatcher.dispatch(json.dumps(CONFIRMATION).encode())

        mock_sns_client.confirm_subscription.assert_called_once_with(
            Token="T1", TopicArn="arn:1"
        )
        assert result.kind is WebhookMessageType.SUBSCRIPTION_CONFIRMATION
        assert result.data == {"SubscriptionArn": "arn:1:sub"}

    def test_confirmation_backend_error(self, dispatcher, mock_sns_client):
        """Test confirm failures propagate unchanged."""
        error = ClientError({"Error": {"Code": "AuthorizationError"}}, "ConfirmSubscription")
        mock_sns_client.confirm_subscription.side_effect = error

        with pytest.raises(ClientError) as exc_info:
            dispatcher.dispatch(json.dumps(CONFIRMATION))

        assert exc_info.value is error

    @pytest.mark.parametrize("missing", ["Token", "TopicArn"])
    def test_confirmation_missing_field(self, dispatcher, mock_sns_client, missing):
        """Test an incomplete confirmation surfaces the client's parameter error."""
        payload = {k: v for k, v in CONFIRMATION.items() if k != missing}
        error = ParamValidationError(report=f"Invalid type for parameter {missing}, value: None")
        mock_sns_client.confirm_subscription.side_effect = error

        with pytest.raises(ParamValidationError) as exc_info:
            dispatcher.dispatch(json.dumps(payload))

        assert exc_info.value is error
        kwargs = mock_sns_client.confirm_subscription.call_args.kwargs
        assert kwargs[missing] is None

    def test_chunks_joined_in_order(self, dispatcher):
        """Test a body split across chunks is parsed as a whole."""
        chunks = [b'{"Type": "Noti', b'fication", "Mess', b'age": "split"}']

        result = dispatcher.dispatch(iter(chunks))

        assert result.data["Message"] == "split"

    def test_mixed_str_and_bytes_chunks(self, dispatcher):
        """Test str chunks are accepted alongside bytes."""
        result = dispatcher.dispatch(['{"Type": ', b'"Notification"}'])

        assert result.kind is WebhookMessageType.NOTIFICATION

    def test_file_like_body(self, dispatcher):
        """Test bodies exposing read() are consumed."""
        body = io.BytesIO(b'{"Type": "Notification", "Message": "stream"}')

        result = dispatcher.dispatch(body)

        assert result.data["Message"] == "stream"

    def test_text_stream_body(self, dispatcher):
        """Test text-mode streams are consumed."""
        body = io.StringIO('{"Type": "Notification", "Message": "text"}')

        result = dispatcher.dispatch(body)

        assert result.data["Message"] == "text"

    def test_unicode_payload(self, dispatcher):
        """Test multi-byte characters split across chunks decode correctly."""
        raw = json.dumps({"Type": "Notification", "Message": "héllo"}, ensure_ascii=False).encode()
        split = raw.index(b"\xc3") + 1

        result = dispatcher.dispatch([raw[:split], raw[split:]])

        assert result.data["Message"] == "héllo"

    @pytest.mark.parametrize("body", [b"{not json", b"", b"\xff\xfe", "{"])
    def test_malformed_body(self, dispatcher, mock_sns_client, body):
        """Test unparseable bodies raise PayloadParseError without backend calls."""
        with pytest.raises(PayloadParseError):
            dispatcher.dispatch(body)

        assert mock_sns_client.method_calls == []

    @pytest.mark.parametrize("body", [
        b'{"Type": "Unknown"}',
        b'{"Message": "no type"}',
        b'{"Type": "UnsubscribeConfirmation", "Token": "T1", "TopicArn": "arn:1"}',
        b'{"Type": null}',
        b'["Notification"]',
        b'"Notification"',
    ])
    def test_unrecognized_type(self, dispatcher, mock_sns_client, body):
        """Test unknown or missing discriminants are rejected without backend calls."""
        with pytest.raises(UnrecognizedPayloadTypeError):
            dispatcher.dispatch(body)

        assert mock_sns_client.method_calls == []

    def test_errors_share_base_class(self):
        """Test webhook errors derive from WebhookError."""
        assert issubclass(PayloadParseError, WebhookError)
        assert issubclass(UnrecognizedPayloadTypeError, WebhookError)

    def test_confirmation_request_from_payload(self):
        """Test token and topic extraction."""
        request = SubscriptionConfirmationRequest.from_payload(CONFIRMATION)

        assert request == SubscriptionConfirmationRequest(token="T1", topic_arn="arn:1")

    def test_concurrent_dispatches_are_independent(self, dispatcher, mock_sns_client):
        """Test concurrent requests do not leak state into each other."""
        bodies = []
        for i in range(50):
            if i % 2:
                bodies.append([b'{"Type": "Notification", ', f'"Message": "{i}"}}'.encode()])
            else:
                bodies.append([json.dumps({
                    "Type": "SubscriptionConfirmation", "Token": f"T{i}", "TopicArn": "arn:1"
                }).encode()])

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(dispatcher.dispatch, bodies))

        for i, result in enumerate(results):
            if i % 2:
                assert result.kind is WebhookMessageType.NOTIFICATION
                assert result.data["Message"] == str(i)
            else:
                assert result.kind is WebhookMessageType.SUBSCRIPTION_CONFIRMATION

        tokens = sorted(c.kwargs["Token"] for c in mock_sns_client.confirm_subscription.call_args_list)
        assert tokens == sorted(f"T{i}" for i in range(0, 50, 2))
