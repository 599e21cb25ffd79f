#!/usr/bin/env python3
"""SNS Notification Gateway - Command Line Entry Point.

Manage topics, publish messages and replay webhook bodies against
Amazon SNS using the settings from a YAML configuration file.
"""

import sys
import json
import argparse
import logging
from typing import List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from src import __version__
from src.core.config import Configuration, ConfigurationError
from src.gateway import NotificationGateway
from src.publishing.publisher import MessageValidationError
from src.webhooks.dispatcher import WebhookError


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description="SNS Notification Gateway",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s list-topics                              # First page of topics
  %(prog)s create-topic orders                      # Create or resolve a topic
  %(prog)s publish --topic-arn ARN '{"default": "hi"}'
  %(prog)s handle-webhook < body.json               # Replay a webhook body
        """,
    )

    parser.add_argument(
        "--config",
        help="Path to configuration file (default: auto-detect config.yaml)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"SNS Notification Gateway v{__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list-topics", help="List one page of topics")
    list_parser.add_argument("--next-token", help="Continuation token from a previous page")

    for name, help_text in (
        ("create-topic", "Create a topic or return the existing one"),
        ("get-topic", "Resolve a topic name to its ARN"),
        ("delete-topic", "Delete a topic and its subscriptions"),
    ):
        topic_parser = subparsers.add_parser(name, help=help_text)
        topic_parser.add_argument("name", help="Topic name")

    publish_parser = subparsers.add_parser("publish", help="Publish a JSON message")
    destination = publish_parser.add_mutually_exclusive_group(required=True)
    destination.add_argument("--topic-arn", help="Topic to publish to")
    destination.add_argument("--target-arn", help="Direct target to publish to")
    publish_parser.add_argument("message", help="Message as a JSON object")

    subscribe_parser = subparsers.add_parser("subscribe", help="Subscribe an endpoint")
    subscribe_parser.add_argument("protocol", help="Delivery protocol (e.g., http)")
    subscribe_parser.add_argument("topic_arn", help="Topic to subscribe to")
    subscribe_parser.add_argument("endpoint", help="Endpoint receiving deliveries")

    webhook_parser = subparsers.add_parser(
        "handle-webhook", help="Dispatch a webhook body read from a file or stdin"
    )
    webhook_parser.add_argument(
        "file", nargs="?", help="File holding the request body (default: stdin)"
    )

    return parser.parse_args(argv)


def run_command(gateway: NotificationGateway, args: argparse.Namespace) -> None:
    """Run the selected subcommand and print its result."""
    if args.command == "list-topics":
        page = gateway.list_topics(args.next_token)
        for topic in page.topics:
            print(f"📣 {topic.name}: {topic.arn}")
        if page.next_token:
            print(f"   Next token: {page.next_token}")

    elif args.command in ("create-topic", "get-topic"):
        operation = gateway.create_topic if args.command == "create-topic" else gateway.get_topic
        topic = operation(args.name)
        print(f"✅ {topic.name}: {topic.arn}")

    elif args.command == "delete-topic":
        gateway.delete_topic(args.name)
        print(f"✅ Deleted topic {args.name}")

    elif args.command == "publish":
        try:
            message = json.loads(args.message)
        except ValueError as e:
            raise MessageValidationError(f"Message is not valid JSON: {e}")
        response = gateway.publish_message(
            message, topic_arn=args.topic_arn, target_arn=args.target_arn
        )
        print(f"✅ Published message {response['MessageId']}")

    elif args.command == "subscribe":
        response = gateway.create_subscription(args.protocol, args.topic_arn, args.endpoint)
        print(f"✅ Subscription: {response.get('SubscriptionArn')}")

    elif args.command == "handle-webhook":
        if args.file:
            with open(args.file, "rb") as f:
                result = gateway.handle_webhook(f)
        else:
            result = gateway.handle_webhook(sys.stdin.buffer)
        print(f"✅ {result.kind.value}")
        print(json.dumps(result.data, indent=2, default=str))


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    try:
        args = parse_arguments(argv)

        if args.verbose:
            logging.basicConfig(
                level=logging.DEBUG,
                format="%(asctime)s %(name)s %(levelname)s %(message)s",
            )

        try:
            config = Configuration(args.config).get_gateway_config()
            gateway = NotificationGateway.from_config(config)
        except ConfigurationError as e:
            print(f"❌ Configuration error: {e}")
            return 1

        try:
            run_command(gateway, args)
        except MessageValidationError as e:
            print(f"❌ Invalid message: {e}")
            return 1
        except WebhookError as e:
            print(f"❌ Webhook error: {e}")
            return 1
        except (ClientError, BotoCoreError) as e:
            print(f"❌ SNS request failed: {e}")
            return 1

        return 0

    except KeyboardInterrupt:
        print("\n\n👋 Operation cancelled by user.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
