"""SNS Notification Gateway - Main Package.

This package manages Amazon SNS topics, publishes JSON-structured
messages and dispatches inbound SNS webhook callbacks.
"""

__version__ = "1.0.0"
__author__ = "SNS Notification Gateway Team"
