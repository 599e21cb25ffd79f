"""Inbound SNS webhook handling."""
