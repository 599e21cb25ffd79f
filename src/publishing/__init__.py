"""Outbound message publishing."""
