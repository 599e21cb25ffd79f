"""Core components for the SNS notification gateway.

This module contains configuration handling, validation and SNS client
construction shared by the rest of the package.
"""
