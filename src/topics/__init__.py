"""SNS topic and subscription management."""
