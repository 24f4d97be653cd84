"""Inbound webhooks from third-party services (email relay)."""
