"""
Webhook Package

This package contains webhook handling components:
- handler: FastAPI route handlers and dependencies
- processor: conch answering logic
"""

from magic_conch.webhook.handler import MalformedPayloadError, router

__all__ = ["MalformedPayloadError", "router"]
