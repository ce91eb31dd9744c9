"""
API Middleware

- error_handler: maps exceptions to the JSON error envelope
- request_context: request id on every log line and in X-Request-ID
"""

from src.api.middleware.error_handler import setup_exception_handlers
from src.api.middleware.request_context import setup_request_context

__all__ = ["setup_exception_handlers", "setup_request_context"]
