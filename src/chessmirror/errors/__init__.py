# pylint: disable=duplicate-code,R0801
"""Custom error types used in chessmirror."""

import requests


class ChessmirrorError(Exception):
    """Base error for chessmirror."""


class RateLimitError(requests.HTTPError):
    """HTTP rate limit error."""
