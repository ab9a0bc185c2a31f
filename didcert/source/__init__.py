"""
Transaction sources: where record scripts and their metadata come from.
"""

from .indexer import (
    DEFAULT_API_URL,
    TransactionInfo,
    TransactionSource,
    resolve_api_url,
    resolve_timeout,
)

__all__ = [
    "DEFAULT_API_URL",
    "TransactionInfo",
    "TransactionSource",
    "resolve_api_url",
    "resolve_timeout",
]
