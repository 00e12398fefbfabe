"""
Access Domain

Upload authorization against the configured token list.
"""

from .services import BEARER_PREFIX, TokenAuthorizer, extract_credential

__all__ = ["BEARER_PREFIX", "TokenAuthorizer", "extract_credential"]
