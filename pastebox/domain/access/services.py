"""
Access Services

Static bearer-token authorization for uploads.
"""

from secrets import compare_digest
from typing import Iterable, Optional, Tuple

BEARER_PREFIX = "Bearer "


class TokenAuthorizer:
    """
    Checks a presented credential against a fixed allow-list.

    The allow-list is copied at construction and never changes afterwards.
    """

    def __init__(self, tokens: Iterable[str]):
        self._tokens: Tuple[str, ...] = tuple(token for token in tokens if token)

    @property
    def tokens(self) -> Tuple[str, ...]:
        return self._tokens

    def authorize(self, presented: Optional[str]) -> bool:
        """
        True iff ``presented`` exactly equals one configured token.

        A missing or empty credential is never authorized.
        """
        if not presented or not isinstance(presented, str):
            return False

        candidate = presented.encode("utf-8")
        matched = False
        # Compare against every entry so timing does not reveal the position.
        for token in self._tokens:
            if compare_digest(token.encode("utf-8"), candidate):
                matched = True
        return matched


def extract_credential(
    form_token: Optional[str] = None,
    authorization_header: Optional[str] = None,
) -> Optional[str]:
    """
    Pick the credential presented by a request.

    The ``token`` form field wins; otherwise the Authorization header is
    used, with a literal ``"Bearer "`` prefix stripped when present.
    """
    if form_token:
        return form_token

    if authorization_header:
        if authorization_header.startswith(BEARER_PREFIX):
            return authorization_header[len(BEARER_PREFIX):] or None
        return authorization_header

    return None
