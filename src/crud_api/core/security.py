"""Shared-secret verification for the API-key guard."""

import hmac


def verify_api_key(provided: str | None, expected: str) -> bool:
    """Return True when ``provided`` exactly matches ``expected``.

    An absent header or an unconfigured key never matches. The comparison is
    constant-time.
    """
    if not provided or not expected:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))
