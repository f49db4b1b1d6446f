from __future__ import annotations

import time
from dataclasses import dataclass

from mailauth.token_codec import ClaimSet, DecodeFailure, decode_token


@dataclass
class Proceed:
    claims: ClaimSet


@dataclass
class NeedsAuth:
    reason: str


def resolve(stored_token: str | None, *, now: float | None = None) -> Proceed | NeedsAuth:
    """Decide whether a stored token can be used as-is.

    ``now`` and the ``exp`` claim are both epoch seconds. The token must
    expire strictly after ``now``.
    """
    if not stored_token:
        return NeedsAuth("missing")

    decoded = decode_token(stored_token)
    if isinstance(decoded, DecodeFailure):
        return NeedsAuth("malformed")

    current = time.time() if now is None else now
    if not decoded.expiry > current:
        return NeedsAuth("expired")
    return Proceed(decoded)
