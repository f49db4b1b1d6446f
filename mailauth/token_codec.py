from __future__ import annotations

import base64
import binascii
import json
import math
from dataclasses import dataclass, field


@dataclass
class ClaimSet:
    expiry: float
    claims: dict = field(default_factory=dict)


@dataclass
class DecodeFailure:
    reason: str


def _b64url_decode(segment: str) -> bytes:
    padding = "=" * (-len(segment) % 4)
    return base64.urlsafe_b64decode(segment + padding)


def decode_token(token: str | None) -> ClaimSet | DecodeFailure:
    """Decode the claims of a JWT-shaped token without verifying its signature.

    The client never holds the provider's signing key, so only the payload
    segment is read. Every malformed input yields a DecodeFailure.
    """
    if not isinstance(token, str) or not token:
        return DecodeFailure("Token is empty.")

    parts = token.split(".")
    if len(parts) != 3:
        return DecodeFailure("Invalid token format.")

    try:
        data = _b64url_decode(parts[1])
    except (binascii.Error, ValueError):
        return DecodeFailure("Token payload is not valid base64url.")

    try:
        payload = json.loads(data)
    except (UnicodeDecodeError, ValueError):
        return DecodeFailure("Token payload is not valid JSON.")

    if not isinstance(payload, dict):
        return DecodeFailure("Token payload must be a JSON object.")

    exp = payload.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return DecodeFailure("Token payload missing numeric exp.")
    if not math.isfinite(exp):
        return DecodeFailure("Token exp must be a finite number.")

    return ClaimSet(expiry=float(exp), claims=payload)
