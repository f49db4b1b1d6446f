from __future__ import annotations

import urllib.parse


def get_query_param(url: str, name: str) -> str | None:
    try:
        parsed = urllib.parse.urlparse(url)
    except ValueError:
        return None

    values = urllib.parse.parse_qs(parsed.query, keep_blank_values=True).get(name)
    if not values:
        return None
    return values[0] or None


def strip_query_param(url: str, name: str) -> str:
    """Drop every ``name=...`` pair, leaving the other pairs byte-for-byte."""
    parsed = urllib.parse.urlparse(url)
    kept = [
        pair
        for pair in parsed.query.split("&")
        if pair and urllib.parse.unquote_plus(pair.partition("=")[0]) != name
    ]
    return urllib.parse.urlunparse(parsed._replace(query="&".join(kept)))


def join_url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"
