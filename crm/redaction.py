import re
from typing import Any

SENSITIVE_FIELDS = ("email", "phone", "ssn", "creditcard", "password", "token")

_PHONE_RE = re.compile(r"^\+?\d+$")


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(field in lowered for field in SENSITIVE_FIELDS)


def _mask(value: Any) -> Any:
    if not isinstance(value, str):
        return "***"
    if "@" in value:
        username, _, domain = value.partition("@")
        return f"{username[:2]}***@{domain}"
    if _PHONE_RE.match(value):
        return f"***{value[-4:]}"
    return "***"


def redact_sensitive_data(data: Any) -> Any:
    """
    Return a copy of data with sensitive values masked.

    Keys are matched case-insensitively by substring, so "contactEmail" and
    "api_token" are both masked. Nested dicts and lists are walked; the input
    is never mutated.
    """
    if isinstance(data, dict):
        redacted = {}
        for key, value in data.items():
            if isinstance(key, str) and _is_sensitive(key):
                redacted[key] = _mask(value)
            else:
                redacted[key] = redact_sensitive_data(value)
        return redacted
    if isinstance(data, (list, tuple)):
        return [redact_sensitive_data(item) for item in data]
    return data
