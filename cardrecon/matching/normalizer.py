"""Canonical forms of customer, folder and file names used for comparison."""

import re

_SEPARATORS_RE = re.compile(r"[_-]")
_WHITESPACE_RE = re.compile(r"\s+")
_CUSTOMER_PUNCTUATION_RE = re.compile(r"[.,]")
_HASH_TOKEN_RE = re.compile(r"^[a-f0-9]{8,}$", re.IGNORECASE)


def normalize(value: str) -> str:
    """Lower-case, turn ``_``/``-`` into spaces, collapse whitespace, trim."""
    if not value:
        return ""
    spaced = _SEPARATORS_RE.sub(" ", value.lower())
    return _WHITESPACE_RE.sub(" ", spaced).strip()


def normalize_customer_name(value: str) -> str:
    """Stricter form for customer/folder matching: upper-case, no dots or commas."""
    if not value:
        return ""
    spaced = _SEPARATORS_RE.sub(" ", value.upper())
    stripped = _CUSTOMER_PUNCTUATION_RE.sub("", spaced)
    return _WHITESPACE_RE.sub(" ", stripped).strip()


def extract_customer_name(folder_name: str) -> str:
    """Parse ``<CUSTOMER_TOKENS>_<HASH>`` folder names into a customer name.

    Tokens are split on ``_``. The first hash-like token (8+ hex chars) that is
    not the leading token ends the name; everything before it is joined with
    spaces. Folders without a hash keep all of their tokens.
    """
    tokens = folder_name.split("_")
    customer_tokens: list[str] = []
    for index, token in enumerate(tokens):
        if index > 0 and _HASH_TOKEN_RE.match(token):
            break
        customer_tokens.append(token)
    return " ".join(customer_tokens).strip()
