"""Name-based classification of sensitive configuration fields.

Classification looks only at the name, never the value. A name is sensitive when it contains any marker as a
substring, ignoring case. There is no allow-list: GOOGLE_CLIENT_SECRET is sensitive, and so is any unrelated name
that happens to contain "KEY". Over-masking is acceptable; under-masking is not.
"""

SENSITIVE_MARKERS = ("PASSWORD", "SECRET", "KEY", "TOKEN", "CREDENTIAL", "PRIVATE")


def is_sensitive(name: str) -> bool:
    """Returns True if name contains any of SENSITIVE_MARKERS."""
    upper = name.upper()
    return any(marker in upper for marker in SENSITIVE_MARKERS)
