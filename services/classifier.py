"""Content-type classification by path substring."""

from collections.abc import Mapping

DEFAULT_TYPE = "default"


def classify(path: str, patterns: Mapping) -> str:
    """Return the first content type whose patterns occur in *path*, else "default"."""
    normalized = str(path).replace("\\", "/")
    for content_type, substrings in patterns.items():
        if not isinstance(substrings, list | tuple):
            continue
        if any(s.replace("\\", "/") in normalized for s in substrings):
            return content_type
    return DEFAULT_TYPE
