"""Frontmatter parsing, serialization and document reading."""

import logging
from dataclasses import dataclass, field

import yaml

log = logging.getLogger(__name__)

DELIMITER = "---"
BOM = "\ufeff"


class FrontmatterError(ValueError):
    """The frontmatter block exists but is not a YAML mapping."""


@dataclass
class Document:
    path: str
    metadata: dict = field(default_factory=dict)
    body: str = ""


@dataclass
class ReadFailure:
    path: str
    error: str


def parse_frontmatter(content: str) -> tuple[dict, str]:
    """Extract YAML frontmatter and body from file content.

    Content without an opening or closing delimiter line has no frontmatter.
    The body is everything after the closing delimiter line, byte for byte.
    A leading UTF-8 BOM is dropped and never returned as part of the body.
    """
    if content.startswith(BOM):
        content = content[len(BOM) :]
    lines = content.split("\n")
    if lines[0].strip() != DELIMITER:
        return {}, content

    end_idx = None
    for i, line in enumerate(lines[1:], 1):
        if line.strip() == DELIMITER:
            end_idx = i
            break

    if end_idx is None:
        return {}, content

    try:
        raw = yaml.safe_load("\n".join(lines[1:end_idx]))
    except yaml.YAMLError as e:
        raise FrontmatterError(f"Invalid YAML in frontmatter: {e}") from e
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise FrontmatterError(f"Frontmatter must be a mapping, got {type(raw).__name__}")

    body = "\n".join(lines[end_idx + 1 :])
    return raw, body


def dump_frontmatter(metadata: dict, body: str) -> str:
    """Serialize metadata (in its key order) followed by the untouched body."""
    if not metadata:
        return f"{DELIMITER}\n{DELIMITER}\n{body}"
    fm = yaml.safe_dump(metadata, sort_keys=False, allow_unicode=True)
    return f"{DELIMITER}\n{fm}{DELIMITER}\n{body}"


def read_document(path: str) -> Document | ReadFailure:
    """Read and parse a document. Failures come back as ReadFailure, never as empty metadata."""
    try:
        with open(path, encoding="utf-8") as f:
            content = f.read()
        metadata, body = parse_frontmatter(content)
    except (OSError, UnicodeDecodeError, FrontmatterError) as e:
        log.error("Error while processing %s: %s", path, e)
        return ReadFailure(path=str(path), error=str(e))
    return Document(path=str(path), metadata=metadata, body=body)
