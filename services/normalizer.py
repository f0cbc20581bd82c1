"""Rewrite frontmatter into canonical key order."""

import logging
import os

from config import RuleSet
from services.frontmatter import Document, dump_frontmatter, read_document

log = logging.getLogger(__name__)


def normalize_frontmatter(metadata: dict, canonical_order) -> dict:
    """Return a new mapping: canonical keys first, then the rest in original order."""
    ordered = {}
    for key in canonical_order:
        if key in metadata:
            ordered[key] = metadata[key]
    for key, value in metadata.items():
        if key not in ordered:
            ordered[key] = value
    return ordered


def fix_file(path: str, rules: RuleSet, doc: Document | None = None) -> bool:
    """Reorder a file's frontmatter in place. Returns False when it could not be rewritten.

    Pass the already-parsed *doc* to skip reading the file again.
    """
    if doc is None:
        doc = read_document(path)
        if not isinstance(doc, Document):
            return False

    content = dump_frontmatter(normalize_frontmatter(doc.metadata, rules.canonical_order), doc.body)
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        log.error("Error while fixing %s: %s", path, e)
        return False

    log.info("Fixed frontmatter order in %s", os.path.basename(str(path)))
    return True
