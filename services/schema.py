"""Frontmatter validation: required keys, canonical order, article slugs."""

import os
import re
from dataclasses import dataclass, field

from config import SLUG_PATTERN, RuleSet

ARTICLE_TYPE = "article"

_SLUG_RE = re.compile(SLUG_PATTERN)


@dataclass
class LintResult:
    file: str
    content_type: str
    missing: list[str] = field(default_factory=list)
    wrong_order: bool = False
    current_order: list[str] = field(default_factory=list)
    slug_error: str | None = None
    fixed: bool = False

    @property
    def has_errors(self) -> bool:
        return bool(self.missing) or self.wrong_order or self.slug_error is not None


def is_valid_slug(slug: str, pattern: str = SLUG_PATTERN) -> bool:
    """Full-string match of *slug* against the slug rule."""
    regex = _SLUG_RE if pattern == SLUG_PATTERN else re.compile(pattern)
    return regex.fullmatch(slug) is not None


def article_slug(path: str) -> str:
    """Slug of an article: its file name without extension."""
    return os.path.splitext(os.path.basename(str(path)))[0]


def is_in_order(keys: list, canonical_order) -> bool:
    """True when every adjacent pair of known keys ascends in canonical order.

    Pairs involving a key outside canonical_order are exempt.
    """
    positions = {key: i for i, key in enumerate(canonical_order)}
    for prev, cur in zip(keys, keys[1:]):
        if prev not in positions or cur not in positions:
            continue
        if positions[prev] >= positions[cur]:
            return False
    return True


def validate_frontmatter(path: str, metadata: dict, content_type: str, rules: RuleSet) -> LintResult:
    """Check *metadata* against the rules for *content_type*. Never raises."""
    required = rules.required_by_type.get(content_type, ())
    current_order = list(metadata.keys())

    result = LintResult(
        file=str(path),
        content_type=content_type,
        missing=[key for key in required if key not in metadata],
        wrong_order=not is_in_order(current_order, rules.canonical_order),
        current_order=current_order,
    )

    if content_type == ARTICLE_TYPE:
        slug = article_slug(path)
        if not is_valid_slug(slug, rules.slug_pattern):
            result.slug_error = (
                f"Invalid slug {slug!r}: must fully match {rules.slug_pattern}"
            )

    return result
