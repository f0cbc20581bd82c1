"""Rule presets and override loading for the frontmatter linter."""

import json
import logging
import os
from dataclasses import dataclass
from types import MappingProxyType

log = logging.getLogger(__name__)

DEFAULT_PRESET = "zenn"
MANIFEST_NAME = "config.yaml"
SLUG_PATTERN = r"[a-z0-9_-]{12,50}"

# Plain data only, so a preset can be dumped to JSON and overridden key by key.
PRESETS = {
    "zenn": {
        "canonical_order": ["title", "emoji", "type", "topics", "published", "published_at"],
        "required_by_type": {
            "article": ["title", "emoji", "type", "topics", "published"],
            "book": ["title", "summary", "published"],
            "default": ["title", "published"],
        },
        "classification_patterns": {
            "article": ["articles/"],
            "book": ["books/"],
        },
        "book_manifest_required": ["title", "summary", "topics", "published", "price"],
        "content_pattern": "articles/**/*.md",
        "books_dir": "books",
        "config_file": "zenn-lint.config.json",
    },
    "mdx": {
        "canonical_order": [
            "title",
            "date",
            "description",
            "tags",
            "category",
            "image",
            "recommended",
            "status",
            "draft",
        ],
        "required_by_type": {
            "blog": ["title", "date", "description", "tags", "category", "image", "status"],
            "snippet": ["title", "date", "description", "tags", "image", "status"],
            "default": ["title", "date", "description"],
        },
        "classification_patterns": {
            "blog": ["/blog/", "\\blog\\"],
            "snippet": ["/snippet/", "\\snippet\\"],
        },
        "book_manifest_required": [],
        "content_pattern": "content/**/*.mdx",
        "books_dir": None,
        "config_file": "mdx-lint.config.json",
    },
}

# Override file key -> RuleSet field. The camelCase names are the historical
# config file format and stay accepted.
_OVERRIDE_KEYS = {
    "propertyOrder": "canonical_order",
    "canonical_order": "canonical_order",
    "requiredProperties": "required_by_type",
    "required_by_type": "required_by_type",
    "contentTypePatterns": "classification_patterns",
    "classification_patterns": "classification_patterns",
    "bookRequiredProperties": "book_manifest_required",
    "book_manifest_required": "book_manifest_required",
    "contentPattern": "content_pattern",
    "content_pattern": "content_pattern",
}


class ConfigError(ValueError):
    """Raised when an override file cannot be used."""


@dataclass(frozen=True)
class RuleSet:
    canonical_order: tuple[str, ...]
    required_by_type: MappingProxyType
    classification_patterns: MappingProxyType
    book_manifest_required: tuple[str, ...]
    content_pattern: str
    books_dir: str | None = None
    manifest_name: str = MANIFEST_NAME
    slug_pattern: str = SLUG_PATTERN

    @classmethod
    def from_dict(cls, data: dict) -> "RuleSet":
        """Build a RuleSet from plain mapping/list data."""
        return cls(
            canonical_order=tuple(data["canonical_order"]),
            required_by_type=MappingProxyType(
                {k: tuple(v) for k, v in data["required_by_type"].items()}
            ),
            classification_patterns=MappingProxyType(
                {k: tuple(v) for k, v in data["classification_patterns"].items()}
            ),
            book_manifest_required=tuple(data["book_manifest_required"]),
            content_pattern=data["content_pattern"],
            books_dir=data.get("books_dir"),
            manifest_name=data.get("manifest_name", MANIFEST_NAME),
            slug_pattern=data.get("slug_pattern", SLUG_PATTERN),
        )

    def to_dict(self) -> dict:
        return {
            "canonical_order": list(self.canonical_order),
            "required_by_type": {k: list(v) for k, v in self.required_by_type.items()},
            "classification_patterns": {
                k: list(v) for k, v in self.classification_patterns.items()
            },
            "book_manifest_required": list(self.book_manifest_required),
            "content_pattern": self.content_pattern,
            "books_dir": self.books_dir,
            "manifest_name": self.manifest_name,
            "slug_pattern": self.slug_pattern,
        }


def default_config_path(preset: str = DEFAULT_PRESET, root: str = ".") -> str:
    """Return the conventional override file path for a preset."""
    return os.path.join(root, PRESETS[preset]["config_file"])


def _is_str_list(value) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


def _check_override(field: str, value) -> None:
    if field in ("canonical_order", "book_manifest_required"):
        ok = _is_str_list(value)
    elif field in ("required_by_type", "classification_patterns"):
        ok = isinstance(value, dict) and all(_is_str_list(v) for v in value.values())
    else:
        ok = isinstance(value, str) and bool(value)
    if not ok:
        raise ConfigError(f"Invalid value for {field!r}: {value!r}")


def parse_overrides(raw: dict) -> dict:
    """Map an override object onto RuleSet field names, validating value types."""
    if not isinstance(raw, dict):
        raise ConfigError("Config file must contain a JSON object")
    overrides = {}
    for key, value in raw.items():
        field = _OVERRIDE_KEYS.get(key)
        if field is None:
            log.debug("Ignoring unknown config key %r", key)
            continue
        _check_override(field, value)
        overrides[field] = value
    return overrides


def load_rule_set(preset: str = DEFAULT_PRESET, config_path: str = None):
    """Resolve the rule set for a run.

    Returns (RuleSet, None) on success, (default RuleSet, error_message) when
    the override file exists but cannot be used. A missing override file is
    not an error.
    """
    if preset not in PRESETS:
        msg = f"Unknown preset: {preset!r}"
        raise ValueError(msg)

    defaults = {k: v for k, v in PRESETS[preset].items() if k != "config_file"}
    config_path = config_path or PRESETS[preset]["config_file"]
    if not os.path.exists(config_path):
        return RuleSet.from_dict(defaults), None

    try:
        with open(config_path, encoding="utf-8") as f:
            raw = json.load(f)
        overrides = parse_overrides(raw)
    except (OSError, json.JSONDecodeError, ConfigError) as e:
        return RuleSet.from_dict(defaults), f"Failed to load config file {config_path}: {e}"

    # Shallow merge: a provided key replaces the default wholesale.
    log.info("Loaded custom config file %s", config_path)
    return RuleSet.from_dict({**defaults, **overrides}), None
