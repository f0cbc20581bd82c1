"""Book manifest (config.yaml) and chapter file validation.

A book directory holds a manifest plus chapter Markdown files. The manifest's
``chapters`` field is either an explicit list of ``{file, title}`` entries, or
an empty list, in which case chapter order comes from numbered file names
(``1.intro.md``, ``2.setup.md``, ...).

Both modes derive chapter slugs the same way: base name, minus a leading
``<digits>.`` prefix, minus the extension.
"""

import logging
import os
import re
from dataclasses import dataclass, field

import yaml

from config import RuleSet

log = logging.getLogger(__name__)

NUMBERED_CHAPTER_RE = re.compile(r"^\d+\.[^/\\]+\.md$")
_NUMBER_PREFIX_RE = re.compile(r"^\d+\.")


@dataclass
class BookResult:
    book_dir: str
    missing_config_file: bool = False
    parse_error: str | None = None
    missing: list[str] = field(default_factory=list)
    invalid_chapters: bool = False
    chapter_errors: list[str] = field(default_factory=list)
    duplicate_slugs: list[str] = field(default_factory=list)
    chapter_order: list[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return (
            self.missing_config_file
            or bool(self.missing)
            or self.invalid_chapters
            or bool(self.duplicate_slugs)
        )


def chapter_slug(file_name: str) -> str:
    """Derive a chapter slug: ``2.setup.md`` -> ``setup``, ``intro.markdown`` -> ``intro``."""
    name = _NUMBER_PREFIX_RE.sub("", os.path.basename(str(file_name)), count=1)
    return os.path.splitext(name)[0]


def find_duplicates(slugs: list[str]) -> list[str]:
    """Slugs that occur more than once, each listed once in first-seen order."""
    seen = set()
    dupes = []
    for slug in slugs:
        if slug in seen and slug not in dupes:
            dupes.append(slug)
        seen.add(slug)
    return dupes


def list_chapter_files(book_dir: str) -> list[str]:
    """Markdown files directly inside *book_dir*, sorted by name."""
    return sorted(
        name
        for name in os.listdir(book_dir)
        if name.endswith(".md") and os.path.isfile(os.path.join(book_dir, name))
    )


def _check_numbered_files(book_dir: str, result: BookResult) -> None:
    try:
        files = list_chapter_files(book_dir)
    except OSError as e:
        log.error("Error while listing chapters in %s: %s", book_dir, e)
        result.invalid_chapters = True
        result.chapter_errors.append(f"Could not list chapter files: {e}")
        return

    if not files:
        result.invalid_chapters = True
        result.chapter_errors.append("No chapter files found")
        return

    numbered = [f for f in files if NUMBERED_CHAPTER_RE.match(f)]
    if len(numbered) != len(files):
        result.invalid_chapters = True
        unnumbered = [f for f in files if f not in numbered]
        result.chapter_errors.append(
            "Inconsistent chapter file naming, unify all files to numbered form "
            f"(e.g. 1.intro.md): {', '.join(unnumbered)}"
        )
        return

    slugs = [chapter_slug(f) for f in numbered]
    result.chapter_order = slugs
    result.duplicate_slugs = find_duplicates(slugs)


def _check_chapter_list(chapters: list, result: BookResult) -> None:
    slugs = []
    for i, chapter in enumerate(chapters, 1):
        if not isinstance(chapter, dict) or "file" not in chapter or "title" not in chapter:
            result.invalid_chapters = True
            result.chapter_errors.append(f"Chapter #{i}: each chapter needs file and title")
        if isinstance(chapter, dict) and isinstance(chapter.get("file"), str):
            slugs.append(chapter_slug(chapter["file"]))

    result.chapter_order = slugs
    result.duplicate_slugs = find_duplicates(slugs)


def validate_book(book_dir: str, rules: RuleSet) -> BookResult:
    """Validate one book directory's manifest and chapter files."""
    result = BookResult(book_dir=str(book_dir))
    manifest_path = os.path.join(book_dir, rules.manifest_name)

    if not os.path.isfile(manifest_path):
        result.missing_config_file = True
        return result

    try:
        with open(manifest_path, encoding="utf-8") as f:
            manifest = yaml.safe_load(f)
        if manifest is None:
            manifest = {}
        if not isinstance(manifest, dict):
            msg = f"top level must be a mapping, got {type(manifest).__name__}"
            raise ValueError(msg)
    except (OSError, UnicodeDecodeError, yaml.YAMLError, ValueError) as e:
        # An unreadable manifest fails every required-key check.
        log.error("Error while reading %s: %s", manifest_path, e)
        result.parse_error = str(e)
        result.missing = list(rules.book_manifest_required)
        return result

    result.missing = [key for key in rules.book_manifest_required if key not in manifest]

    if "chapters" not in manifest:
        return result

    chapters = manifest["chapters"]
    if not isinstance(chapters, list):
        result.invalid_chapters = True
        result.chapter_errors.append("'chapters' must be a list")
    elif not chapters:
        _check_numbered_files(book_dir, result)
    else:
        _check_chapter_list(chapters, result)

    return result


def find_book_dirs(root: str, books_dir: str) -> list[str]:
    """Immediate subdirectories of the books tree, sorted."""
    base = os.path.join(root, books_dir)
    if not os.path.isdir(base):
        return []
    return [
        os.path.join(base, name)
        for name in sorted(os.listdir(base))
        if os.path.isdir(os.path.join(base, name)) and not name.startswith(".")
    ]
