"""Unit tests for book manifest and chapter validation."""

import os
from unittest.mock import patch

import pytest

from config import load_rule_set
from services.books import chapter_slug, find_book_dirs, find_duplicates, validate_book

MANIFEST_HEAD = """\
title: My Book
summary: A book
topics: [python]
published: true
price: 0
"""


@pytest.fixture()
def rules(tmp_path):
    rule_set, _ = load_rule_set("zenn", str(tmp_path / "none.json"))
    return rule_set


@pytest.fixture()
def book(tmp_path):
    book_dir = tmp_path / "books" / "my-book"
    book_dir.mkdir(parents=True)
    return book_dir


def write_manifest(book_dir, chapters_yaml):
    (book_dir / "config.yaml").write_text(MANIFEST_HEAD + chapters_yaml, encoding="utf-8")


def touch(book_dir, *names):
    for name in names:
        (book_dir / name).write_text("---\ntitle: x\n---\n", encoding="utf-8")


# ---------------------------------------------------------------------------
# chapter_slug / find_duplicates
# ---------------------------------------------------------------------------


def test_chapter_slug_numbered():
    assert chapter_slug("12.setup.md") == "setup"


def test_chapter_slug_plain():
    assert chapter_slug("intro.md") == "intro"


def test_chapter_slug_without_extension():
    assert chapter_slug("intro") == "intro"
    assert chapter_slug("3.intro") == "intro"


def test_chapter_slug_strips_any_extension():
    assert chapter_slug("intro.markdown") == "intro"
    assert chapter_slug("2.setup.mdx") == "setup"


def test_find_duplicates_lists_each_once():
    assert find_duplicates(["a", "b", "a", "c", "a", "b"]) == ["a", "b"]
    assert find_duplicates(["a", "b"]) == []


# ---------------------------------------------------------------------------
# manifest presence and keys
# ---------------------------------------------------------------------------


def test_missing_manifest(book, rules):
    result = validate_book(str(book), rules)
    assert result.missing_config_file is True
    assert result.missing == []
    assert result.has_errors


def test_unparseable_manifest_fails_all_keys(book, rules):
    (book / "config.yaml").write_text("title: [unclosed\n", encoding="utf-8")
    result = validate_book(str(book), rules)
    assert result.missing == list(rules.book_manifest_required)
    assert result.parse_error
    assert result.has_errors


def test_non_mapping_manifest_fails_all_keys(book, rules):
    (book / "config.yaml").write_text("- a\n- b\n", encoding="utf-8")
    result = validate_book(str(book), rules)
    assert result.missing == list(rules.book_manifest_required)


def test_missing_manifest_keys(book, rules):
    (book / "config.yaml").write_text("title: Only title\n", encoding="utf-8")
    result = validate_book(str(book), rules)
    assert result.missing == ["summary", "topics", "published", "price"]
    assert result.invalid_chapters is False


def test_no_chapters_field_skips_chapter_checks(book, rules):
    write_manifest(book, "")
    result = validate_book(str(book), rules)
    assert not result.has_errors
    assert result.chapter_order == []


def test_chapters_not_a_list(book, rules):
    write_manifest(book, "chapters: intro\n")
    result = validate_book(str(book), rules)
    assert result.invalid_chapters is True


# ---------------------------------------------------------------------------
# empty chapter list: numbered file fallback
# ---------------------------------------------------------------------------


def test_numbered_files_valid(book, rules):
    write_manifest(book, "chapters: []\n")
    touch(book, "1.a.md", "2.b.md")
    result = validate_book(str(book), rules)
    assert not result.has_errors
    assert result.chapter_order == ["a", "b"]


def test_numbered_files_duplicate_slug(book, rules):
    write_manifest(book, "chapters: []\n")
    touch(book, "1.a.md", "2.a.md")
    result = validate_book(str(book), rules)
    assert result.duplicate_slugs == ["a"]
    assert result.has_errors


def test_no_chapter_files(book, rules):
    write_manifest(book, "chapters: []\n")
    result = validate_book(str(book), rules)
    assert result.invalid_chapters is True
    assert "No chapter files found" in result.chapter_errors


def test_mixed_naming_is_invalid(book, rules):
    write_manifest(book, "chapters: []\n")
    touch(book, "1.a.md", "intro.md")
    result = validate_book(str(book), rules)
    assert result.invalid_chapters is True
    assert "intro.md" in result.chapter_errors[0]


def test_subdirectory_files_ignored(book, rules):
    write_manifest(book, "chapters: []\n")
    touch(book, "1.a.md")
    (book / "images").mkdir()
    touch(book / "images", "notes.md")
    result = validate_book(str(book), rules)
    assert not result.has_errors


# ---------------------------------------------------------------------------
# explicit chapter list
# ---------------------------------------------------------------------------


def test_explicit_chapters_valid(book, rules):
    write_manifest(
        book,
        "chapters:\n  - file: intro.md\n    title: Intro\n  - file: setup.md\n    title: Setup\n",
    )
    result = validate_book(str(book), rules)
    assert not result.has_errors
    assert result.chapter_order == ["intro", "setup"]


def test_explicit_chapter_missing_title(book, rules):
    write_manifest(book, "chapters:\n  - file: x.md\n")
    result = validate_book(str(book), rules)
    assert result.invalid_chapters is True
    assert "each chapter needs file and title" in result.chapter_errors[0]


def test_explicit_chapter_not_a_mapping(book, rules):
    write_manifest(book, "chapters:\n  - intro\n")
    result = validate_book(str(book), rules)
    assert result.invalid_chapters is True


def test_explicit_duplicate_slugs(book, rules):
    write_manifest(
        book,
        "chapters:\n"
        "  - file: 1.intro.md\n    title: One\n"
        "  - file: intro.md\n    title: Two\n",
    )
    result = validate_book(str(book), rules)
    assert result.invalid_chapters is False
    assert result.duplicate_slugs == ["intro"]


def test_explicit_duplicates_checked_alongside_missing_fields(book, rules):
    write_manifest(
        book,
        "chapters:\n  - file: a.md\n  - file: a.md\n    title: A\n",
    )
    result = validate_book(str(book), rules)
    assert result.invalid_chapters is True
    assert result.duplicate_slugs == ["a"]


# ---------------------------------------------------------------------------
# find_book_dirs
# ---------------------------------------------------------------------------


def test_find_book_dirs(tmp_path):
    (tmp_path / "books" / "b-two").mkdir(parents=True)
    (tmp_path / "books" / "a-one").mkdir()
    (tmp_path / "books" / "stray.md").write_text("", encoding="utf-8")
    dirs = find_book_dirs(str(tmp_path), "books")
    assert [os.path.basename(d) for d in dirs] == ["a-one", "b-two"]


def test_find_book_dirs_no_tree(tmp_path):
    assert find_book_dirs(str(tmp_path), "books") == []


# ---------------------------------------------------------------------------
# extensions and unreadable directories
# ---------------------------------------------------------------------------


def test_explicit_duplicates_across_extensions(book, rules):
    write_manifest(
        book,
        "chapters:\n"
        "  - file: a.md\n    title: A\n"
        "  - file: a.markdown\n    title: A again\n",
    )
    result = validate_book(str(book), rules)
    assert result.chapter_order == ["a", "a"]
    assert result.duplicate_slugs == ["a"]


def test_unlistable_book_dir_is_reported(book, rules):
    write_manifest(book, "chapters: []\n")
    with patch("services.books.os.listdir", side_effect=PermissionError("denied")):
        result = validate_book(str(book), rules)
    assert result.invalid_chapters is True
    assert "denied" in result.chapter_errors[0]
