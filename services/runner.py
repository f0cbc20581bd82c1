"""Lint run: discover documents and books under a root, validate, optionally fix."""

import glob
import logging
import os

from config import RuleSet
from services.books import find_book_dirs, validate_book
from services.classifier import classify
from services.frontmatter import Document, read_document
from services.normalizer import fix_file
from services.report import Report
from services.schema import LintResult, validate_frontmatter

log = logging.getLogger(__name__)


def discover_files(root: str, rules: RuleSet) -> list[str]:
    """Relative, '/'-separated document paths matching the rule set's globs."""
    patterns = [rules.content_pattern]
    if rules.books_dir:
        patterns.append(f"{rules.books_dir}/**/*.md")

    found = set()
    for pattern in patterns:
        for rel_path in glob.glob(pattern, root_dir=root, recursive=True):
            if os.path.isfile(os.path.join(root, rel_path)):
                found.add(rel_path.replace(os.sep, "/"))
    return sorted(found)


def lint_document(rel_path: str, doc: Document, rules: RuleSet) -> LintResult:
    content_type = classify(rel_path, rules.classification_patterns)
    return validate_frontmatter(rel_path, doc.metadata, content_type, rules)


def run(root: str, rules: RuleSet, fix: bool = False, files: list[str] | None = None) -> Report:
    """Validate every discovered document and book. Each item is independent of the others."""
    report = Report()
    if files is None:
        files = discover_files(root, rules)
    log.debug("Linting %d file(s) under %s", len(files), root)

    for rel_path in files:
        path = os.path.join(root, rel_path)
        doc = read_document(path)
        if not isinstance(doc, Document):
            doc.path = rel_path
            report.add(doc)
            continue
        result = lint_document(rel_path, doc, rules)
        if fix and result.wrong_order:
            result.fixed = fix_file(path, rules, doc=doc)
        report.add(result)

    if rules.books_dir:
        for book_dir in find_book_dirs(root, rules.books_dir):
            result = validate_book(book_dir, rules)
            result.book_dir = os.path.relpath(book_dir, root).replace(os.sep, "/")
            report.add(result)

    return report
