"""Aggregate lint results into a pass/fail report and render it."""

from dataclasses import dataclass, field

from services.books import BookResult
from services.frontmatter import ReadFailure
from services.schema import LintResult


@dataclass
class Report:
    results: list[LintResult] = field(default_factory=list)
    books: list[BookResult] = field(default_factory=list)
    failures: list[ReadFailure] = field(default_factory=list)

    def add(self, item) -> None:
        if isinstance(item, LintResult):
            self.results.append(item)
        elif isinstance(item, BookResult):
            self.books.append(item)
        elif isinstance(item, ReadFailure):
            self.failures.append(item)
        else:
            msg = f"Cannot add {type(item).__name__} to a report"
            raise TypeError(msg)

    @property
    def file_problems(self) -> list[LintResult]:
        return [r for r in self.results if r.has_errors]

    @property
    def book_problems(self) -> list[BookResult]:
        return [b for b in self.books if b.has_errors]

    @property
    def has_errors(self) -> bool:
        return any(r.has_errors for r in self.results) or any(b.has_errors for b in self.books)

    def render(self, canonical_order=(), fix: bool = False) -> str:
        lines = []
        problems = self.file_problems
        if problems:
            lines.append(f"\n{len(problems)} file(s) have frontmatter problems:")
            for r in problems:
                lines.extend(_render_result(r, canonical_order, fix))

        book_problems = self.book_problems
        if book_problems:
            lines.append(f"\n{len(book_problems)} book(s) have problems:")
            for b in book_problems:
                lines.extend(_render_book(b))

        if self.failures:
            lines.append(f"\n{len(self.failures)} file(s) could not be read:")
            for f in self.failures:
                lines.append(f"  {f.path}: {f.error}")

        if problems or book_problems:
            if not fix:
                lines.append("\nRun with --fix to reorder frontmatter properties automatically.")
        elif self.failures:
            lines.append(f"\nNo problems found, but {len(self.failures)} file(s) skipped.")
        else:
            lines.append("\n✅ All frontmatter is valid and in the recommended order.")
        return "\n".join(lines)


def _render_result(r: LintResult, canonical_order, fix: bool) -> list[str]:
    lines = [f"\nFile: {r.file} (type: {r.content_type})"]
    if r.missing:
        lines.append(f"  Missing required properties: {', '.join(r.missing)}")
    if r.slug_error:
        lines.append(f"  {r.slug_error}")
    if r.wrong_order:
        lines.append("  Frontmatter properties are not in the recommended order")
        lines.append(f"  Current order: {', '.join(str(k) for k in r.current_order)}")
        lines.append(f"  Recommended order: {', '.join(canonical_order)}")
        if fix:
            lines.append("  ✅ Order fixed" if r.fixed else "  ❌ Could not fix order")
    return lines


def _render_book(b: BookResult) -> list[str]:
    lines = [f"\nBook: {b.book_dir}"]
    if b.missing_config_file:
        lines.append("  Missing config.yaml")
        return lines
    if b.parse_error:
        lines.append(f"  Could not parse config.yaml: {b.parse_error}")
    if b.missing:
        lines.append(f"  Missing required properties: {', '.join(b.missing)}")
    for err in b.chapter_errors:
        lines.append(f"  {err}")
    if b.duplicate_slugs:
        lines.append(f"  Duplicate chapter slugs: {', '.join(b.duplicate_slugs)}")
    return lines
