"""Structural checks for generated Markdown artifacts.

The checks are line based and do not render Markdown:
- the file opens with a frontmatter block holding the three fixed keys
- a single ``# `` title follows the frontmatter
- every ``## ``/``### `` heading is preceded by a blank line (or the frontmatter end)
- every code fence is closed
- the file ends with exactly one newline
"""

import logging
from pathlib import Path

from pydantic import BaseModel

from pmlc.domain.constants import FRONTMATTER_DELIMITER, MARKDOWN_EXTENSIONS

logger = logging.getLogger(__name__)

FRONTMATTER_KEYS = ("description", "globs", "alwaysApply")


class CheckIssue(BaseModel):
    path: Path
    line: int  # 1-based; 0 for whole-file issues
    message: str


def check_text(path: Path, content: str) -> list[CheckIssue]:
    """Check one artifact's content; ``path`` is used for reporting only."""
    issues: list[CheckIssue] = []

    def issue(line: int, message: str) -> None:
        issues.append(CheckIssue(path=path, line=line, message=message))

    lines = content.split("\n")

    if not content.endswith("\n"):
        issue(0, "File must end with a newline")
    elif content.endswith("\n\n"):
        issue(0, "File must not end with a blank line")

    body_start = _check_frontmatter(lines, issue)

    has_title = False
    fence_open_line = 0
    for index in range(body_start, len(lines)):
        line = lines[index]
        number = index + 1

        if line.startswith("```"):
            fence_open_line = 0 if fence_open_line else number
            continue
        if fence_open_line:
            continue

        if line.startswith("# "):
            has_title = True
        elif line.startswith("## ") or line.startswith("### "):
            previous = lines[index - 1] if index > 0 else ""
            if previous.strip() and previous != FRONTMATTER_DELIMITER:
                issue(number, f"Heading '{line}' must be preceded by a blank line")

    if fence_open_line:
        issue(fence_open_line, "Code fence is never closed")

    if not has_title:
        issue(0, "Missing main title (# heading)")

    return issues


def _check_frontmatter(lines: list[str], issue) -> int:
    """Validate the frontmatter block and return the index of the first body line."""
    if not lines or lines[0] != FRONTMATTER_DELIMITER:
        issue(1, "File must start with a frontmatter block ('---')")
        return 0

    try:
        end = lines.index(FRONTMATTER_DELIMITER, 1)
    except ValueError:
        issue(1, "Frontmatter block is never closed")
        return len(lines)

    keys = [line.split(":", 1)[0] for line in lines[1:end]]
    if keys != list(FRONTMATTER_KEYS):
        issue(2, f"Frontmatter keys must be {', '.join(FRONTMATTER_KEYS)} in this order")

    return end + 1


def check_file(path: Path) -> list[CheckIssue]:
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return [CheckIssue(path=path, line=0, message=f"Failed to read file: {e}")]
    return check_text(path, content)


def find_markdown_files(root: Path) -> list[Path]:
    if not root.is_dir():
        raise FileNotFoundError(f"Directory not found: {root}")
    return sorted(
        p for p in root.rglob("*") if p.is_file() and p.suffix.lower() in MARKDOWN_EXTENSIONS
    )


def check_directory(root: Path) -> tuple[list[Path], list[CheckIssue]]:
    """Check every Markdown artifact below ``root``.

    Returns:
        (checked files, issues across all files)
    """
    files = find_markdown_files(root)
    issues: list[CheckIssue] = []
    for path in files:
        file_issues = check_file(path)
        logger.debug(f"Checked {path}: {len(file_issues)} issues")
        issues.extend(file_issues)
    return files, issues
