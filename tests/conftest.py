from pathlib import Path
from typing import Callable

import pytest


MINIMAL_HEAD = """
  <metadata>
    <description>Example</description>
    <globs>*.java</globs>
    <always-apply>false</always-apply>
  </metadata>
  <header>
    <title>Example Prompt</title>
  </header>
"""


@pytest.fixture(scope="session")
def repo_root() -> Path:
    """Resolve the repository root directory.

    Assumes tests live under <repo>/tests/.
    """
    return Path(__file__).resolve().parents[1]


@pytest.fixture(scope="session")
def fixtures_dir(repo_root: Path) -> Path:
    """Return the golden fixtures directory, failing fast if missing."""
    d = repo_root / "tests" / "fixtures"
    if not d.is_dir():
        pytest.fail(f"Expected fixtures dir at: {d}")
    return d


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a UTF-8 file below tmp_path and return its path."""

    def _write(relpath: str, content: str) -> Path:
        p = tmp_path / relpath
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(content, encoding="utf-8")
        return p

    return _write


@pytest.fixture
def write_prompt(write_file) -> Callable[..., Path]:
    """Write a prompt document with minimal metadata/header and the given body.

    ``body`` is placed after the header; ``head`` replaces the default
    metadata/header block.
    """

    def _write(relpath: str, body: str = "", head: str = MINIMAL_HEAD) -> Path:
        return write_file(
            relpath,
            '<prompt xmlns:xi="http://www.w3.org/2001/XInclude">'
            f"{head}{body}</prompt>",
        )

    return _write


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Prevent tests from reading the developer's ~/.pml/config.yml.

    Tests that need a user config write it below tmp_path/home explicitly.
    """
    home = tmp_path / "home"
    home.mkdir(exist_ok=True)
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: home))
