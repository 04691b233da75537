from pathlib import Path

from pydantic import BaseModel, Field


class DocumentResult(BaseModel):
    """Outcome of compiling one source document."""

    source: Path
    output: Path | None = None
    ok: bool
    error: str | None = None
    error_type: str | None = None
    include_chain: list[Path] = Field(default_factory=list)


class BuildReport(BaseModel):
    """Per-file outcomes of one build, ordered by source path."""

    results: list[DocumentResult] = Field(default_factory=list)

    @property
    def failures(self) -> list[DocumentResult]:
        return [r for r in self.results if not r.ok]

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def exit_code(self) -> int:
        return 1 if self.failures else 0
