from typing import Literal

from pydantic import BaseModel, Field


class BaseOutput(BaseModel):
    schema_version: int = 1
    command: Literal["build", "render", "check"]
    exit_code: int
    error: str | None = None


class DocumentOutput(BaseModel):
    """Outcome of one document in a build."""
    source: str
    output: str | None = None
    ok: bool
    error: str | None = None
    error_type: str | None = None
    include_chain: list[str] = Field(default_factory=list)


class BuildOutput(BaseOutput):
    command: Literal["build"] = "build"
    output_dir: str | None = None
    documents: list[DocumentOutput] = Field(default_factory=list)
    succeeded: int = 0
    failed: int = 0


class RenderOutput(BaseOutput):
    command: Literal["render"] = "render"
    source: str
    # Set when the artifact is written to a file instead of returned inline.
    output: str | None = None
    content: str | None = None
    include_chain: list[str] = Field(default_factory=list)


class IssueOutput(BaseModel):
    path: str
    line: int
    message: str


class CheckOutput(BaseOutput):
    command: Literal["check"] = "check"
    files_checked: int = 0
    issues: list[IssueOutput] = Field(default_factory=list)
