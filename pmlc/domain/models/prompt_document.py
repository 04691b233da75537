"""Prompt document model - the root entity produced by the mapper."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pmlc.domain.models.sections import ContentSection, RuleSection


class Metadata(BaseModel):
    """Frontmatter values. Missing values are empty strings, never None."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    description: str = ""
    globs: str = ""
    always_apply: str = ""


class TableOfContents(BaseModel):
    """TOC configuration: auto-generated from rules, or an explicit entry list."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    auto: bool = False
    entries: tuple[str, ...] = ()


class PromptDocument(BaseModel):
    """One compiled prompt definition, immutable once built."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    metadata: Metadata
    title: str
    role: str = ""
    description: str = ""
    toc: TableOfContents | None = None
    sections: tuple[ContentSection, ...] = Field(default_factory=tuple)

    @model_validator(mode="after")
    def _rule_numbers_unique(self) -> "PromptDocument":
        seen: set[int] = set()
        for rule in self.rules:
            if rule.number in seen:
                raise ValueError(f"Duplicate rule number: {rule.number}")
            seen.add(rule.number)
        return self

    @property
    def rules(self) -> list[RuleSection]:
        """Rule sections in document order."""
        return [s for s in self.sections if isinstance(s, RuleSection)]
