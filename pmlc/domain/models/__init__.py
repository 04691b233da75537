"""Domain models for the PML compiler."""

from .prompt_document import Metadata, PromptDocument, TableOfContents
from .sections import (
    CodeBlock,
    ContentSection,
    InstructionSection,
    Note,
    Option,
    OutputRequirementsSection,
    QuestionSection,
    Restrictions,
    RuleSection,
    Step,
    TemplateSection,
    WorkflowSection,
)
from .build_report import BuildReport, DocumentResult


__all__ = [
    "Metadata",
    "PromptDocument",
    "TableOfContents",
    "CodeBlock",
    "ContentSection",
    "InstructionSection",
    "Note",
    "Option",
    "OutputRequirementsSection",
    "QuestionSection",
    "Restrictions",
    "RuleSection",
    "Step",
    "TemplateSection",
    "WorkflowSection",
    "BuildReport",
    "DocumentResult",
]
