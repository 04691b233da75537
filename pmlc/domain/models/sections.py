"""Content section models.

The six section kinds form a closed tagged union (``ContentSection``). Each
model is frozen and stores sequences as tuples so a built document cannot be
mutated after mapping.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class CodeBlock(_Frozen):
    """Verbatim code with an optional language tag.

    ``content`` holds the raw source text; trimming happens at render time.
    """

    language: str = ""
    content: str


class Note(_Frozen):
    term: str
    description: str


class Option(_Frozen):
    text: str
    description: str = ""


class Step(_Frozen):
    number: int
    title: str
    description: str = ""
    code: CodeBlock | None = None


class Restrictions(_Frozen):
    description: str = ""
    items: tuple[str, ...] = ()


class RuleSection(_Frozen):
    """A numbered guideline with optional notes and good/bad examples."""

    kind: Literal["rule"] = "rule"
    number: int
    title: str
    subtitle: str
    description: str
    notes: tuple[Note, ...] = ()
    good_example: CodeBlock | None = None
    bad_example: CodeBlock | None = None


class TemplateSection(_Frozen):
    kind: Literal["template"] = "template"
    title: str
    description: str
    body: CodeBlock


class QuestionSection(_Frozen):
    kind: Literal["questions"] = "questions"
    title: str
    subtitle: str = ""
    description: str = ""
    options: tuple[Option, ...] = ()


class WorkflowSection(_Frozen):
    kind: Literal["workflow"] = "workflow"
    title: str
    subtitle: str = ""
    description: str = ""
    steps: tuple[Step, ...] = ()


class InstructionSection(_Frozen):
    """Instruction block; ``title`` is already resolved from either source shape."""

    kind: Literal["instructions"] = "instructions"
    title: str
    description: str = ""
    restrictions: Restrictions | None = None
    rules: tuple[str, ...] = ()


class OutputRequirementsSection(_Frozen):
    kind: Literal["output-requirements"] = "output-requirements"
    title: str
    description: str = ""
    restrictions: Restrictions | None = None
    rules: tuple[str, ...] = ()


ContentSection = Annotated[
    Union[
        RuleSection,
        TemplateSection,
        QuestionSection,
        WorkflowSection,
        InstructionSection,
        OutputRequirementsSection,
    ],
    Field(discriminator="kind"),
]
