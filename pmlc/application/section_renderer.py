"""Rendering engine: one Markdown fragment per content section.

Fragments carry no trailing newline; the assembler owns separators between
sections. Dispatch is an explicit type check over the closed set of section
kinds, ending in UnknownSectionKindError.
"""

from __future__ import annotations

from pmlc.domain.constants import RESTRICTIONS_HEADING
from pmlc.domain.errors import UnknownSectionKindError
from pmlc.domain.models import (
    CodeBlock,
    InstructionSection,
    OutputRequirementsSection,
    QuestionSection,
    Restrictions,
    RuleSection,
    TemplateSection,
    WorkflowSection,
)
from pmlc.domain.text_normalizer import normalize_code


def render_section(section: object) -> str:
    """Render one content section to its canonical Markdown fragment.

    Raises:
        UnknownSectionKindError: If ``section`` is not a known section kind.
    """
    if isinstance(section, RuleSection):
        return render_rule(section)
    if isinstance(section, TemplateSection):
        return render_template(section)
    if isinstance(section, QuestionSection):
        return render_questions(section)
    if isinstance(section, WorkflowSection):
        return render_workflow(section)
    if isinstance(section, (InstructionSection, OutputRequirementsSection)):
        return render_instructions(section)

    kind = getattr(section, "kind", type(section).__name__)
    raise UnknownSectionKindError(str(kind))


def render_code_block(block: CodeBlock) -> str:
    """Render a fenced code block with normalized content."""
    return f"```{block.language}\n{normalize_code(block.content)}\n```"


def _heading(title: str, subtitle: str = "") -> str:
    if subtitle:
        return f"## {title}: {subtitle}"
    return f"## {title}"


def _paragraph_before_list(text: str) -> str:
    # A description ending in ':' introduces the list directly below it.
    if text.endswith(":"):
        return f"{text}\n"
    return f"{text}\n\n"


def render_rule(section: RuleSection) -> str:
    blocks = [
        f"## Rule {section.number}: {section.title}",
        f"Title: {section.subtitle}\nDescription: {section.description}",
    ]

    if section.notes:
        notes = "\n".join(f"- **{n.term}**: {n.description}" for n in section.notes)
        blocks.append(f"**Notes:**\n\n{notes}")

    if section.good_example is not None:
        blocks.append(f"**Good example:**\n\n{render_code_block(section.good_example)}")

    if section.bad_example is not None:
        blocks.append(f"**Bad example:**\n\n{render_code_block(section.bad_example)}")

    return "\n\n".join(blocks)


def render_template(section: TemplateSection) -> str:
    blocks = [_heading(section.title), section.description]

    body = normalize_code(section.body.content)
    if body:
        blocks.append(body)

    return "\n\n".join(blocks)


def render_questions(section: QuestionSection) -> str:
    blocks = [_heading(section.title, section.subtitle)]

    if section.description:
        blocks.append(section.description)

    if section.options:
        lines = []
        for option in section.options:
            if option.description:
                lines.append(f"- {option.text}: {option.description}")
            else:
                lines.append(f"- {option.text}")
        blocks.append("\n".join(lines))

    return "\n\n".join(blocks)


def render_workflow(section: WorkflowSection) -> str:
    blocks = [_heading(section.title, section.subtitle)]

    if section.description:
        blocks.append(section.description)

    for step in section.steps:
        blocks.append(f"### Step {step.number}: {step.title}")
        if step.description:
            blocks.append(step.description)
        if step.code is not None:
            blocks.append(render_code_block(step.code))

    return "\n\n".join(blocks)


def _render_list_block(description: str, items: tuple[str, ...]) -> str:
    """Render an optional description followed by an optional bullet list."""
    bullets = "\n".join(f"- {item}" for item in items)
    if description and bullets:
        return _paragraph_before_list(description) + bullets
    return description or bullets


def _render_restrictions(restrictions: Restrictions) -> str:
    body = _render_list_block(restrictions.description, restrictions.items)
    if body:
        return f"{RESTRICTIONS_HEADING}\n\n{body}"
    return RESTRICTIONS_HEADING


def render_instructions(section: InstructionSection | OutputRequirementsSection) -> str:
    """Render an instruction or output-requirements section.

    The description is separated from the rule list by a single newline when it
    ends with ':' and by a blank line otherwise. When a restrictions block sits
    between them, the description is always followed by a blank line.
    """
    blocks = [_heading(section.title)]

    if section.restrictions is not None:
        if section.description:
            blocks.append(section.description)
        blocks.append(_render_restrictions(section.restrictions))
        if section.rules:
            blocks.append("\n".join(f"- {rule}" for rule in section.rules))
    else:
        body = _render_list_block(section.description, section.rules)
        if body:
            blocks.append(body)

    return "\n\n".join(blocks)
