"""Tests for the per-kind section render functions."""

import pytest

from pmlc.application.section_renderer import render_section
from pmlc.domain.errors import UnknownSectionKindError
from pmlc.domain.models import (
    CodeBlock,
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


class TestRuleRendering:
    def test_minimal_rule(self) -> None:
        rule = RuleSection(number=1, title="Foo", subtitle="Bar", description="Baz.")

        assert render_section(rule) == "## Rule 1: Foo\n\nTitle: Bar\nDescription: Baz."

    def test_rule_with_notes_and_examples(self) -> None:
        rule = RuleSection(
            number=2,
            title="Naming",
            subtitle="Be clear",
            description="Names matter.",
            notes=(Note(term="Classes", description="Nouns."),),
            good_example=CodeBlock(language="java", content="\nfoo();  \n"),
            bad_example=CodeBlock(content="bar();"),
        )

        assert render_section(rule) == (
            "## Rule 2: Naming\n"
            "\n"
            "Title: Be clear\n"
            "Description: Names matter.\n"
            "\n"
            "**Notes:**\n"
            "\n"
            "- **Classes**: Nouns.\n"
            "\n"
            "**Good example:**\n"
            "\n"
            "```java\n"
            "foo();\n"
            "```\n"
            "\n"
            "**Bad example:**\n"
            "\n"
            "```\n"
            "bar();\n"
            "```"
        )

    def test_fragment_has_no_trailing_newline(self) -> None:
        rule = RuleSection(number=1, title="T", subtitle="S", description="D")

        assert not render_section(rule).endswith("\n")


class TestTemplateRendering:
    def test_body_copied_after_trimming(self) -> None:
        section = TemplateSection(
            title="Report",
            description="Use this.",
            body=CodeBlock(content="\n# Heading  \n\n  - item\n"),
        )

        assert render_section(section) == "## Report\n\nUse this.\n\n# Heading\n\n  - item"

    def test_empty_body_leaves_no_trailing_blank(self) -> None:
        section = TemplateSection(title="T", description="D", body=CodeBlock(content="\n"))

        assert render_section(section) == "## T\n\nD"


class TestQuestionRendering:
    def test_full(self) -> None:
        section = QuestionSection(
            title="Questions",
            subtitle="Before you start",
            description="Ask these.",
            options=(Option(text="A", description="first"), Option(text="B")),
        )

        assert render_section(section) == (
            "## Questions: Before you start\n\nAsk these.\n\n- A: first\n- B"
        )

    def test_heading_only(self) -> None:
        assert render_section(QuestionSection(title="Q")) == "## Q"


class TestWorkflowRendering:
    def test_steps_with_code(self) -> None:
        section = WorkflowSection(
            title="Build",
            description="Run it.",
            steps=(
                Step(number=1, title="Compile", description="Compile it.",
                     code=CodeBlock(language="bash", content="\nmvn compile\n")),
                Step(number=2, title="Test"),
            ),
        )

        assert render_section(section) == (
            "## Build\n\nRun it.\n\n"
            "### Step 1: Compile\n\nCompile it.\n\n```bash\nmvn compile\n```\n\n"
            "### Step 2: Test"
        )

    def test_subtitle_suffix(self) -> None:
        section = WorkflowSection(title="Build", subtitle="Local")

        assert render_section(section) == "## Build: Local"


class TestInstructionRendering:
    def test_colon_description_attaches_list(self) -> None:
        section = InstructionSection(title="Steps", description="Do this:", rules=("a", "b"))

        assert render_section(section) == "## Steps\n\nDo this:\n- a\n- b"

    @pytest.mark.parametrize("description", ["Do this.", "Do this", "Do this;"])
    def test_other_endings_get_blank_line(self, description: str) -> None:
        section = InstructionSection(title="Steps", description=description, rules=("a",))

        assert render_section(section) == f"## Steps\n\n{description}\n\n- a"

    def test_description_without_rules(self) -> None:
        section = InstructionSection(title="Steps", description="Only text:")

        assert render_section(section) == "## Steps\n\nOnly text:"

    def test_rules_without_description(self) -> None:
        section = InstructionSection(title="Steps", rules=("a",))

        assert render_section(section) == "## Steps\n\n- a"

    def test_restrictions_block(self) -> None:
        section = OutputRequirementsSection(
            title="Output",
            description="Follow:",
            restrictions=Restrictions(description="Never:", items=("x", "y")),
            rules=("z",),
        )

        assert render_section(section) == (
            "## Output\n\nFollow:\n\n### Restrictions\n\nNever:\n- x\n- y\n\n- z"
        )

    def test_output_requirements_same_rules_as_instructions(self) -> None:
        kwargs = {"title": "T", "description": "D:", "rules": ("r",)}

        assert render_section(OutputRequirementsSection(**kwargs)) == render_section(
            InstructionSection(**kwargs)
        )


def test_rendering_is_deterministic() -> None:
    rule = RuleSection(
        number=1,
        title="T",
        subtitle="S",
        description="D",
        notes=(Note(term="a", description="b"), Note(term="c", description="d")),
    )

    assert render_section(rule) == render_section(rule)


def test_unknown_kind_raises() -> None:
    class Banner:
        kind = "banner"

    with pytest.raises(UnknownSectionKindError) as exc:
        render_section(Banner())

    assert exc.value.kind == "banner"
