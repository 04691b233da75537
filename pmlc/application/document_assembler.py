"""Document assembly: frontmatter, header blocks, table of contents and sections."""

from pmlc.application.section_renderer import render_section
from pmlc.domain.constants import FRONTMATTER_DELIMITER, ROLE_HEADING, TOC_HEADING
from pmlc.domain.models import PromptDocument


class DocumentAssembler:
    """Assembles the final Markdown artifact for one PromptDocument.

    Layout, blocks separated by exactly one blank line:
    - frontmatter (``description``, ``globs``, ``alwaysApply``) and ``# title``
    - ``## Role`` block, if the document defines a role
    - free-form description, if any
    - ``## Table of contents``, if configured
    - one fragment per content section, in document order
    """

    def __init__(self, document: PromptDocument) -> None:
        self.document = document

    def assemble(self) -> str:
        blocks = [self._render_frontmatter() + "\n" + f"# {self.document.title}"]

        if self.document.role:
            blocks.append(f"{ROLE_HEADING}\n\n{self.document.role}")

        if self.document.description:
            blocks.append(self.document.description)

        toc = self._render_toc()
        if toc:
            blocks.append(toc)

        # Fail fast: any render error aborts the whole artifact.
        blocks.extend(render_section(section) for section in self.document.sections)

        return "\n\n".join(blocks) + "\n"

    def _render_frontmatter(self) -> str:
        metadata = self.document.metadata
        fields = [
            ("description", metadata.description),
            ("globs", metadata.globs),
            ("alwaysApply", metadata.always_apply),
        ]
        lines = [FRONTMATTER_DELIMITER]
        for key, value in fields:
            lines.append(f"{key}: {value}" if value else f"{key}:")
        lines.append(FRONTMATTER_DELIMITER)
        return "\n".join(lines)

    def _render_toc(self) -> str:
        """Render the table of contents, or an empty string when none is configured."""
        toc = self.document.toc
        if toc is None:
            return ""

        if toc.auto:
            entries = [f"- Rule {r.number}: {r.title}" for r in self.document.rules]
        elif toc.entries:
            entries = [f"- {entry}" for entry in toc.entries]
        else:
            return ""

        if not entries:
            return TOC_HEADING
        return f"{TOC_HEADING}\n\n" + "\n".join(entries)
