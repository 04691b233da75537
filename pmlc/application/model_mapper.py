"""Maps a composed XML tree onto the PromptDocument model.

The mapper is the only stage that knows about source shapes. Legacy and
modern variants of an element are folded into one canonical field here, so
rendering never needs to know which shape an author used.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Callable

from pmlc.application.document_loader import local_name
from pmlc.domain.errors import (
    InvalidElementError,
    MissingRequiredElementError,
    UnknownSectionKindError,
)
from pmlc.domain.models import (
    CodeBlock,
    ContentSection,
    InstructionSection,
    Metadata,
    Note,
    Option,
    OutputRequirementsSection,
    PromptDocument,
    QuestionSection,
    Restrictions,
    RuleSection,
    Step,
    TableOfContents,
    TemplateSection,
    WorkflowSection,
)
from pmlc.domain.text_normalizer import normalize_text

logger = logging.getLogger(__name__)

ROOT_ELEMENT = "prompt"
_TRUE_VALUES = {"true", "yes", "1"}


def _children(element: ET.Element, name: str) -> list[ET.Element]:
    return [c for c in element if isinstance(c.tag, str) and local_name(c.tag) == name]


def _child(element: ET.Element, name: str) -> ET.Element | None:
    found = _children(element, name)
    return found[0] if found else None


def _text(element: ET.Element | None) -> str:
    if element is None:
        return ""
    return normalize_text("".join(element.itertext()))


def _verbatim(element: ET.Element) -> str:
    return "".join(element.itertext())


class ModelMapper:
    """Builds a PromptDocument from a composed tree.

    Args:
        source: Path of the root document, attached to every error raised.
    """

    def __init__(self, source: Path | None = None) -> None:
        self.source = source
        self._section_mappers: dict[str, Callable[[ET.Element, str], ContentSection]] = {
            "rule": self._map_rule,
            "template": self._map_template,
            "questions": self._map_questions,
            "workflow": self._map_workflow,
            "instructions": self._map_instructions,
            "output-requirements": self._map_output_requirements,
        }

    def map(self, root: ET.Element) -> PromptDocument:
        """Map the composed tree to a PromptDocument.

        Raises:
            MissingRequiredElementError: If metadata, header or a required child is absent.
            InvalidElementError: If the root or an attribute value is invalid.
            UnknownSectionKindError: If the content area holds an unknown element.
        """
        root_name = local_name(root.tag)
        if root_name != ROOT_ELEMENT:
            raise InvalidElementError(
                f"Expected <{ROOT_ELEMENT}> root element, found <{root_name}>",
                source=self.source,
                element_path=root_name,
            )

        path = ROOT_ELEMENT
        metadata = self._map_metadata(self._require(root, "metadata", path), f"{path}/metadata")

        header_path = f"{path}/header"
        header = self._require(root, "header", path)
        title = self._require_text(header, "title", header_path)

        sections = self._map_content(_child(root, "content"), f"{path}/content")

        document = PromptDocument(
            metadata=metadata,
            title=title,
            role=_text(_child(header, "role")),
            description=_text(_child(header, "description")),
            toc=self._map_toc(_child(root, "table-of-contents")),
            sections=tuple(sections),
        )
        logger.debug(f"Mapped {len(document.sections)} sections from {self.source}")
        return document

    # --- helpers -------------------------------------------------------

    def _require(self, element: ET.Element, name: str, path: str) -> ET.Element:
        found = _child(element, name)
        if found is None:
            raise MissingRequiredElementError(f"{path}/{name}", source=self.source)
        return found

    def _require_text(self, element: ET.Element, name: str, path: str) -> str:
        value = _text(self._require(element, name, path))
        if not value:
            raise MissingRequiredElementError(f"{path}/{name}", source=self.source)
        return value

    def _int_attribute(self, element: ET.Element, name: str, path: str) -> int | None:
        raw = element.get(name)
        if raw is None:
            return None
        try:
            return int(raw.strip())
        except ValueError:
            raise InvalidElementError(
                f"Attribute {name!r} must be an integer, got {raw!r}",
                source=self.source,
                element_path=path,
            ) from None

    def _code_block(self, element: ET.Element) -> CodeBlock:
        return CodeBlock(
            language=(element.get("language") or "").strip(),
            content=_verbatim(element),
        )

    # --- document-level elements --------------------------------------

    def _map_metadata(self, element: ET.Element, path: str) -> Metadata:
        def value(child_name: str, attribute: str) -> str:
            nested = _child(element, child_name)
            if nested is not None:
                return _text(nested)
            return normalize_text(element.get(attribute))

        return Metadata(
            description=value("description", "description"),
            globs=value("globs", "globs"),
            always_apply=value("always-apply", "alwaysApply"),
        )

    def _map_toc(self, element: ET.Element | None) -> TableOfContents | None:
        if element is None:
            return None
        auto = (element.get("auto") or "").strip().lower() in _TRUE_VALUES
        entries = tuple(_text(e) for e in _children(element, "entry"))
        return TableOfContents(auto=auto, entries=entries)

    def _map_content(self, element: ET.Element | None, path: str) -> list[ContentSection]:
        if element is None:
            return []

        sections: list[ContentSection] = []
        rule_numbers: set[int] = set()
        counts: dict[str, int] = {}

        for child in element:
            if not isinstance(child.tag, str):
                continue
            name = local_name(child.tag)
            counts[name] = counts.get(name, 0) + 1
            child_path = f"{path}/{name}[{counts[name]}]"

            mapper = self._section_mappers.get(name)
            if mapper is None:
                raise UnknownSectionKindError(name, source=self.source, element_path=child_path)

            section = mapper(child, child_path)
            if isinstance(section, RuleSection):
                if section.number in rule_numbers:
                    raise InvalidElementError(
                        f"Duplicate rule id: {section.number}",
                        source=self.source,
                        element_path=child_path,
                    )
                rule_numbers.add(section.number)
            sections.append(section)

        return sections

    # --- section kinds -------------------------------------------------

    def _map_rule(self, element: ET.Element, path: str) -> RuleSection:
        number = self._int_attribute(element, "id", path)
        if number is None:
            raise InvalidElementError(
                "Rule is missing its numeric 'id' attribute",
                source=self.source,
                element_path=path,
            )

        notes = []
        notes_element = _child(element, "notes")
        if notes_element is not None:
            for i, note in enumerate(_children(notes_element, "note"), start=1):
                term = normalize_text(note.get("term"))
                if not term:
                    raise MissingRequiredElementError(
                        f"{path}/notes/note[{i}]/@term", source=self.source
                    )
                notes.append(Note(term=term, description=_text(note)))

        good = bad = None
        examples = _child(element, "examples")
        if examples is not None:
            good_element = _child(examples, "good")
            bad_element = _child(examples, "bad")
            good = self._code_block(good_element) if good_element is not None else None
            bad = self._code_block(bad_element) if bad_element is not None else None

        return RuleSection(
            number=number,
            title=self._require_text(element, "title", path),
            subtitle=self._require_text(element, "subtitle", path),
            description=self._require_text(element, "description", path),
            notes=tuple(notes),
            good_example=good,
            bad_example=bad,
        )

    def _map_template(self, element: ET.Element, path: str) -> TemplateSection:
        return TemplateSection(
            title=self._require_text(element, "title", path),
            description=self._require_text(element, "description", path),
            body=self._code_block(self._require(element, "body", path)),
        )

    def _map_questions(self, element: ET.Element, path: str) -> QuestionSection:
        options = []
        for i, option in enumerate(_children(element, "option"), start=1):
            text_element = _child(option, "text")
            if text_element is not None:
                text = _text(text_element)
                description = _text(_child(option, "description"))
            else:
                text = _text(option)
                description = ""
            if not text:
                raise MissingRequiredElementError(
                    f"{path}/option[{i}]/text", source=self.source
                )
            options.append(Option(text=text, description=description))

        return QuestionSection(
            title=self._require_text(element, "title", path),
            subtitle=_text(_child(element, "subtitle")),
            description=_text(_child(element, "description")),
            options=tuple(options),
        )

    def _map_workflow(self, element: ET.Element, path: str) -> WorkflowSection:
        steps = []
        for position, step in enumerate(_children(element, "step"), start=1):
            step_path = f"{path}/step[{position}]"
            number = self._int_attribute(step, "number", step_path)
            code_element = _child(step, "code")
            steps.append(
                Step(
                    number=position if number is None else number,
                    title=self._require_text(step, "title", step_path),
                    description=_text(_child(step, "description")),
                    code=self._code_block(code_element) if code_element is not None else None,
                )
            )

        return WorkflowSection(
            title=self._require_text(element, "title", path),
            subtitle=_text(_child(element, "subtitle")),
            description=_text(_child(element, "description")),
            steps=tuple(steps),
        )

    def _instruction_fields(self, element: ET.Element, path: str) -> dict:
        # Modern shape: <header><title/></header>; legacy shape: <title/>.
        title = ""
        header = _child(element, "header")
        if header is not None:
            title = _text(_child(header, "title"))
        if not title:
            title = _text(_child(element, "title"))
        if not title:
            raise MissingRequiredElementError(f"{path}/header/title", source=self.source)

        restrictions = None
        restrictions_element = _child(element, "restrictions")
        if restrictions_element is not None:
            restrictions = Restrictions(
                description=_text(_child(restrictions_element, "description")),
                items=tuple(_text(r) for r in _children(restrictions_element, "restriction")),
            )

        rules: tuple[str, ...] = ()
        rules_element = _child(element, "rules")
        if rules_element is not None:
            rules = tuple(_text(r) for r in _children(rules_element, "rule"))

        return {
            "title": title,
            "description": _text(_child(element, "description")),
            "restrictions": restrictions,
            "rules": rules,
        }

    def _map_instructions(self, element: ET.Element, path: str) -> InstructionSection:
        return InstructionSection(**self._instruction_fields(element, path))

    def _map_output_requirements(self, element: ET.Element, path: str) -> OutputRequirementsSection:
        return OutputRequirementsSection(**self._instruction_fields(element, path))
