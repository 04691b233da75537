"""Document loading with XInclude-style fragment composition.

Inclusion rules:
- ``<xi:include href="..."/>`` (namespace ``http://www.w3.org/2001/XInclude``)
  is replaced by the referenced fragment.
- Relative ``href`` values resolve against the directory of the including
  document; absolute values are used as-is.
- A fragment rooted at ``<fragment>`` splices its children; any other root
  element is spliced as a single element.
- ``parse="text"`` splices the referenced file's raw text instead of parsing it.
"""

from __future__ import annotations

import copy
import logging
import xml.etree.ElementTree as ET
from pathlib import Path

from pmlc.domain.constants import FRAGMENT_ROOT, XINCLUDE_TAG
from pmlc.domain.errors import (
    CircularIncludeError,
    MalformedDocumentError,
    StructuralError,
    UnresolvedIncludeError,
)

logger = logging.getLogger(__name__)


def local_name(tag: str) -> str:
    """Strip a ``{namespace}`` prefix from an element tag."""
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


class DocumentLoader:
    """Loads a root document and resolves every inclusion directive.

    One loader serves one transformation run. Parsed fragments are cached per
    resolved path; every splice point receives its own deep copy, so callers
    may mutate the composed tree freely.
    """

    def __init__(self) -> None:
        self._parsed: dict[Path, ET.Element] = {}
        self._texts: dict[Path, str] = {}

    def load(self, root_path: Path) -> ET.Element:
        """Return the composed tree for ``root_path``.

        Raises:
            StructuralError: If the root document cannot be read.
            MalformedDocumentError: If any document is not well-formed XML.
            UnresolvedIncludeError: If a fragment cannot be located.
            CircularIncludeError: If a fragment includes a document on its own path.
        """
        path = root_path.resolve()
        if not path.is_file():
            raise StructuralError("Source document not found", source=path)

        chain = [path]
        root = copy.deepcopy(self._parse(path, chain))
        self._resolve_children(root, path, chain)
        return root

    def _parse(self, path: Path, chain: list[Path]) -> ET.Element:
        cached = self._parsed.get(path)
        if cached is not None:
            logger.debug(f"Fragment cache hit: {path}")
            return cached

        try:
            root = ET.parse(path).getroot()
        except ET.ParseError as e:
            raise MalformedDocumentError(
                f"Malformed XML ({e})", source=path, include_chain=chain
            ) from e
        except OSError as e:
            raise StructuralError(
                f"Failed to read document ({e})", source=path, include_chain=chain
            ) from e

        logger.debug(f"Parsed document: {path}")
        self._parsed[path] = root
        return root

    def _read_text(self, path: Path, encoding: str, chain: list[Path]) -> str:
        cached = self._texts.get(path)
        if cached is not None:
            return cached

        try:
            text = path.read_text(encoding=encoding)
        except (OSError, UnicodeDecodeError, LookupError) as e:
            raise StructuralError(
                f"Failed to read text fragment ({e})", source=path, include_chain=chain
            ) from e

        self._texts[path] = text
        return text

    def _resolve_children(self, parent: ET.Element, doc_path: Path, chain: list[Path]) -> None:
        """Replace include directives below ``parent`` in place."""
        index = 0
        while index < len(parent):
            child = parent[index]
            if child.tag != XINCLUDE_TAG:
                self._resolve_children(child, doc_path, chain)
                index += 1
                continue

            href, parse_mode, encoding = self._read_directive(child, doc_path, chain)
            target = self._locate(href, doc_path, chain)
            tail = child.tail or ""
            del parent[index]

            if parse_mode == "text":
                text = self._read_text(target, encoding, chain + [target])
                _append_text(parent, index, text + tail)
                continue

            nodes = self._expand(target, chain)
            for offset, node in enumerate(nodes):
                parent.insert(index + offset, node)

            if nodes:
                nodes[-1].tail = (nodes[-1].tail or "") + tail
            else:
                _append_text(parent, index, tail)

            index += len(nodes)

    def _read_directive(
        self, directive: ET.Element, doc_path: Path, chain: list[Path]
    ) -> tuple[str, str, str]:
        href = (directive.get("href") or "").strip()
        if not href:
            raise MalformedDocumentError(
                "Include directive has no href", source=doc_path, include_chain=chain
            )

        parse_mode = directive.get("parse", "xml")
        if parse_mode not in ("xml", "text"):
            raise MalformedDocumentError(
                f"Unsupported include parse mode: {parse_mode!r}",
                source=doc_path,
                include_chain=chain,
            )

        return href, parse_mode, directive.get("encoding", "utf-8")

    def _locate(self, href: str, doc_path: Path, chain: list[Path]) -> Path:
        ref = Path(href)
        target = ref if ref.is_absolute() else doc_path.parent / ref
        target = target.resolve()

        if not target.is_file():
            raise UnresolvedIncludeError(target, doc_path, include_chain=chain)

        return target

    def _expand(self, target: Path, chain: list[Path]) -> list[ET.Element]:
        """Return the resolved nodes a fragment contributes at one splice point."""
        if target in chain:
            raise CircularIncludeError(chain + [target])

        fragment_chain = chain + [target]
        root = copy.deepcopy(self._parse(target, fragment_chain))
        self._resolve_children(root, target, fragment_chain)

        if local_name(root.tag) == FRAGMENT_ROOT:
            return list(root)

        root.tail = None
        return [root]


def _append_text(parent: ET.Element, index: int, text: str) -> None:
    """Attach text at position ``index`` of ``parent`` (ElementTree text/tail model)."""
    if not text:
        return
    if index == 0:
        parent.text = (parent.text or "") + text
    else:
        previous = parent[index - 1]
        previous.tail = (previous.tail or "") + text
