"""Domain-level exceptions for the PML compiler.

Two families cover every failure of the pipeline:

- ``StructuralError``: the source cannot be composed into one tree
  (malformed XML, unresolved or circular inclusion).
- ``SchemaError``: the composed tree does not fit the fixed vocabulary
  (missing required element, invalid value, unknown section kind).

Every error carries the source document it was raised for and, where known,
the element path and the inclusion chain that led to it.
"""

from pathlib import Path


class PmlError(Exception):
    """Base class for all transformation errors."""

    def __init__(
        self,
        message: str,
        *,
        source: Path | None = None,
        element_path: str | None = None,
        include_chain: list[Path] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.source = source
        self.element_path = element_path
        self.include_chain = list(include_chain or [])

    def __str__(self) -> str:
        parts = [self.message]
        if self.source is not None:
            parts.append(f"in {self.source}")
        if self.element_path:
            parts.append(f"at {self.element_path}")
        text = " ".join(parts)
        if len(self.include_chain) > 1:
            text += f" (included via {format_chain(self.include_chain)})"
        return text


class StructuralError(PmlError):
    """Raised when a source cannot be composed into one tree."""

    pass


class MalformedDocumentError(StructuralError):
    """Raised when a document is not well-formed or an include directive is invalid."""

    pass


class UnresolvedIncludeError(StructuralError):
    """Raised when an included fragment cannot be located."""

    def __init__(
        self,
        fragment: Path,
        referenced_from: Path,
        *,
        include_chain: list[Path] | None = None,
    ) -> None:
        super().__init__(
            f"Included fragment not found: {fragment} (referenced from {referenced_from})",
            source=referenced_from,
            include_chain=include_chain,
        )
        self.fragment = fragment
        self.referenced_from = referenced_from


class CircularIncludeError(StructuralError):
    """Raised when resolving an include would revisit a document on the current path."""

    def __init__(self, cycle: list[Path]) -> None:
        super().__init__(
            f"Circular include detected: {format_chain(cycle)}",
            source=cycle[0] if cycle else None,
            include_chain=cycle[:-1],
        )
        self.cycle = list(cycle)


class SchemaError(PmlError):
    """Raised when the composed tree does not fit the document vocabulary."""

    pass


class MissingRequiredElementError(SchemaError):
    """Raised when a required element is absent."""

    def __init__(self, element: str, *, source: Path | None = None) -> None:
        super().__init__(
            f"Missing required element: {element}",
            source=source,
            element_path=element,
        )
        self.element = element


class InvalidElementError(SchemaError):
    """Raised when an element carries an invalid or duplicate value."""

    pass


class UnknownSectionKindError(SchemaError):
    """Raised when a content section is not one of the known kinds."""

    def __init__(
        self,
        kind: str,
        *,
        source: Path | None = None,
        element_path: str | None = None,
    ) -> None:
        super().__init__(
            f"Unknown section kind: {kind}",
            source=source,
            element_path=element_path,
        )
        self.kind = kind


def format_chain(paths: list[Path]) -> str:
    """Render an inclusion chain as ``a.xml -> b.xml -> ...``."""
    return " -> ".join(str(p) for p in paths)
