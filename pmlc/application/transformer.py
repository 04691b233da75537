"""Transformation pipeline: load -> map -> render -> assemble."""

import logging
from pathlib import Path

from pmlc.application.document_assembler import DocumentAssembler
from pmlc.application.document_loader import DocumentLoader
from pmlc.application.model_mapper import ModelMapper
from pmlc.domain.errors import PmlError
from pmlc.domain.models import PromptDocument

logger = logging.getLogger(__name__)


def load_document(source: Path) -> PromptDocument:
    """Load ``source``, resolve its includes and map it to a PromptDocument."""
    tree = DocumentLoader().load(source)
    return ModelMapper(source=source).map(tree)


def transform(source: Path) -> str:
    """Compile one prompt document into its Markdown artifact.

    Each call uses a fresh loader, so no fragment cache or other state is shared
    between documents.

    Raises:
        PmlError: On any structural or schema failure. Errors raised below the
            mapper are re-tagged with ``source`` when they lack one.
    """
    logger.debug(f"Transforming {source}")
    try:
        document = load_document(source)
        return DocumentAssembler(document).assemble()
    except PmlError as e:
        if e.source is None:
            e.source = source
        raise
