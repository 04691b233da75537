"""Batch build: compile every source document of a directory.

Documents share no state, so each one runs a full pipeline on its own worker.
A failure is recorded in that document's result and never aborts siblings.
"""

from __future__ import annotations

import concurrent.futures
import logging
from pathlib import Path
from typing import Callable

from pmlc.application.config_models import BuildSettings
from pmlc.application.transformer import transform
from pmlc.domain.constants import SOURCE_GLOB
from pmlc.domain.errors import PmlError
from pmlc.domain.models import BuildReport, DocumentResult
from pmlc.engine.file_io import write_artifact

logger = logging.getLogger(__name__)


def discover_sources(source_dir: Path, names: list[str] | None = None) -> list[Path]:
    """Return the root documents to compile, sorted by path.

    With ``names`` (an inventory), exactly ``{name}.xml`` for each name is
    returned, whether or not it exists, so missing entries surface as
    per-document failures. Otherwise every top-level ``*.xml`` file is a root
    document; fragments live in subdirectories.
    """
    if names is not None:
        return sorted({source_dir / (n if n.endswith(".xml") else f"{n}.xml") for n in names})

    if not source_dir.is_dir():
        raise FileNotFoundError(f"Source directory not found: {source_dir}")

    return sorted(p for p in source_dir.glob(SOURCE_GLOB) if p.is_file())


class BuildService:
    """Compiles source documents into Markdown artifacts on a worker pool."""

    def __init__(
        self,
        settings: BuildSettings,
        on_result: Callable[[DocumentResult], None] | None = None,
    ) -> None:
        self.settings = settings
        self.on_result = on_result

    def build(self, only: list[str] | None = None) -> BuildReport:
        """Compile the selected sources and return the per-file report.

        Args:
            only: Base names to compile; overrides the configured inventory.
        """
        names = only if only else self.settings.inventory
        sources = discover_sources(self.settings.source_dir, names)
        workers = min(self.settings.effective_workers(), max(len(sources), 1))
        logger.info(f"Building {len(sources)} documents with {workers} workers")

        results: list[DocumentResult] = []
        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [pool.submit(self.build_one, source) for source in sources]
            for future in concurrent.futures.as_completed(futures):
                result = future.result()
                if self.on_result is not None:
                    self.on_result(result)
                results.append(result)

        results.sort(key=lambda r: str(r.source))
        return BuildReport(results=results)

    def build_one(self, source: Path) -> DocumentResult:
        """Compile and write one document, capturing any failure in the result."""
        try:
            content = transform(source)
            output = write_artifact(
                self.settings.output_dir,
                f"{source.stem}{self.settings.output_extension}",
                content,
            )
        except PmlError as e:
            logger.debug(f"Failed to compile {source}: {e}")
            return DocumentResult(
                source=source,
                ok=False,
                error=str(e),
                error_type=type(e).__name__,
                include_chain=e.include_chain,
            )
        except Exception as e:
            logger.exception(f"Unexpected error while compiling {source}")
            return DocumentResult(
                source=source,
                ok=False,
                error=str(e),
                error_type=type(e).__name__,
            )

        return DocumentResult(source=source, output=output, ok=True)
