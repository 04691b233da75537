"""Build configuration model.

Config structure (``.pml/config.yml``):
    source_dir: prompts
    output_dir: build/prompts
    output_extension: .mdc
    workers: 4
    inventory:
      - 110-java-maven-best-practices
      - 121-java-object-oriented-design
"""

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from pmlc.domain.constants import (
    DEFAULT_OUTPUT_DIR,
    DEFAULT_OUTPUT_EXTENSION,
    DEFAULT_SOURCE_DIR,
)


class BuildSettings(BaseModel):
    """Validated settings for one build (parsed from merged config + CLI overrides)."""

    model_config = ConfigDict(extra="forbid")

    source_dir: Path = DEFAULT_SOURCE_DIR
    output_dir: Path = DEFAULT_OUTPUT_DIR
    output_extension: str = DEFAULT_OUTPUT_EXTENSION
    workers: int | None = None
    inventory: list[str] | None = None

    @field_validator("output_extension")
    @classmethod
    def _dotted_extension(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("output_extension cannot be empty")
        return value if value.startswith(".") else f".{value}"

    @field_validator("workers")
    @classmethod
    def _positive_workers(cls, value: int | None) -> int | None:
        if value is not None and value < 1:
            raise ValueError("workers must be at least 1")
        return value

    @classmethod
    def from_config(
        cls,
        cfg: dict[str, Any],
        *,
        project_root: Path,
        overrides: dict[str, Any] | None = None,
    ) -> "BuildSettings":
        """Build settings from a merged config dict; non-None overrides win.

        Relative directories are resolved against ``project_root``.
        """
        values = dict(cfg)
        for key, value in (overrides or {}).items():
            if value is not None:
                values[key] = value

        settings = cls.model_validate(values)
        return settings.model_copy(
            update={
                "source_dir": project_root / settings.source_dir,
                "output_dir": project_root / settings.output_dir,
            }
        )

    def effective_workers(self) -> int:
        return self.workers or os.cpu_count() or 1
