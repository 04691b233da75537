import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def write_artifact(output_dir: Path, filename: str, content: str) -> Path:
    """Write one compiled artifact and return its path.

    Architecture constraints:
    - Engine owns all file I/O (this module); the pipeline only returns text.

    Contract (defined by tests):
    - Creates the output directory as needed.
    - Writes text exactly as provided (UTF-8, no newline translation).
    - Rejects unsafe filenames (path separators, '..').
    """
    if not filename or "/" in filename or "\\" in filename or ".." in filename:
        raise ValueError(f"Invalid artifact filename: '{filename}'")

    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / filename
    with path.open("w", encoding="utf-8", newline="") as fh:
        fh.write(content)

    logger.debug(f"Wrote {path}")
    return path
