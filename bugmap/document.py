"""Persist the filename -> titles mapping as a JSON document."""

import json
import logging
from pathlib import Path
from typing import Dict, List

LOG = logging.getLogger("bugmap.document")


class DocumentWriteError(Exception):
    """Raised when the output document cannot be written."""

    pass


def write_document(path: Path, document: Dict[str, List[str]]) -> Path:
    """Write document to path as a single JSON object. Creates parent dirs."""
    path = Path(path)
    try:
        raw = json.dumps(document, ensure_ascii=False, indent=2)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(raw + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError) as e:
        raise DocumentWriteError(f"Failed to write {path}: {e}") from e
    LOG.info("JSON document saved to %s (%s files)", path, len(document))
    return path


def read_document(path: Path) -> Dict[str, List[str]]:
    """Load a document written by write_document."""
    return json.loads(Path(path).read_text(encoding="utf-8"))
