"""Map document persistence.

Reads and writes ``MapNNN.json`` files holding a ``MapDocument``.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from .models import MapDocument

logger = logging.getLogger(__name__)


def map_path(maps_dir: str, map_id: int) -> Path:
    """Path of a map file, e.g. ``data/Map003.json``.

    A non-numeric id fails here with the formatter's ``ValueError``.
    """
    return Path(maps_dir) / f"Map{map_id:03d}.json"


def has_map(maps_dir: str, map_id: int) -> bool:
    return map_path(maps_dir, map_id).exists()


def load_map_document(path: Path) -> Optional[MapDocument]:
    """Load a map document.

    Args:
        path: map file path

    Returns:
        the MapDocument, or None if the file does not exist
    """
    if not path.exists():
        return None

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return MapDocument.model_validate(data)


def save_map_document(document: MapDocument, path: Path) -> Path:
    """Write a map document, creating its directory if needed.

    Args:
        document: map to write
        path: destination file

    Returns:
        the written path
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(document.model_dump(), f, ensure_ascii=False, indent=2)
    logger.info("Map saved to %s", path)
    return path
