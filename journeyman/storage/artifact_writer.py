import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Union

from loguru import logger

from journeyman.models.database import ConsolidatedDatabase


def write_database(
    database: ConsolidatedDatabase, path: Union[str, Path]
) -> Path:
    """Writes the output document in one step.

    The JSON goes to a temporary file next to ``path`` and is renamed into
    place, so an interrupted run never leaves a truncated artifact.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    document = database.to_document()

    fd, tmp_name = tempfile.mkstemp(
        dir=target.parent, prefix=f".{target.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2, ensure_ascii=False)
            f.write("\n")
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.success(f"Database saved to: {target}")
    return target


def load_document(path: Union[str, Path]) -> Dict[str, Any]:
    """Reads a previously written document back as plain JSON."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
