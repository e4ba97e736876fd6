"""Loading and saving of Source Unit Indexes."""
import json
import logging
from pathlib import Path
from typing import Optional, Sequence

from autodoc.errors import SourceIndexError
from autodoc.source.models import SourceIndex
from autodoc.source.ts_scanner import TypeScriptScanner

logger = logging.getLogger(__name__)


def load_index(path: str) -> SourceIndex:
    """
    Read a Source Unit Index from a JSON declarations dump

    Raises:
        SourceIndexError: If the file is missing, is not JSON or has no "units"
    """
    index_path = Path(path)
    try:
        with open(index_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise SourceIndexError(path, "file not found")
    except (OSError, json.JSONDecodeError) as e:
        raise SourceIndexError(path, str(e))

    if not isinstance(data, dict) or not isinstance(data.get("units"), list):
        raise SourceIndexError(path, 'expected an object with a "units" list')

    try:
        index = SourceIndex.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise SourceIndexError(path, f"malformed declaration: {e}")

    logger.info(f"Loaded {len(index)} source units from {path}")
    return index


def dump_index(index: SourceIndex, path: str) -> None:
    """Write a Source Unit Index as JSON"""
    output_file = Path(path)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(index.to_dict(), f, indent=2, default=str)
    logger.info(f"Wrote {len(index)} source units to {path}")


def build_index(path: str, exclude_patterns: Optional[Sequence[str]] = None) -> SourceIndex:
    """
    Build a Source Unit Index for a project path

    A .json file is read as a declarations dump; a directory or a .ts file
    is scanned.

    Raises:
        SourceIndexError: If the path does not exist or has an unsupported type
    """
    source = Path(path)
    if not source.exists():
        raise SourceIndexError(path, "path does not exist")

    if source.is_file() and source.suffix == ".json":
        return load_index(path)

    scanner = TypeScriptScanner(exclude_patterns)
    if source.is_dir():
        return scanner.scan_directory(path)

    if source.suffix == ".ts":
        unit = scanner.scan_file(path, unit_id=source.name)
        return SourceIndex([unit] if unit is not None else [])

    raise SourceIndexError(path, "expected a directory, a .ts file or a .json index")
