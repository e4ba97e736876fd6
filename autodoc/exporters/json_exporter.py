"""JSON exporter."""
import json
import logging
from pathlib import Path
from typing import Union

from autodoc.analyzer import AnalysisResult

logger = logging.getLogger(__name__)


class JsonExporter:
    """Export an analysis result to JSON."""

    def export(
        self,
        result: AnalysisResult,
        output_file: Union[str, Path],
        pretty: bool = True,
    ) -> Path:
        """Export to JSON file."""
        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, indent=2 if pretty else None, default=str)

        logger.info(f"Exported analysis to {output_file}")
        return output_file
