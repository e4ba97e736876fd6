"""
Analyzer - Runs one documentation analysis over a Source Unit Index.

Each run owns a fresh TypeResolver, so cached resolutions never leak from
one project (or one run) into another.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from autodoc import __version__
from autodoc.core.type_resolver import TypeResolver
from autodoc.extractors.controller_extractor import ControllerDescriptor, ControllerExtractor
from autodoc.extractors.service_extractor import ServiceDescriptor, ServiceExtractor
from autodoc.extractors.type_catalog import build_type_catalog
from autodoc.generators.schema_generator import SchemaGenerator, UnionMode
from autodoc.source.index_loader import build_index
from autodoc.source.models import SourceIndex

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Everything documented about one project"""
    metadata: Dict[str, Any] = field(default_factory=dict)
    controllers: List[ControllerDescriptor] = field(default_factory=list)
    services: List[ServiceDescriptor] = field(default_factory=list)
    type_schemas: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    summary: Dict[str, Any] = field(default_factory=dict)

    @property
    def endpoint_count(self) -> int:
        return sum(len(c.endpoints) for c in self.controllers)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation"""
        return {
            "metadata": self.metadata,
            "controllers": [c.to_dict() for c in self.controllers],
            "services": [s.to_dict() for s in self.services],
            "type_schemas": self.type_schemas,
            "summary": self.summary,
        }


class Analyzer:
    """
    Extracts controllers, services and the type catalog of a project

    Usage:
    ```python
    analyzer = Analyzer(include_private=False)
    result = analyzer.analyze_path("./src")
    print(result.summary)
    ```
    """

    def __init__(
        self,
        include_private: bool = False,
        primitive_union_mode: str = UnionMode.FIRST.value,
        exclude_patterns: Optional[Sequence[str]] = None,
    ):
        self.include_private = include_private
        self.primitive_union_mode = primitive_union_mode
        self.exclude_patterns = list(exclude_patterns or [])

    def analyze_path(self, path: str) -> AnalysisResult:
        """Build the index of a project path and analyze it"""
        index = build_index(path, self.exclude_patterns)
        return self.analyze(index, project_path=path)

    def analyze(self, index: SourceIndex, project_path: str = "") -> AnalysisResult:
        """
        Analyze a Source Unit Index

        Args:
            index: Parsed source units
            project_path: Shown in the result metadata

        Returns:
            AnalysisResult
        """
        started = time.perf_counter()

        resolver = TypeResolver(index)
        generator = SchemaGenerator(self.primitive_union_mode)

        controllers = ControllerExtractor(resolver, generator, self.include_private).extract_controllers()
        services = ServiceExtractor(index, self.include_private).extract_services()
        type_schemas = build_type_catalog(resolver, generator)

        elapsed = time.perf_counter() - started
        logger.debug(f"Type cache after analysis: {resolver.cache_stats()['size']} entries")

        result = AnalysisResult(
            controllers=controllers,
            services=services,
            type_schemas=type_schemas,
        )
        result.summary = self._summary(result)
        result.metadata = {
            "generated_at": datetime.now().isoformat(),
            "version": __version__,
            "project_path": project_path,
            "analysis_time": round(elapsed, 4),
            "total_files": len(index),
            "total_controllers": len(controllers),
            "total_endpoints": result.endpoint_count,
            "total_services": len(services),
            "total_types": len(type_schemas),
        }

        logger.info(
            f"Analysis complete: {len(controllers)} controllers, {result.endpoint_count} endpoints, "
            f"{len(services)} services, {len(type_schemas)} types"
        )
        return result

    @staticmethod
    def _summary(result: AnalysisResult) -> Dict[str, Any]:
        kinds: Dict[str, int] = {}
        for entry in result.type_schemas.values():
            kinds[entry["kind"]] = kinds.get(entry["kind"], 0) + 1

        endpoints_by_method: Dict[str, int] = {}
        for controller in result.controllers:
            for endpoint in controller.endpoints:
                verb = endpoint.verb.value
                endpoints_by_method[verb] = endpoints_by_method.get(verb, 0) + 1

        return {
            "controllers": len(result.controllers),
            "endpoints": result.endpoint_count,
            "services": len(result.services),
            "types": len(result.type_schemas),
            "dtos": kinds.get("class", 0),
            "interfaces": kinds.get("interface", 0),
            "enums": kinds.get("enum", 0),
            "aliases": kinds.get("alias", 0),
            "endpoints_by_method": endpoints_by_method,
        }
