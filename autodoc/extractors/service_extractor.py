"""Service Extractor - Lists injectable classes, their dependencies and methods."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from autodoc.extractors.annotations import SERVICE_ANNOTATION
from autodoc.source.models import Declaration, MethodDeclaration, SourceIndex, SourceUnit

logger = logging.getLogger(__name__)


@dataclass
class ServiceMethod:
    name: str
    parameters: List[Dict[str, Any]] = field(default_factory=list)
    return_type: Optional[str] = None
    is_public: bool = True
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "parameters": self.parameters,
            "return_type": self.return_type,
            "is_public": self.is_public,
            "description": self.description,
        }


@dataclass
class ServiceDescriptor:
    name: str
    file_path: str
    dependencies: List[str] = field(default_factory=list)
    methods: List[ServiceMethod] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "file_path": self.file_path,
            "dependencies": self.dependencies,
            "methods": [m.to_dict() for m in self.methods],
        }


class ServiceExtractor:
    """Extracts `Injectable` classes from a Source Unit Index"""

    def __init__(self, index: SourceIndex, include_private: bool = False):
        self.index = index
        self.include_private = include_private

    def extract_services(self) -> List[ServiceDescriptor]:
        services = []
        for unit in self.index:
            for declaration in unit.classes:
                if declaration.has_annotation(SERVICE_ANNOTATION):
                    services.append(self.extract_service(declaration, unit))
        logger.info(f"Extracted {len(services)} services")
        return services

    def extract_service(self, declaration: Declaration, unit: SourceUnit) -> ServiceDescriptor:
        dependencies: List[str] = []
        methods: List[ServiceMethod] = []

        for method in declaration.methods:
            if method.is_constructor:
                # Constructor parameters are the injected dependencies
                dependencies.extend(p.type_text or p.name for p in method.parameters)
                continue
            if not method.is_public and not self.include_private:
                continue
            methods.append(self._method(method))

        return ServiceDescriptor(
            name=declaration.name,
            file_path=unit.id,
            dependencies=dependencies,
            methods=methods,
        )

    def _method(self, method: MethodDeclaration) -> ServiceMethod:
        return ServiceMethod(
            name=method.name,
            parameters=[
                {"name": p.name, "type": p.type_text or "any", "optional": p.optional}
                for p in method.parameters
            ],
            return_type=method.return_type,
            is_public=method.is_public,
            description=method.description,
        )
