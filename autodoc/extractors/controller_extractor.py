"""
Controller Extractor - Builds endpoint descriptors from annotated classes.

A controller is a class annotated `Controller`; each of its methods carrying a
verb annotation (`Get`, `Post`, ...) is an endpoint. Parameter and return
types are resolved through the run's TypeResolver and rendered with the
SchemaGenerator.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from autodoc.core.resolved_types import ObjectType, ResolvedType, ValidationRule
from autodoc.core.type_expression import normalize_type_text
from autodoc.core.type_resolver import TypeResolver
from autodoc.extractors.annotations import (
    CONTROLLER_ANNOTATION,
    INJECTED_ANNOTATIONS,
    HttpVerb,
    ParameterLocation,
    build_path,
    location_for,
    status_codes_for,
    verb_for,
)
from autodoc.generators.schema_generator import SchemaGenerator
from autodoc.source.models import Annotation, Declaration, MethodDeclaration, SourceUnit

logger = logging.getLogger(__name__)

_DEFERRED_RE = re.compile(r"^\s*(?:Promise|Observable)\s*<(.*)>\s*$", re.DOTALL)
_NO_CONTENT_TYPES = ("", "void", "undefined", "never")
_PATH_OPTION_RE = re.compile(r"\bpath\s*:\s*(['\"`])(.*?)\1", re.DOTALL)


def unwrap_deferred(type_text: Optional[str]) -> Optional[str]:
    """Strip Promise<...>/Observable<...> wrappers from a return type."""
    if type_text is None:
        return None
    match = _DEFERRED_RE.match(type_text)
    while match:
        type_text = match.group(1)
        match = _DEFERRED_RE.match(type_text)
    return type_text.strip()


def controller_base_path(annotation: Optional[Annotation]) -> Optional[str]:
    """Base path of `@Controller('users')` or `@Controller({ path: 'users' })`."""
    if annotation is None or not annotation.arguments:
        return None
    base_path = annotation.first_string_argument()
    if base_path is not None:
        return base_path
    match = _PATH_OPTION_RE.search(annotation.arguments[0])
    return match.group(2) if match else None


def humanize(name: str) -> str:
    """findAllUsers -> 'Find all users'"""
    words = re.sub(r"([a-z\d])([A-Z])", r"\1 \2", name).replace("_", " ").split()
    return " ".join(words).capitalize()


@dataclass
class ParameterDescriptor:
    """A documented endpoint parameter"""
    name: str
    type_text: str
    location: ParameterLocation
    required: bool = True
    description: Optional[str] = None
    schema: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation"""
        return {
            "name": self.name,
            "type": self.type_text,
            "location": self.location.value,
            "required": self.required,
            "description": self.description,
            "schema": self.schema,
        }


@dataclass
class StatusCode:
    code: int
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "description": self.description}


@dataclass
class EndpointDescriptor:
    """One documented entry point"""
    verb: HttpVerb
    path: str  # the method's own path argument
    full_path: str
    handler: str
    summary: str
    description: Optional[str] = None
    parameters: List[ParameterDescriptor] = field(default_factory=list)
    request_schema: Optional[Dict[str, Any]] = None
    response_schema: Optional[Dict[str, Any]] = None
    validation_rules: List[ValidationRule] = field(default_factory=list)
    examples: List[Dict[str, Any]] = field(default_factory=list)
    status_codes: List[StatusCode] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation"""
        return {
            "method": self.verb.value,
            "path": self.path,
            "full_path": self.full_path,
            "handler": self.handler,
            "summary": self.summary,
            "description": self.description,
            "parameters": [p.to_dict() for p in self.parameters],
            "request_schema": self.request_schema,
            "response_schema": self.response_schema,
            "validation_rules": [r.to_dict() for r in self.validation_rules],
            "examples": self.examples,
            "status_codes": [s.to_dict() for s in self.status_codes],
            "tags": self.tags,
        }


@dataclass
class ControllerDescriptor:
    """An entry-point group and its endpoints"""
    name: str
    file_path: str
    base_path: Optional[str] = None
    endpoints: List[EndpointDescriptor] = field(default_factory=list)
    annotations: List[str] = field(default_factory=list)
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation"""
        return {
            "name": self.name,
            "file_path": self.file_path,
            "base_path": self.base_path,
            "description": self.description,
            "annotations": self.annotations,
            "endpoints": [e.to_dict() for e in self.endpoints],
        }


class ControllerExtractor:
    """Extracts controllers and their endpoints from a Source Unit Index"""

    def __init__(
        self,
        resolver: TypeResolver,
        generator: SchemaGenerator,
        include_private: bool = False,
    ):
        self.resolver = resolver
        self.generator = generator
        self.include_private = include_private

    def extract_controllers(self) -> List[ControllerDescriptor]:
        """Extract every controller in index order"""
        controllers = []
        for unit in self.resolver.index:
            for declaration in unit.classes:
                if declaration.has_annotation(CONTROLLER_ANNOTATION):
                    controllers.append(self.extract_controller(declaration, unit))

        logger.info(
            f"Extracted {len(controllers)} controllers with "
            f"{sum(len(c.endpoints) for c in controllers)} endpoints"
        )
        return controllers

    def extract_controller(self, declaration: Declaration, unit: SourceUnit) -> ControllerDescriptor:
        """Build the descriptor of one controller class"""
        controller_annotation = declaration.get_annotation(CONTROLLER_ANNOTATION)
        base_path = controller_base_path(controller_annotation)
        tag = declaration.name[:-len("Controller")] if declaration.name.endswith("Controller") else declaration.name

        endpoints = []
        for method in declaration.methods:
            if method.is_constructor:
                continue
            if not method.is_public and not self.include_private:
                continue
            endpoint = self.extract_endpoint(method, unit, base_path, tag or declaration.name)
            if endpoint is not None:
                endpoints.append(endpoint)

        return ControllerDescriptor(
            name=declaration.name,
            file_path=unit.id,
            base_path=base_path,
            endpoints=endpoints,
            annotations=[a.name for a in declaration.annotations],
            description=declaration.description,
        )

    def extract_endpoint(
        self,
        method: MethodDeclaration,
        unit: SourceUnit,
        base_path: Optional[str] = None,
        tag: Optional[str] = None,
    ) -> Optional[EndpointDescriptor]:
        """
        Build the endpoint descriptor of a method

        Returns:
            EndpointDescriptor, or None if the method has no verb annotation
        """
        route = self._route_annotation(method)
        if route is None:
            return None

        verb = verb_for(route.name)
        method_path = route.first_string_argument() or ""

        parameters: List[ParameterDescriptor] = []
        request_schema = None
        validation_rules: List[ValidationRule] = []

        for param in method.parameters:
            annotation = param.annotations[0] if param.annotations else None
            if annotation is not None and annotation.name in INJECTED_ANNOTATIONS:
                continue

            location = location_for(annotation.name if annotation else None)
            type_text = param.type_text or "any"
            resolved = self.resolver.resolve(type_text, unit.id)
            schema = self.generator.generate_schema(resolved)

            name = param.name
            if annotation is not None and annotation.first_string_argument():
                name = annotation.first_string_argument()

            parameters.append(ParameterDescriptor(
                name=name,
                type_text=type_text,
                location=location,
                required=not param.optional,
                schema=schema,
            ))

            if location == ParameterLocation.BODY and request_schema is None:
                request_schema = schema
                validation_rules = self._validation_rules(resolved)

        response_schema = None
        return_text = unwrap_deferred(method.return_type)
        if return_text is not None and normalize_type_text(return_text) not in _NO_CONTENT_TYPES:
            response_schema = self.generator.generate_schema(self.resolver.resolve(return_text, unit.id))

        status_codes = [StatusCode(code, text) for code, text in status_codes_for(verb)]

        examples = []
        generated = self.generator.generate_examples(request_schema, response_schema)
        if generated:
            examples.append({"name": "default", "status_code": status_codes[0].code, **generated})

        summary = method.description.splitlines()[0] if method.description else humanize(method.name)

        return EndpointDescriptor(
            verb=verb,
            path=method_path,
            full_path=build_path(base_path, method_path),
            handler=method.name,
            summary=summary,
            description=method.description,
            parameters=parameters,
            request_schema=request_schema,
            response_schema=response_schema,
            validation_rules=validation_rules,
            examples=examples,
            status_codes=status_codes,
            tags=[tag] if tag else [],
        )

    def _route_annotation(self, method: MethodDeclaration) -> Optional[Annotation]:
        for annotation in method.annotations:
            if verb_for(annotation.name) is not None:
                return annotation
        return None

    def _validation_rules(self, resolved: ResolvedType) -> List[ValidationRule]:
        if not isinstance(resolved, ObjectType):
            return []
        return [rule for prop in resolved.properties for rule in prop.validation_rules]
