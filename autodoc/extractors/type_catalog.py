"""Type Catalog - Named data shapes of a project with their schemas and examples."""

import logging
from typing import Any, Dict

from autodoc.core.type_resolver import TypeResolver
from autodoc.extractors.annotations import (
    CONTROLLER_ANNOTATION,
    MODULE_ANNOTATION,
    SERVICE_ANNOTATION,
)
from autodoc.generators.schema_generator import SchemaGenerator

logger = logging.getLogger(__name__)

# Classes carrying these annotations are behavior, not data shapes
FRAMEWORK_ANNOTATIONS = (CONTROLLER_ANNOTATION, SERVICE_ANNOTATION, MODULE_ANNOTATION)


def build_type_catalog(resolver: TypeResolver, generator: SchemaGenerator) -> Dict[str, Dict[str, Any]]:
    """
    Resolve every data-shape declaration in the index

    The first declaration of a name wins; later duplicates are skipped.

    Returns:
        {name: {"kind", "file_path", "type", "schema", "example"}}
    """
    catalog: Dict[str, Dict[str, Any]] = {}

    for unit, declaration in resolver.index.iter_declarations():
        if any(declaration.has_annotation(a) for a in FRAMEWORK_ANNOTATIONS):
            continue
        if declaration.name in catalog:
            logger.debug(f"Duplicate type name {declaration.name} in {unit.id}, keeping first")
            continue

        resolved = resolver.resolve(declaration.name, unit.id)
        schema = generator.generate_schema(resolved)
        catalog[declaration.name] = {
            "kind": declaration.kind.value,
            "file_path": unit.id,
            "type": resolved.to_dict(),
            "schema": schema,
            "example": generator.generate_example(schema),
        }

    logger.info(f"Cataloged {len(catalog)} types")
    return catalog
