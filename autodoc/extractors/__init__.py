"""
Extractors Module

Builds documentation descriptors from a Source Unit Index:
- Controllers and their endpoints (verbs, paths, parameters, schemas, examples)
- Injectable services
- Type catalog of every named data shape
"""

from .annotations import HttpVerb, ParameterLocation, build_path
from .controller_extractor import (
    ControllerDescriptor,
    ControllerExtractor,
    EndpointDescriptor,
    ParameterDescriptor,
)
from .service_extractor import ServiceDescriptor, ServiceExtractor
from .type_catalog import build_type_catalog

__all__ = [
    "HttpVerb",
    "ParameterLocation",
    "build_path",
    "ControllerDescriptor",
    "ControllerExtractor",
    "EndpointDescriptor",
    "ParameterDescriptor",
    "ServiceDescriptor",
    "ServiceExtractor",
    "build_type_catalog",
]
