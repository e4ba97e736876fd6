"""Exporters for analysis results (JSON and OpenAPI)."""

from .json_exporter import JsonExporter
from .openapi_exporter import OpenApiExporter

__all__ = ["JsonExporter", "OpenApiExporter"]
