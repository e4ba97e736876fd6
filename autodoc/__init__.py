"""
autodoc - API documentation from annotated TypeScript sources

Resolves the type references of controller methods into full type
definitions and renders them as JSON Schema, example payloads, a JSON
analysis file and an OpenAPI document.
"""

__version__ = "0.1.0"

from .analyzer import Analyzer, AnalysisResult

__all__ = [
    "Analyzer",
    "AnalysisResult",
    "__version__",
]
