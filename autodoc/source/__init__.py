"""
Source Unit Index Module

Providers of parsed declarations:
- JSON declarations dump (load_index / dump_index)
- Best-effort TypeScript scanner
"""

from .models import (
    Annotation,
    Declaration,
    DeclarationKind,
    EnumMember,
    MethodDeclaration,
    ParameterDeclaration,
    PropertyDeclaration,
    SourceIndex,
    SourceUnit,
)
from .index_loader import build_index, dump_index, load_index
from .ts_scanner import TypeScriptScanner

__all__ = [
    "Annotation",
    "Declaration",
    "DeclarationKind",
    "EnumMember",
    "MethodDeclaration",
    "ParameterDeclaration",
    "PropertyDeclaration",
    "SourceIndex",
    "SourceUnit",
    "build_index",
    "dump_index",
    "load_index",
    "TypeScriptScanner",
]
