"""Validation rules from class-validator style property annotations."""
import re
from typing import Any, List, Optional

from autodoc.core.resolved_types import ValidationRule
from autodoc.source.models import Annotation, strip_quotes

# Annotations that carry a validation meaning
VALIDATION_ANNOTATIONS = frozenset([
    "IsString",
    "IsNumber",
    "IsInt",
    "IsBoolean",
    "IsArray",
    "IsObject",
    "IsNotEmpty",
    "IsOptional",
    "IsEmail",
    "IsUrl",
    "IsDate",
    "IsDateString",
    "IsISO8601",
    "IsEnum",
    "IsUUID",
    "Min",
    "Max",
    "MinLength",
    "MaxLength",
    "Matches",
])

_INT_RE = re.compile(r"^-?\d+$")
_FLOAT_RE = re.compile(r"^-?\d+\.\d+$")
_REGEX_LITERAL_RE = re.compile(r"^/(.*)/[a-z]*$", re.DOTALL)
_MESSAGE_RE = re.compile(r"message\s*:\s*(['\"`])(.*?)\1", re.DOTALL)


def parse_literal(text: Optional[str]) -> Any:
    """Turn initializer/argument text into a plain value when it is a literal.

    Quoted strings lose their quotes, numbers and booleans are converted,
    regex literals become their pattern. Anything else is returned as-is.
    """
    if text is None:
        return None
    if not isinstance(text, str):
        return text
    stripped = text.strip()
    quoted = strip_quotes(stripped)
    if quoted is not None:
        return quoted
    if stripped in ("true", "false"):
        return stripped == "true"
    if stripped == "null":
        return None
    if _INT_RE.match(stripped):
        return int(stripped)
    if _FLOAT_RE.match(stripped):
        return float(stripped)
    regex = _REGEX_LITERAL_RE.match(stripped)
    if regex:
        return regex.group(1)
    return stripped


def _message(arguments: List[str]) -> Optional[str]:
    for argument in arguments:
        match = _MESSAGE_RE.search(argument)
        if match:
            return match.group(2)
    return None


def rules_from_annotations(field: str, annotations: List[Annotation]) -> List[ValidationRule]:
    """Build validation rules for a property from its annotations."""
    rules = []
    for annotation in annotations:
        if annotation.name not in VALIDATION_ANNOTATIONS:
            continue
        value = parse_literal(annotation.arguments[0]) if annotation.arguments else None
        rules.append(ValidationRule(
            field=field,
            rule=annotation.name,
            value=value,
            parameters=list(annotation.arguments),
            message=_message(annotation.arguments),
        ))
    return rules
