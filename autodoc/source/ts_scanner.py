"""
TypeScript Scanner - Builds Source Units from .ts files.

Best-effort declaration scanner based on regular expressions and bracket
matching. It reads top-level interfaces, classes, enums and type aliases,
their decorators and JSDoc descriptions, and the members needed for type
resolution and entry-point extraction. Function bodies are skipped, not parsed.

All structural decisions are made on a masked copy of the text in which
comments and string/regex literal contents are blanked out; the original text
at the same offsets supplies names, literals and type texts.
"""

import fnmatch
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

from autodoc.source.models import (
    Annotation,
    Declaration,
    DeclarationKind,
    EnumMember,
    MethodDeclaration,
    ParameterDeclaration,
    PropertyDeclaration,
    SourceIndex,
    SourceUnit,
    strip_quotes,
)

logger = logging.getLogger(__name__)

Span = Tuple[int, int]

_OPENERS = "([{"
_CLOSERS = {")": "(", "]": "[", "}": "{"}

_DECLARATION_RE = re.compile(
    r"(?<![\w$.])(?:export\s+(?:default\s+)?)?(?:declare\s+)?(?:abstract\s+)?(?:const\s+)?"
    r"(interface|class|enum|type)\s+([A-Za-z_$][\w$]*)"
)
_DECORATOR_RE = re.compile(r"@\s*([\w$.]+)")
_MODIFIER_RE = re.compile(
    r"\s*(public|private|protected|static|readonly|declare|abstract|override|async|get|set)"
    r"\s+(?=[#\w$'\"*\[])"
)
_MEMBER_NAME_RE = re.compile(r"\s*\*?\s*(#?[\w$]+|(['\"])[^'\"\n]*\2)")
_PARAMETER_MODIFIER_RE = re.compile(r"\s*(public|private|protected|readonly|override)\s+")
_METHOD_HEADER_RE = re.compile(
    r"\s*(?:(?:public|private|protected|static|readonly|async|abstract|override|declare|get|set)\s+)*"
    r"\*?\s*#?[\w$]+\s*\??\s*(?:<.*>)?\s*\(",
    re.DOTALL,
)
_NUMBER_RE = re.compile(r"^-?(?:0[xX][0-9a-fA-F]+|\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)$")

# A newline does not end a member whose text ends with one of these
_CONTINUATION_TAIL = ",|&=:(<?."
# ...or when the next line starts with one of these
_CONTINUATION_HEAD = "|&.{=?:"


@dataclass
class _DocComment:
    start: int
    end: int
    text: str


def _is_ident_char(ch: str) -> bool:
    return ch.isalnum() or ch in "_$"


def mask_source(text: str) -> Tuple[str, List[_DocComment]]:
    """
    Blank out comments and literal contents, keeping offsets

    Comment characters become spaces (newlines kept). String, template and
    regex literals keep their delimiters; their contents become spaces.

    Returns:
        (masked text, JSDoc comments in source order)
    """
    out = list(text)
    docs: List[_DocComment] = []
    n = len(text)
    i = 0
    template_depths: List[int] = []  # brace depth of each open ${ ... }
    brace_depth = 0
    last_significant = ""

    def blank(start: int, end: int, keep_newlines: bool) -> None:
        for k in range(start, end):
            if not (keep_newlines and text[k] == "\n"):
                out[k] = " "

    def scan_template(start: int) -> int:
        # start is just past a backtick or a closing } of an interpolation
        k = start
        while k < n:
            ch = text[k]
            if ch == "\\":
                k += 2
                continue
            if ch == "`":
                blank(start, k, False)
                return k + 1
            if ch == "$" and k + 1 < n and text[k + 1] == "{":
                blank(start, k, False)
                template_depths.append(brace_depth)
                return -(k + 2)  # negative: resume code after ${
            k += 1
        blank(start, n, False)
        return n

    while i < n:
        ch = text[i]
        nxt = text[i + 1] if i + 1 < n else ""

        if ch == "/" and nxt == "/":
            end = text.find("\n", i)
            end = n if end < 0 else end
            blank(i, end, True)
            i = end
            continue

        if ch == "/" and nxt == "*":
            end = text.find("*/", i + 2)
            end = n if end < 0 else end + 2
            if text.startswith("/**", i) and not text.startswith("/**/", i):
                docs.append(_DocComment(i, end, text[i:end]))
            blank(i, end, True)
            i = end
            continue

        if ch in "'\"":
            k = i + 1
            while k < n and text[k] != ch and text[k] != "\n":
                k += 2 if text[k] == "\\" else 1
            k = min(k, n)
            blank(i + 1, k, False)
            i = k + 1
            last_significant = ch
            continue

        if ch == "`":
            resume = scan_template(i + 1)
            last_significant = "`"
            if resume < 0:
                i = -resume
                brace_depth += 1
                continue
            i = resume
            continue

        if ch == "/" and (not last_significant or last_significant in "(,=:[!&|?{};"):
            # Regex literal
            k = i + 1
            in_class = False
            while k < n and text[k] != "\n":
                c = text[k]
                if c == "\\":
                    k += 2
                    continue
                if c == "[":
                    in_class = True
                elif c == "]":
                    in_class = False
                elif c == "/" and not in_class:
                    break
                k += 1
            if k < n and text[k] == "/":
                blank(i + 1, k, False)
                i = k + 1
                while i < n and text[i].isalpha():
                    i += 1
                last_significant = "/"
                continue

        if ch == "{":
            brace_depth += 1
        elif ch == "}":
            brace_depth -= 1
            if template_depths and template_depths[-1] == brace_depth:
                template_depths.pop()
                resume = scan_template(i + 1)
                if resume < 0:
                    i = -resume
                    brace_depth += 1
                    continue
                i = resume
                last_significant = "`"
                continue

        if not ch.isspace():
            last_significant = ch
        i += 1

    return "".join(out), docs


def clean_doc_comment(text: str) -> Optional[str]:
    """Return the description part of a JSDoc comment (tags dropped)."""
    body = text.strip()
    if body.startswith("/**"):
        body = body[3:]
    if body.endswith("*/"):
        body = body[:-2]

    lines = []
    for line in body.splitlines():
        line = line.strip()
        if line.startswith("*"):
            line = line[1:].strip()
        if line.startswith("@"):
            break
        lines.append(line)

    description = "\n".join(lines).strip()
    return description or None


def matching_bracket(masked: str, open_index: int, end: Optional[int] = None) -> int:
    """Return the index of the bracket closing the one at open_index, or -1."""
    end = len(masked) if end is None else end
    stack = []
    for i in range(open_index, end):
        ch = masked[i]
        if ch in _OPENERS:
            stack.append(ch)
        elif ch in _CLOSERS:
            if not stack or stack[-1] != _CLOSERS[ch]:
                return -1
            stack.pop()
            if not stack:
                return i
    return -1


def skip_angle_group(masked: str, start: int, end: int) -> int:
    """Return the index just past a <...> group starting at start."""
    depth = 0
    for i in range(start, end):
        ch = masked[i]
        if ch == "<":
            depth += 1
        elif ch == ">" and masked[i - 1] != "=":
            depth -= 1
            if depth == 0:
                return i + 1
    return end


def top_level_indexes(masked: str, start: int, end: int) -> List[int]:
    """
    Offsets in [start, end) that lie outside every bracket pair

    `<` opens a group only directly after an identifier (generic arguments),
    and the `>` of `=>` never closes one.
    """
    result = []
    stack: List[str] = []
    for i in range(start, end):
        ch = masked[i]
        if not stack:
            result.append(i)
        if ch in _OPENERS:
            stack.append(ch)
        elif ch == "<" and i > start and _is_ident_char(masked[i - 1]):
            stack.append(ch)
        elif ch == ">" and stack and stack[-1] == "<" and masked[i - 1] != "=":
            stack.pop()
        elif ch in _CLOSERS:
            while stack and stack[-1] == "<":
                stack.pop()
            if stack:
                stack.pop()
    return result


def split_top_level(masked: str, start: int, end: int, separator: str = ",") -> List[Span]:
    """Split [start, end) at top-level separators; blank pieces are dropped."""
    spans = []
    piece_start = start
    for i in top_level_indexes(masked, start, end):
        if masked[i] == separator:
            spans.append((piece_start, i))
            piece_start = i + 1
    spans.append((piece_start, end))
    return [(s, e) for s, e in spans if masked[s:e].strip()]


def find_top_level_assignment(masked: str, start: int, end: int) -> int:
    """Return the offset of a top-level `=` initializer, or -1."""
    for i in top_level_indexes(masked, start, end):
        if masked[i] != "=":
            continue
        prev = masked[i - 1] if i > 0 else ""
        nxt = masked[i + 1] if i + 1 < len(masked) else ""
        if nxt in "=>" or prev in "=!<>":
            continue
        return i
    return -1


def decorator_spans(masked: str, start: int, end: int) -> Tuple[List[Span], int]:
    """
    Find the decorators at the head of [start, end)

    Returns:
        (decorator spans, offset of the text after the last decorator)
    """
    spans = []
    i = start
    while True:
        while i < end and masked[i].isspace():
            i += 1
        match = _DECORATOR_RE.match(masked, i, end)
        if not match:
            return spans, i
        j = match.end()
        if j < end and masked[j] == "(":
            close = matching_bracket(masked, j, end)
            j = end if close < 0 else close + 1
        spans.append((i, j))
        i = j


def parse_literal_type(value: str) -> Optional[str]:
    """Type of a literal initializer, e.g. "'x'" -> "string"."""
    value = value.strip()
    if strip_quotes(value) is not None:
        return "string"
    if _NUMBER_RE.match(value):
        return "number"
    if value in ("true", "false"):
        return "boolean"
    return None


def parse_enum_value(text: str) -> Any:
    """Literal value of an enum initializer; other expressions stay raw text."""
    text = text.strip()
    unquoted = strip_quotes(text)
    if unquoted is not None:
        return unquoted
    if _NUMBER_RE.match(text):
        if text.lower().lstrip("-").startswith("0x"):
            return int(text, 16)
        number = float(text)
        return int(number) if number.is_integer() and "." not in text and "e" not in text.lower() else number
    return text


class TypeScriptScanner:
    """
    Scans TypeScript sources into Source Units

    Usage:
    ```python
    scanner = TypeScriptScanner(exclude_patterns=["**/migrations/**"])
    index = scanner.scan_directory("./src")
    ```
    """

    SKIPPED_DIRECTORIES = ("node_modules", "dist", ".git")
    SKIPPED_MARKERS = (".spec.", ".test.")

    def __init__(self, exclude_patterns: Optional[Sequence[str]] = None):
        self.exclude_patterns = list(exclude_patterns or [])

    # ========================================================================
    # Discovery
    # ========================================================================

    def scan_directory(self, root: str) -> SourceIndex:
        """
        Scan every .ts file under root

        Unit ids are paths relative to root, with forward slashes.
        """
        root_path = Path(root)
        units = []
        for path in sorted(root_path.rglob("*.ts")):
            relative = path.relative_to(root_path).as_posix()
            if self._is_skipped(relative):
                continue
            unit = self.scan_file(str(path), unit_id=relative)
            if unit is not None:
                units.append(unit)

        logger.info(f"Scanned {len(units)} TypeScript files under {root}")
        return SourceIndex(units)

    def scan_file(self, path: str, unit_id: Optional[str] = None) -> Optional[SourceUnit]:
        """Scan one file; unreadable files are skipped with a warning."""
        try:
            text = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Skipping unreadable file {path}: {e}")
            return None
        return self.scan_source(text, unit_id or Path(path).as_posix())

    def _is_skipped(self, relative: str) -> bool:
        parts = relative.split("/")
        if any(part in self.SKIPPED_DIRECTORIES for part in parts[:-1]):
            return True
        if any(marker in parts[-1] for marker in self.SKIPPED_MARKERS):
            return True
        return any(fnmatch.fnmatch(relative, pattern) for pattern in self.exclude_patterns)

    # ========================================================================
    # Declarations
    # ========================================================================

    def scan_source(self, text: str, unit_id: str) -> SourceUnit:
        """Scan TypeScript source text into a Source Unit"""
        masked, docs = mask_source(text)
        depths = self._brace_depths(masked)
        unit = SourceUnit(unit_id)

        for match in _DECLARATION_RE.finditer(masked):
            if depths[match.start()] != 0:
                continue
            keyword, name = match.group(1), match.group(2)
            spans, lead = self._leading_decorators(masked, match.start())
            annotations = [self._annotation(masked, text, s, e) for s, e in spans]
            description = self._doc_before(masked, docs, lead)

            if keyword == "enum":
                declaration = self._scan_enum(masked, text, match.end(), name)
            elif keyword == "type":
                declaration = self._scan_alias(masked, text, match.end(), name)
            else:
                kind = DeclarationKind.CLASS if keyword == "class" else DeclarationKind.INTERFACE
                declaration = self._scan_structure(masked, text, docs, match.end(), name, kind)

            if declaration is None:
                logger.debug(f"Could not scan {keyword} {name} in {unit_id}")
                continue
            declaration.annotations = annotations
            declaration.description = description
            unit.declarations.append(declaration)

        logger.debug(f"Scanned {len(unit.declarations)} declarations from {unit_id}")
        return unit

    @staticmethod
    def _brace_depths(masked: str) -> List[int]:
        depths = []
        depth = 0
        for ch in masked:
            depths.append(depth)
            if ch in _OPENERS:
                depth += 1
            elif ch in _CLOSERS:
                depth = max(depth - 1, 0)
        depths.append(depth)
        return depths

    @staticmethod
    def _leading_decorators(masked: str, pos: int) -> Tuple[List[Span], int]:
        """Decorators written just before a declaration header (scanned backwards)."""
        spans: List[Span] = []
        i = pos
        while True:
            j = i - 1
            while j >= 0 and masked[j].isspace():
                j -= 1
            end = j + 1
            if j >= 0 and masked[j] == ")":
                depth = 0
                while j >= 0:
                    if masked[j] == ")":
                        depth += 1
                    elif masked[j] == "(":
                        depth -= 1
                        if depth == 0:
                            break
                    j -= 1
                j -= 1
            name_end = j + 1
            while j >= 0 and (_is_ident_char(masked[j]) or masked[j] == "."):
                j -= 1
            if name_end == j + 1 or j < 0 or masked[j] != "@":
                return spans, i
            spans.insert(0, (j, end))
            i = j

    @staticmethod
    def _doc_before(masked: str, docs: List[_DocComment], pos: int) -> Optional[str]:
        for doc in reversed(docs):
            if doc.end <= pos:
                if masked[doc.end:pos].strip():
                    return None
                return clean_doc_comment(doc.text)
        return None

    @staticmethod
    def _doc_within(docs: List[_DocComment], start: int, end: int) -> Optional[str]:
        found = None
        for doc in docs:
            if doc.start >= start and doc.end <= end:
                found = doc
        return clean_doc_comment(found.text) if found else None

    def _annotation(self, masked: str, text: str, start: int, end: int) -> Annotation:
        match = _DECORATOR_RE.match(masked, start, end)
        name = match.group(1).rsplit(".", 1)[-1]
        arguments = []
        open_index = match.end()
        if open_index < end and masked[open_index] == "(":
            close = matching_bracket(masked, open_index, end)
            close = end if close < 0 else close
            arguments = [
                text[s:e].strip()
                for s, e in split_top_level(masked, open_index + 1, close)
            ]
        return Annotation(name, arguments)

    def _body_span(self, masked: str, pos: int) -> Optional[Span]:
        """Locate the {...} body following a declaration header."""
        i = pos
        n = len(masked)
        while i < n:
            ch = masked[i]
            if ch == "<":
                i = skip_angle_group(masked, i, n)
                continue
            if ch == "(":
                close = matching_bracket(masked, i)
                if close < 0:
                    return None
                i = close + 1
                continue
            if ch == "{":
                close = matching_bracket(masked, i)
                return None if close < 0 else (i + 1, close)
            if ch == ";":
                return None
            i += 1
        return None

    def _scan_enum(self, masked: str, text: str, pos: int, name: str) -> Optional[Declaration]:
        body = self._body_span(masked, pos)
        if body is None:
            return None

        members = []
        next_value: Any = 0
        for start, end in self._member_spans(masked, body[0], body[1]):
            eq = find_top_level_assignment(masked, start, end)
            name_end = end if eq < 0 else eq
            member_name = text[start:name_end].strip()
            member_name = strip_quotes(member_name) or member_name

            if eq >= 0:
                value = parse_enum_value(text[eq + 1:end])
            else:
                # Auto-increment continues from the previous numeric member
                value = next_value

            next_value = value + 1 if isinstance(value, int) and not isinstance(value, bool) else None
            members.append(EnumMember(member_name, value))

        return Declaration(name=name, kind=DeclarationKind.ENUM, members=members)

    def _scan_alias(self, masked: str, text: str, pos: int, name: str) -> Optional[Declaration]:
        i = pos
        while i < len(masked) and masked[i].isspace():
            i += 1
        if i < len(masked) and masked[i] == "<":
            i = skip_angle_group(masked, i, len(masked))
        while i < len(masked) and masked[i].isspace():
            i += 1
        if i >= len(masked) or masked[i] != "=":
            return None

        spans = self._member_spans(masked, i + 1, len(masked), first_only=True)
        if not spans:
            return None
        start, end = spans[0]
        return Declaration(
            name=name,
            kind=DeclarationKind.ALIAS,
            aliased_type=text[start:end].strip(),
        )

    def _scan_structure(
        self,
        masked: str,
        text: str,
        docs: List[_DocComment],
        pos: int,
        name: str,
        kind: DeclarationKind,
    ) -> Optional[Declaration]:
        body = self._body_span(masked, pos)
        if body is None:
            return None

        declaration = Declaration(name=name, kind=kind)
        for start, end in self._member_spans(masked, body[0], body[1]):
            member = self._parse_member(masked, text, docs, start, end, kind)
            if isinstance(member, PropertyDeclaration):
                declaration.properties.append(member)
            elif isinstance(member, MethodDeclaration):
                declaration.methods.append(member)
        return declaration

    # ========================================================================
    # Members
    # ========================================================================

    def _member_spans(self, masked: str, start: int, end: int, first_only: bool = False) -> List[Span]:
        """
        Split a declaration body into member spans

        A member ends at a top-level `;` or `,`, at the `}` closing a method
        body, or at a newline once its text is complete.
        """
        spans: List[Span] = []
        stack: List[str] = []
        chunk_start = start
        method_body = False

        def close_chunk(chunk_end: int) -> None:
            if masked[chunk_start:chunk_end].strip():
                spans.append((chunk_start, chunk_end))

        i = start
        while i < end:
            ch = masked[i]
            if not stack:
                if ch in ";," or (ch == "\n" and self._chunk_complete(masked, chunk_start, i, end)):
                    close_chunk(i)
                    chunk_start = i + 1
                    i += 1
                    if first_only and spans:
                        return spans
                    continue
                if ch == "{":
                    method_body = self._is_method_header(masked[chunk_start:i])

            if ch in _OPENERS:
                stack.append(ch)
            elif ch == "<" and i > start and _is_ident_char(masked[i - 1]):
                stack.append(ch)
            elif ch == ">" and stack and stack[-1] == "<" and masked[i - 1] != "=":
                stack.pop()
            elif ch in _CLOSERS:
                while stack and stack[-1] == "<":
                    stack.pop()
                if stack:
                    stack.pop()
                    if not stack and ch == "}" and method_body:
                        method_body = False
                        close_chunk(i + 1)
                        chunk_start = i + 1
                        if first_only and spans:
                            return spans
                elif first_only:
                    # Unmatched closer ends an alias declared inside a block
                    break
            i += 1

        close_chunk(end if i >= end else i)
        return spans[:1] if first_only else spans

    @staticmethod
    def _chunk_complete(masked: str, start: int, newline: int, end: int) -> bool:
        chunk = masked[start:newline].strip()
        if not chunk:
            return False
        _, rest = decorator_spans(chunk, 0, len(chunk))
        if rest >= len(chunk):
            return False  # only decorators so far
        if chunk[-1] in _CONTINUATION_TAIL or chunk.endswith("=>"):
            return False
        following = masked[newline:end].lstrip()
        if following and following[0] in _CONTINUATION_HEAD:
            return False
        return True

    @staticmethod
    def _is_method_header(prefix: str) -> bool:
        _, rest = decorator_spans(prefix, 0, len(prefix))
        return bool(_METHOD_HEADER_RE.match(prefix, rest))

    def _parse_member(
        self,
        masked: str,
        text: str,
        docs: List[_DocComment],
        start: int,
        end: int,
        kind: DeclarationKind,
    ):
        """Parse one member span into a property or method declaration."""
        spans, pos = decorator_spans(masked, start, end)
        annotations = [self._annotation(masked, text, s, e) for s, e in spans]
        description = self._doc_within(docs, start, spans[0][0] if spans else pos)

        visibility = "public"
        modifiers = []
        while True:
            match = _MODIFIER_RE.match(masked, pos, end)
            if not match:
                break
            modifiers.append(match.group(1))
            if match.group(1) in ("private", "protected"):
                visibility = match.group(1)
            pos = match.end()

        if "static" in modifiers:
            return None

        match = _MEMBER_NAME_RE.match(masked, pos, end)
        if not match:
            return None  # index or call signature
        name = text[match.start(1):match.end(1)]
        name = strip_quotes(name) or name
        if name.startswith("#"):
            name = name[1:]
            visibility = "private"
        pos = self._skip_space(masked, match.end(), end)

        optional = False
        if pos < end and masked[pos] in "?!":
            optional = masked[pos] == "?"
            pos = self._skip_space(masked, pos + 1, end)

        if pos < end and masked[pos] in "(<":
            return self._parse_method(
                masked, text, pos, end, name, annotations, visibility, description, kind,
            )

        type_text = None
        default_value = None
        if pos < end and masked[pos] == ":":
            eq = find_top_level_assignment(masked, pos + 1, end)
            type_end = end if eq < 0 else eq
            type_text = text[pos + 1:type_end].strip() or None
            if eq >= 0:
                default_value = text[eq + 1:end].strip()
        elif pos < end and masked[pos] == "=":
            default_value = text[pos + 1:end].strip()
            type_text = parse_literal_type(default_value)

        return PropertyDeclaration(
            name=name,
            type_text=type_text,
            optional=optional,
            description=description,
            default_value=default_value or None,
            annotations=annotations,
        )

    def _parse_method(
        self,
        masked: str,
        text: str,
        pos: int,
        end: int,
        name: str,
        annotations: List[Annotation],
        visibility: str,
        description: Optional[str],
        kind: DeclarationKind,
    ) -> Optional[MethodDeclaration]:
        if masked[pos] == "<":
            pos = self._skip_space(masked, skip_angle_group(masked, pos, end), end)
        if pos >= end or masked[pos] != "(":
            return None
        close = matching_bracket(masked, pos, end)
        if close < 0:
            return None

        parameters = [
            self._parse_parameter(masked, text, s, e)
            for s, e in split_top_level(masked, pos + 1, close)
        ]

        signature_end = end
        if kind == DeclarationKind.CLASS and masked[close + 1:end].rstrip().endswith("}"):
            braces = [i for i in top_level_indexes(masked, close + 1, end) if masked[i] == "{"]
            if braces:
                signature_end = braces[-1]

        return_type = None
        tail_start = self._skip_space(masked, close + 1, signature_end)
        if tail_start < signature_end and masked[tail_start] == ":":
            return_type = text[tail_start + 1:signature_end].strip() or None

        return MethodDeclaration(
            name=name,
            parameters=[p for p in parameters if p is not None],
            return_type=return_type,
            annotations=annotations,
            visibility=visibility,
            description=description,
        )

    def _parse_parameter(self, masked: str, text: str, start: int, end: int) -> Optional[ParameterDeclaration]:
        spans, pos = decorator_spans(masked, start, end)
        annotations = [self._annotation(masked, text, s, e) for s, e in spans]

        while True:
            match = _PARAMETER_MODIFIER_RE.match(masked, pos, end)
            if not match:
                break
            pos = match.end()

        pos = self._skip_space(masked, pos, end)
        if masked.startswith("...", pos):
            pos += 3

        if pos < end and masked[pos] in "{[":
            # Destructuring pattern
            close = matching_bracket(masked, pos, end)
            name_end = end if close < 0 else close + 1
        else:
            name_end = pos
            while name_end < end and _is_ident_char(masked[name_end]):
                name_end += 1
        name = text[pos:name_end].strip()
        if not name:
            return None

        pos = self._skip_space(masked, name_end, end)
        optional = False
        if pos < end and masked[pos] == "?":
            optional = True
            pos = self._skip_space(masked, pos + 1, end)

        type_text = None
        default_value = None
        eq = find_top_level_assignment(masked, pos, end)
        if pos < end and masked[pos] == ":":
            type_text = text[pos + 1:end if eq < 0 else eq].strip() or None
        if eq >= 0:
            default_value = text[eq + 1:end].strip() or None
            optional = True
            if type_text is None and default_value is not None:
                type_text = parse_literal_type(default_value)

        return ParameterDeclaration(
            name=name,
            type_text=type_text,
            optional=optional,
            default_value=default_value,
            annotations=annotations,
        )

    @staticmethod
    def _skip_space(masked: str, pos: int, end: int) -> int:
        while pos < end and masked[pos].isspace():
            pos += 1
        return pos
