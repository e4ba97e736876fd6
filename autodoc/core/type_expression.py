"""
Type Expression Parser - Turns type-reference text into a small parse tree.

Generic arguments are stripped before parsing, so the grammar only covers:

    union    := ['|'] postfix ('|' postfix)*
    postfix  := primary ('[' ']')*
    primary  := '(' union ')'
              | '(' ... ')' '=>' union          (function type)
              | '{' member* '}'                 (inline object)
              | STRING | NUMBER | true | false  (literal types)
              | NAME
    member   := (NAME | STRING) ['?'] ':' union [';' | ',']

Every node keeps the exact text it was parsed from, so callers can resolve
sub-expressions by text.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Union

_TOKEN_RE = re.compile(
    r"""\s*(?:
        (?P<arrow>=>)
      | (?P<string>'[^']*'|"[^"]*"|`[^`]*`)
      | (?P<number>-?\d+(?:\.\d+)?)
      | (?P<name>[A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*)
      | (?P<punct>[|&()\[\]{}:;,?])
    )""",
    re.VERBOSE,
)

_WHITESPACE_RE = re.compile(r"\s+")


class TypeExpressionError(ValueError):
    """Raised for text that does not fit the type-expression grammar."""


def strip_generics(text: str) -> str:
    """Remove every `<...>` group, nested groups included.

    An unbalanced `<` drops everything after it. The `>` of an arrow (`=>`)
    never closes a group.
    """
    result = []
    depth = 0
    prev = ""
    for ch in text:
        if ch == "<":
            depth += 1
        elif ch == ">" and depth > 0 and prev != "=":
            depth -= 1
        elif depth == 0:
            result.append(ch)
        prev = ch
    return "".join(result)


def normalize_type_text(text: str) -> str:
    """Strip generic arguments and collapse whitespace."""
    return _WHITESPACE_RE.sub(" ", strip_generics(text or "")).strip()


@dataclass
class Token:
    kind: str  # "arrow", "string", "number", "name", "punct"
    value: str
    start: int
    end: int


def tokenize(text: str) -> List[Token]:
    """Split type text into tokens."""
    tokens = []
    pos = 0
    while pos < len(text):
        if text[pos:].strip() == "":
            break
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            offset = len(text[pos:]) - len(text[pos:].lstrip())
            raise TypeExpressionError(
                f"Unexpected character {text[pos + offset]!r} at {pos + offset} in {text!r}"
            )
        kind = match.lastgroup
        tokens.append(Token(kind, match.group(kind), match.start(kind), match.end(kind)))
        pos = match.end()
    return tokens


@dataclass
class NameNode:
    text: str


@dataclass
class LiteralNode:
    text: str
    value: Union[str, int, float, bool]
    primitive: str  # "string", "number" or "boolean"


@dataclass
class FunctionNode:
    text: str


@dataclass
class ArrayNode:
    text: str
    element: "TypeNode"


@dataclass
class UnionNode:
    text: str
    members: List["TypeNode"] = field(default_factory=list)


@dataclass
class ObjectMember:
    name: str
    type_text: str
    optional: bool = False


@dataclass
class ObjectNode:
    text: str
    members: List[ObjectMember] = field(default_factory=list)


TypeNode = Union[NameNode, LiteralNode, FunctionNode, ArrayNode, UnionNode, ObjectNode]


class _Parser:
    def __init__(self, text: str):
        self.text = text
        self.tokens = tokenize(text)
        self.pos = 0
        self.last_end = 0

    def peek(self, offset: int = 0) -> Optional[Token]:
        index = self.pos + offset
        if index < len(self.tokens):
            return self.tokens[index]
        return None

    def at(self, value: str, offset: int = 0) -> bool:
        token = self.peek(offset)
        return token is not None and token.kind in ("punct", "arrow") and token.value == value

    def next(self) -> Token:
        token = self.peek()
        if token is None:
            raise TypeExpressionError(f"Unexpected end of type expression {self.text!r}")
        self.pos += 1
        self.last_end = token.end
        return token

    def expect(self, value: str) -> Token:
        if not self.at(value):
            token = self.peek()
            found = token.value if token else "end of input"
            raise TypeExpressionError(f"Expected {value!r}, found {found!r} in {self.text!r}")
        return self.next()

    def start(self) -> int:
        token = self.peek()
        if token is None:
            raise TypeExpressionError(f"Unexpected end of type expression {self.text!r}")
        return token.start

    def span(self, start: int) -> str:
        return self.text[start:self.last_end].strip()

    def parse(self) -> TypeNode:
        node = self.parse_union()
        if self.peek() is not None:
            raise TypeExpressionError(f"Unexpected {self.peek().value!r} in {self.text!r}")
        return node

    def parse_union(self) -> TypeNode:
        if self.at("|"):
            self.next()
        start = self.start()
        members = [self.parse_postfix()]
        while self.at("|"):
            self.next()
            members.append(self.parse_postfix())
        if len(members) == 1:
            return members[0]
        return UnionNode(self.span(start), members)

    def parse_postfix(self) -> TypeNode:
        token = self.peek()
        if token is not None and token.kind == "name" and token.value == "readonly":
            following = self.peek(1)
            if following is not None and (following.kind == "name" or following.value in ("(", "{")):
                self.next()
        start = self.start()
        node = self.parse_primary()
        while self.at("[") and self.at("]", 1):
            self.next()
            self.next()
            node = ArrayNode(self.span(start), node)
        return node

    def parse_primary(self) -> TypeNode:
        token = self.peek()
        if token is None:
            raise TypeExpressionError(f"Unexpected end of type expression {self.text!r}")

        if self.at("("):
            if self._is_function_type():
                return self.parse_function()
            self.next()
            inner = self.parse_union()
            self.expect(")")
            return inner

        if self.at("{"):
            return self.parse_object()

        if token.kind == "string":
            self.next()
            return LiteralNode(token.value, token.value[1:-1], "string")

        if token.kind == "number":
            self.next()
            number = float(token.value) if "." in token.value else int(token.value)
            return LiteralNode(token.value, number, "number")

        if token.kind == "name":
            self.next()
            if token.value in ("true", "false"):
                return LiteralNode(token.value, token.value == "true", "boolean")
            return NameNode(token.value)

        raise TypeExpressionError(f"Unexpected {token.value!r} in {self.text!r}")

    def _matching_paren(self, index: int) -> int:
        """Index of the `)` token closing the `(` at token `index`, or -1."""
        depth = 0
        for i in range(index, len(self.tokens)):
            token = self.tokens[i]
            if token.kind != "punct":
                continue
            if token.value in "([{":
                depth += 1
            elif token.value in ")]}":
                depth -= 1
                if depth == 0:
                    return i if token.value == ")" else -1
        return -1

    def _is_function_type(self) -> bool:
        close = self._matching_paren(self.pos)
        if close < 0 or close + 1 >= len(self.tokens):
            return False
        following = self.tokens[close + 1]
        return following.kind == "arrow"

    def _skip_group(self) -> None:
        close = self._matching_paren(self.pos)
        if close < 0:
            raise TypeExpressionError(f"Unbalanced brackets in {self.text!r}")
        while self.pos <= close:
            self.next()

    def parse_function(self) -> TypeNode:
        start = self.start()
        self._skip_group()
        self.expect("=>")
        self.parse_union()
        return FunctionNode(self.span(start))

    def parse_object(self) -> TypeNode:
        start = self.start()
        self.expect("{")
        members = []
        while not self.at("}"):
            if self.at(";") or self.at(","):
                self.next()
                continue
            if self.at("["):
                # Index signature: [key: string]: T
                self._skip_index_signature()
                continue
            members.append(self.parse_member())
        self.expect("}")
        return ObjectNode(self.span(start), members)

    def _skip_index_signature(self) -> None:
        depth = 0
        while True:
            token = self.next()
            if token.kind == "punct" and token.value == "[":
                depth += 1
            elif token.kind == "punct" and token.value == "]":
                depth -= 1
                if depth == 0:
                    break
        self.expect(":")
        self.parse_union()

    def parse_member(self) -> ObjectMember:
        name_token = self.next()
        if name_token.kind == "string":
            name = name_token.value[1:-1]
        elif name_token.kind == "name":
            name = name_token.value
        else:
            raise TypeExpressionError(f"Expected member name, found {name_token.value!r} in {self.text!r}")

        optional = False
        if self.at("?"):
            self.next()
            optional = True

        if self.at("("):
            # Method signature: name(args): T
            self._skip_group()
            if self.at(":"):
                self.next()
                self.parse_union()
            return ObjectMember(name, "Function", optional)

        self.expect(":")
        type_node = self.parse_union()
        return ObjectMember(name, type_node.text, optional)


def parse_type_expression(text: str) -> TypeNode:
    """Parse already-normalized type text into a parse tree.

    Raises:
        TypeExpressionError: if the text does not fit the grammar
    """
    if not text or not text.strip():
        raise TypeExpressionError("Empty type expression")
    return _Parser(text).parse()
