"""
Rust source parsing for struct extraction.

Tokenizes Rust source text and builds a shallow syntax tree of the
top-level items. Struct declarations are parsed down to their fields;
every other item is recognized and skipped as one opaque unit. The whole
text is then checked against the full Rust grammar with tree-sitter, so
errors inside skipped items are reported too.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Union

import tree_sitter_rust
from tree_sitter import Language, Node, Parser

from .logging_config import get_logger

logger = get_logger(__name__)


class RustParseError(Exception):
    """Raised when source text is not syntactically valid Rust."""

    def __init__(self, message: str, line: int = 0, column: int = 0):
        self.message = message
        self.line = line
        self.column = column
        location = f" at line {line}, column {column}" if line else ""
        super().__init__(f"{message}{location}")


class TokenKind(Enum):
    """Lexical token categories."""

    IDENT = "ident"
    LIFETIME = "lifetime"
    LITERAL = "literal"
    PUNCT = "punct"
    OPEN = "open"
    CLOSE = "close"
    EOF = "eof"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    line: int
    column: int

    def describe(self) -> str:
        if self.kind is TokenKind.EOF:
            return "end of file"
        return f"`{self.text}`"


IDENT_RE = re.compile(r"(?:r#)?[^\W\d]\w*")
LIFETIME_RE = re.compile(r"'[^\W\d]\w*")
NUMBER_RE = re.compile(
    r"0[xX][0-9a-fA-F_]+\w*"
    r"|0[oO][0-7_]+\w*"
    r"|0[bB][01_]+\w*"
    r"|[0-9][0-9_]*(?:\.[0-9][0-9_]*|\.(?![.\w]))?(?:[eE][+-]?[0-9_]+)?\w*"
)
STRING_START_RE = re.compile(r'(?:b|c)?(r(#*))?"')
LITERAL_SUFFIX_RE = re.compile(r"\w*")

OPENERS = {"(": ")", "[": "]", "{": "}"}
CLOSERS = {")", "]", "}"}
COMPOUND_PUNCT = ("::", "->", "=>")
PUNCT_CHARS = frozenset("+-*/%^!&|=<>@.,;:#$?~")

# Words that can never name a struct or a field.
STRICT_KEYWORDS = frozenset(
    {
        "as", "async", "await", "break", "const", "continue", "crate", "dyn",
        "else", "enum", "extern", "false", "fn", "for", "if", "impl", "in",
        "let", "loop", "match", "mod", "move", "mut", "pub", "ref", "return",
        "self", "Self", "static", "struct", "super", "trait", "true", "type",
        "unsafe", "use", "where", "while",
    }
)

ITEM_KEYWORDS = frozenset(
    {
        "fn", "enum", "impl", "trait", "mod", "use", "extern", "const",
        "static", "type", "unsafe", "async", "default", "auto", "macro_rules",
    }
)

VISIBILITY_SCOPES = frozenset({"crate", "self", "super"})


class RustTokenizer:
    """Split Rust source into tokens with balanced delimiters."""

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.line_start = 0
        self.tokens: List[Token] = []
        self._delimiters: List[Token] = []

    def tokenize(self) -> List[Token]:
        """Tokenize the whole source.

        Returns:
            Token list terminated by an EOF token.

        Raises:
            RustParseError: On unknown characters, unterminated literals or
                comments, and unbalanced delimiters.
        """
        self._skip_preamble()
        source = self.source

        while self.pos < len(source):
            ch = source[self.pos]

            if ch.isspace():
                self._advance(1)
            elif source.startswith("//", self.pos):
                self._skip_line_comment()
            elif source.startswith("/*", self.pos):
                self._skip_block_comment()
            elif self._scan_string():
                continue
            elif ch == "'":
                self._scan_quote(0)
            elif source.startswith("b'", self.pos):
                self._scan_quote(1)
            elif ch.isdigit():
                number = NUMBER_RE.match(source, self.pos)
                if number is None:
                    raise self._error(f"unknown start of token: {ch!r}")
                self._emit(TokenKind.LITERAL, number.group())
            elif IDENT_RE.match(source, self.pos):
                self._emit(TokenKind.IDENT, IDENT_RE.match(source, self.pos).group())
            elif ch in OPENERS:
                self._delimiters.append(self._emit(TokenKind.OPEN, ch))
            elif ch in CLOSERS:
                self._close_delimiter(ch)
            else:
                self._scan_punct(ch)

        if self._delimiters:
            opener = self._delimiters[-1]
            raise RustParseError(
                f"unclosed delimiter `{opener.text}`", opener.line, opener.column
            )

        self.tokens.append(Token(TokenKind.EOF, "", self.line, self._column()))
        return self.tokens

    def _column(self, pos: Optional[int] = None) -> int:
        return (self.pos if pos is None else pos) - self.line_start + 1

    def _error(self, message: str) -> RustParseError:
        return RustParseError(message, self.line, self._column())

    def _advance(self, count: int) -> None:
        end = self.pos + count
        newlines = self.source.count("\n", self.pos, end)
        if newlines:
            self.line += newlines
            self.line_start = self.source.rindex("\n", self.pos, end) + 1
        self.pos = end

    def _emit(self, kind: TokenKind, text: str) -> Token:
        token = Token(kind, text, self.line, self._column())
        self.tokens.append(token)
        self._advance(len(text))
        return token

    def _skip_preamble(self) -> None:
        if self.source.startswith("\ufeff"):
            self.pos = self.line_start = 1
        # A shebang line is ignored, an inner attribute `#![...]` is not.
        if self.source.startswith("#!", self.pos):
            rest = self.source[self.pos + 2 :].lstrip()
            if not rest.startswith("["):
                self._skip_line_comment()

    def _skip_line_comment(self) -> None:
        end = self.source.find("\n", self.pos)
        if end == -1:
            end = len(self.source)
        self._advance(end - self.pos)

    def _skip_block_comment(self) -> None:
        source = self.source
        depth = 0
        i = self.pos
        while True:
            if i >= len(source):
                raise self._error("unterminated block comment")
            if source.startswith("/*", i):
                depth += 1
                i += 2
            elif source.startswith("*/", i):
                depth -= 1
                i += 2
                if depth == 0:
                    break
            else:
                i += 1
        self._advance(i - self.pos)

    def _scan_string(self) -> bool:
        """Scan a string literal in any of its prefixed or raw forms."""
        source = self.source
        match = STRING_START_RE.match(source, self.pos)
        if not match:
            return False

        i = match.end()
        if match.group(1) is not None:
            terminator = '"' + match.group(2)
            end = source.find(terminator, i)
            if end == -1:
                raise self._error("unterminated raw string")
            end += len(terminator)
        else:
            while True:
                if i >= len(source):
                    raise self._error("unterminated double quote string")
                ch = source[i]
                if ch == "\\":
                    i += 2
                elif ch == '"':
                    end = i + 1
                    break
                else:
                    i += 1

        end = LITERAL_SUFFIX_RE.match(source, end).end()
        self._emit(TokenKind.LITERAL, source[self.pos : end])
        return True

    def _scan_quote(self, prefix_len: int) -> None:
        """Scan a char literal, a byte literal or a lifetime."""
        source = self.source
        quote = self.pos + prefix_len
        following = source[quote + 1 : quote + 2]

        if following == "\\":
            end = source.find("'", quote + 3)
            newline = source.find("\n", quote)
            if end == -1 or (newline != -1 and newline < end):
                raise self._error("unterminated character literal")
            self._emit(TokenKind.LITERAL, source[self.pos : end + 1])
        elif following and following != "\n" and source[quote + 2 : quote + 3] == "'":
            self._emit(TokenKind.LITERAL, source[self.pos : quote + 3])
        elif prefix_len == 0 and LIFETIME_RE.match(source, self.pos):
            self._emit(TokenKind.LIFETIME, LIFETIME_RE.match(source, self.pos).group())
        else:
            raise self._error("unterminated character literal")

    def _close_delimiter(self, ch: str) -> None:
        if not self._delimiters:
            raise self._error(f"unexpected closing delimiter `{ch}`")
        opener = self._delimiters.pop()
        if OPENERS[opener.text] != ch:
            raise self._error(
                f"mismatched closing delimiter `{ch}`: expected "
                f"`{OPENERS[opener.text]}` to close `{opener.text}` "
                f"from line {opener.line}"
            )
        self._emit(TokenKind.CLOSE, ch)

    def _scan_punct(self, ch: str) -> None:
        for compound in COMPOUND_PUNCT:
            if self.source.startswith(compound, self.pos):
                self._emit(TokenKind.PUNCT, compound)
                return
        if ch in PUNCT_CHARS:
            self._emit(TokenKind.PUNCT, ch)
            return
        raise self._error(f"unknown start of token: {ch!r}")


@dataclass
class TypeRef:
    """Declared type of a struct field."""

    text: str
    path: Optional[List[str]] = None
    generic: bool = False

    @property
    def name(self) -> Optional[str]:
        """Final path segment of a plain named type, otherwise None."""
        if self.path and not self.generic:
            return self.path[-1]
        return None


@dataclass
class StructField:
    name: Optional[str]
    type: TypeRef
    line: int = 0


@dataclass
class StructItem:
    name: str
    kind: str  # "named", "tuple" or "unit"
    fields: List[StructField] = field(default_factory=list)
    line: int = 0


@dataclass
class OtherItem:
    keyword: str
    line: int = 0


Item = Union[StructItem, OtherItem]


@dataclass
class SourceFile:
    """Top-level items of one Rust source file, in source order."""

    items: List[Item] = field(default_factory=list)

    def structs(self, name: Optional[str] = None) -> Iterator[StructItem]:
        """Iterate struct items, optionally only those with a given name."""
        for item in self.items:
            if isinstance(item, StructItem) and (name is None or item.name == name):
                yield item


class RustParser:
    """Recursive descent parser over the token stream of one file."""

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    def parse(self) -> SourceFile:
        items = []
        while self.peek().kind is not TokenKind.EOF:
            items.append(self._parse_item())
        return SourceFile(items)

    # Token helpers

    def peek(self, offset: int = 0) -> Token:
        index = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def advance(self) -> Token:
        token = self.tokens[self.pos]
        if token.kind is not TokenKind.EOF:
            self.pos += 1
        return token

    def _at(self, kind: TokenKind, text: Optional[str] = None, offset: int = 0) -> bool:
        token = self.peek(offset)
        return token.kind is kind and (text is None or token.text == text)

    def _error(self, message: str, token: Optional[Token] = None) -> RustParseError:
        token = token or self.peek()
        return RustParseError(message, token.line, token.column)

    def _expect_punct(self, text: str, context: str) -> Token:
        if not self._at(TokenKind.PUNCT, text):
            raise self._error(
                f"expected `{text}` {context}, found {self.peek().describe()}"
            )
        return self.advance()

    def _expect_ident(self, what: str) -> Token:
        token = self.peek()
        if token.kind is not TokenKind.IDENT or token.text in STRICT_KEYWORDS:
            raise self._error(f"expected {what}, found {token.describe()}")
        return self.advance()

    def _skip_group(self) -> List[Token]:
        """Consume a delimited group and return all of its tokens."""
        consumed = [self.advance()]
        depth = 1
        while depth:
            token = self.advance()
            consumed.append(token)
            if token.kind is TokenKind.OPEN:
                depth += 1
            elif token.kind is TokenKind.CLOSE:
                depth -= 1
        return consumed

    def _skip_attributes(self) -> None:
        while self._at(TokenKind.PUNCT, "#"):
            hash_token = self.advance()
            if self._at(TokenKind.PUNCT, "!"):
                self.advance()
            if not self._at(TokenKind.OPEN, "["):
                raise self._error(
                    f"expected `[` after `#`, found {self.peek().describe()}", hash_token
                )
            self._skip_group()

    def _skip_visibility(self) -> None:
        if not self._at(TokenKind.IDENT, "pub"):
            return
        self.advance()
        # `pub(crate)` and friends; `pub (u8, u8)` in a tuple struct is a type.
        if self._at(TokenKind.OPEN, "("):
            scope = self.peek(1)
            if (
                scope.kind is TokenKind.IDENT
                and scope.text in VISIBILITY_SCOPES
                and self._at(TokenKind.CLOSE, ")", offset=2)
            ) or (scope.kind is TokenKind.IDENT and scope.text == "in"):
                self._skip_group()

    # Items

    def _parse_item(self) -> Item:
        self._skip_attributes()
        self._skip_visibility()
        token = self.peek()

        if token.kind is TokenKind.EOF:
            raise self._error("expected item after attributes")
        if token.kind is TokenKind.IDENT and token.text == "struct":
            return self._parse_struct()
        if token.kind is TokenKind.IDENT and (
            token.text in ITEM_KEYWORDS
            or (token.text == "union" and self._at(TokenKind.IDENT, offset=1))
        ):
            semicolon_only = self._ends_with_semicolon()
            self._skip_item(token, semicolon_only)
            return OtherItem(token.text, token.line)
        if token.kind is TokenKind.IDENT or self._at(TokenKind.PUNCT, "::"):
            self._skip_macro_invocation()
            return OtherItem("macro", token.line)

        raise self._error(f"expected item, found {token.describe()}")

    def _ends_with_semicolon(self) -> bool:
        first = self.peek().text
        if first in ("use", "static", "type"):
            return True
        if first == "const":
            return self.peek(1).text not in ("fn", "unsafe", "async", "extern")
        return False

    def _skip_item(self, start: Token, semicolon_only: bool) -> None:
        while True:
            token = self.peek()
            if token.kind is TokenKind.EOF:
                raise self._error(
                    f"unexpected end of file in `{start.text}` item", start
                )
            if token.kind is TokenKind.PUNCT and token.text == ";":
                self.advance()
                return
            if token.kind is TokenKind.OPEN:
                self._skip_group()
                if token.text == "{" and not semicolon_only:
                    return
                continue
            self.advance()

    def _skip_macro_invocation(self) -> None:
        start = self.peek()
        if self._at(TokenKind.PUNCT, "::"):
            self.advance()
        self._expect_path_segment(start)
        while self._at(TokenKind.PUNCT, "::"):
            self.advance()
            self._expect_path_segment(start)

        if not self._at(TokenKind.PUNCT, "!"):
            raise self._error(f"expected item, found {start.describe()}", start)
        self.advance()
        if self._at(TokenKind.IDENT):
            self.advance()  # macro_rules! name

        body = self.peek()
        if body.kind is not TokenKind.OPEN:
            raise self._error(
                f"expected one of `(`, `[` or `{{` after macro name, found {body.describe()}"
            )
        self._skip_group()
        if body.text != "{":
            self._expect_punct(";", "after macro invocation")

    def _expect_path_segment(self, start: Token) -> Token:
        if not self._at(TokenKind.IDENT):
            raise self._error(f"expected item, found {start.describe()}", start)
        return self.advance()

    # Structs

    def _parse_struct(self) -> StructItem:
        keyword = self.advance()
        name = self._expect_ident("struct name").text

        if self._at(TokenKind.PUNCT, "<"):
            self._skip_generics()
        if self._at(TokenKind.IDENT, "where"):
            self._skip_where_clause()

        token = self.peek()
        if token.kind is TokenKind.OPEN and token.text == "{":
            item = StructItem(name, "named", self._parse_named_fields(), keyword.line)
        elif token.kind is TokenKind.OPEN and token.text == "(":
            item = StructItem(name, "tuple", self._parse_tuple_fields(), keyword.line)
            if self._at(TokenKind.IDENT, "where"):
                self._skip_where_clause()
            self._expect_punct(";", "after tuple struct")
        elif token.kind is TokenKind.PUNCT and token.text == ";":
            self.advance()
            item = StructItem(name, "unit", [], keyword.line)
        else:
            raise self._error(
                f"expected `{{`, `(` or `;` after struct name, found {token.describe()}"
            )

        logger.debug(
            "Parsed %s struct %s with %d fields (line %d)",
            item.kind,
            item.name,
            len(item.fields),
            item.line,
        )
        return item

    def _skip_generics(self) -> None:
        start = self.advance()
        depth = 1
        while depth:
            token = self.peek()
            if token.kind is TokenKind.EOF:
                raise self._error("unclosed generic parameter list", start)
            if token.kind is TokenKind.OPEN:
                self._skip_group()
                continue
            if token.kind is TokenKind.PUNCT and token.text == "<":
                depth += 1
            elif token.kind is TokenKind.PUNCT and token.text == ">":
                depth -= 1
            self.advance()

    def _skip_where_clause(self) -> None:
        start = self.advance()
        while True:
            token = self.peek()
            if token.kind is TokenKind.EOF:
                raise self._error("unexpected end of file in where clause", start)
            if (token.kind is TokenKind.OPEN and token.text == "{") or (
                token.kind is TokenKind.PUNCT and token.text == ";"
            ):
                return
            if token.kind is TokenKind.OPEN:
                self._skip_group()
            else:
                self.advance()

    def _parse_named_fields(self) -> List[StructField]:
        self.advance()  # {
        fields = []
        while not self._at(TokenKind.CLOSE, "}"):
            self._skip_attributes()
            self._skip_visibility()
            name = self._expect_ident("field name")
            self._expect_punct(":", f"after field name `{name.text}`")
            field_type = self._parse_type()
            fields.append(StructField(name.text, field_type, name.line))

            if self._at(TokenKind.PUNCT, ","):
                self.advance()
            elif not self._at(TokenKind.CLOSE, "}"):
                raise self._error(
                    f"expected `,` or `}}` after field `{name.text}`, "
                    f"found {self.peek().describe()}"
                )
        self.advance()  # }
        return fields

    def _parse_tuple_fields(self) -> List[StructField]:
        self.advance()  # (
        fields = []
        while not self._at(TokenKind.CLOSE, ")"):
            self._skip_attributes()
            self._skip_visibility()
            line = self.peek().line
            fields.append(StructField(None, self._parse_type(), line))

            if self._at(TokenKind.PUNCT, ","):
                self.advance()
            elif not self._at(TokenKind.CLOSE, ")"):
                raise self._error(
                    f"expected `,` or `)` in tuple struct, found {self.peek().describe()}"
                )
        self.advance()  # )
        return fields

    def _parse_type(self) -> TypeRef:
        """Collect type tokens up to the next top-level separator or closing delimiter."""
        tokens: List[Token] = []
        angle_depth = 0
        while True:
            token = self.peek()
            if token.kind in (TokenKind.EOF, TokenKind.CLOSE):
                break
            if token.kind is TokenKind.OPEN:
                tokens.extend(self._skip_group())
                continue
            if token.kind is TokenKind.PUNCT:
                if token.text in (",", ":", ";", "=") and angle_depth == 0:
                    break
                if token.text == "<":
                    angle_depth += 1
                elif token.text == ">":
                    if angle_depth == 0:
                        raise self._error("unmatched `>` in type")
                    angle_depth -= 1
            tokens.append(self.advance())

        if not tokens:
            raise self._error(f"expected type, found {self.peek().describe()}")
        if angle_depth:
            raise self._error("unclosed `<` in type", tokens[0])

        path, generic = _classify_path(tokens)
        return TypeRef(_render_tokens(tokens), path, generic)


def _is_punct(token: Token, text: str) -> bool:
    return token.kind is TokenKind.PUNCT and token.text == text


def _classify_path(tokens: List[Token]) -> tuple[Optional[List[str]], bool]:
    """Return path segments and whether the last one has generic arguments.

    Anything that is not ``[::]Ident(::Ident)*`` with optional generic
    arguments yields ``(None, False)``.
    """
    i = 1 if _is_punct(tokens[0], "::") else 0
    segments: List[str] = []

    while True:
        if i >= len(tokens):
            return None, False
        token = tokens[i]
        if token.kind is not TokenKind.IDENT or token.text in ("dyn", "impl", "fn"):
            return None, False
        segments.append(token.text)
        generic = False
        i += 1

        # turbofish: `Vec::<u8>`
        if i + 1 < len(tokens) and _is_punct(tokens[i], "::") and _is_punct(tokens[i + 1], "<"):
            i += 1
        if i < len(tokens) and _is_punct(tokens[i], "<"):
            i = _skip_angle_args(tokens, i)
            generic = True
        elif i < len(tokens) and tokens[i].kind is TokenKind.OPEN and tokens[i].text == "(":
            # Fn(A) -> B sugar
            return segments, True

        if i == len(tokens):
            return segments, generic
        if not _is_punct(tokens[i], "::"):
            return None, False
        i += 1


def _skip_angle_args(tokens: List[Token], start: int) -> int:
    depth = 0
    for i in range(start, len(tokens)):
        if _is_punct(tokens[i], "<"):
            depth += 1
        elif _is_punct(tokens[i], ">"):
            depth -= 1
            if depth == 0:
                return i + 1
    return len(tokens)


_WORDLIKE = (TokenKind.IDENT, TokenKind.LITERAL, TokenKind.LIFETIME)


def _render_tokens(tokens: List[Token]) -> str:
    """Join tokens back into readable source text."""
    parts: List[str] = []
    previous: Optional[Token] = None
    for token in tokens:
        if previous is not None:
            if (previous.kind in _WORDLIKE and token.kind in _WORDLIKE) or (
                previous.kind is TokenKind.PUNCT and previous.text in (",", ";", "->")
            ) or (token.kind is TokenKind.PUNCT and token.text == "->"):
                parts.append(" ")
        parts.append(token.text)
        previous = token
    return "".join(parts)


_RUST_LANGUAGE: Optional[Language] = None


def _rust_language() -> Language:
    global _RUST_LANGUAGE
    if _RUST_LANGUAGE is None:
        _RUST_LANGUAGE = Language(tree_sitter_rust.language())
    return _RUST_LANGUAGE


def _first_error(node: Node) -> Optional[Node]:
    """Return the first error or missing node in document order."""
    if node.is_error or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def validate_syntax(source: str) -> None:
    """Check source text against the complete Rust grammar.

    The struct parser only looks inside struct declarations. This pass parses
    every item down to expressions and statements with tree-sitter.

    Raises:
        RustParseError: At the first syntax error.
    """
    if source.startswith("\ufeff"):
        source = source[1:]
    data = source.encode("utf-8")
    tree = Parser(_rust_language()).parse(data)
    if not tree.root_node.has_error:
        return

    node = _first_error(tree.root_node) or tree.root_node
    row, byte_column = node.start_point
    line_text = data.split(b"\n")[row]
    column = len(line_text[:byte_column].decode("utf-8", errors="replace")) + 1

    text = (node.text or b"").decode("utf-8", errors="replace").strip()
    if node.is_missing:
        message = f"invalid Rust syntax: missing `{node.type}`"
    elif text:
        message = f"invalid Rust syntax near `{text.splitlines()[0][:40]}`"
    else:
        message = "invalid Rust syntax"
    raise RustParseError(message, row + 1, column)


def parse_source(source: str) -> SourceFile:
    """Parse Rust source text into a :class:`SourceFile`.

    Args:
        source: Full text of a Rust source file.

    Returns:
        Syntax tree of the top-level items.

    Raises:
        RustParseError: If the text is not syntactically valid.
    """
    tokens = RustTokenizer(source).tokenize()
    logger.debug("Tokenized source into %d tokens", len(tokens))
    tree = RustParser(tokens).parse()
    validate_syntax(source)
    logger.debug("Parsed %d top-level items", len(tree.items))
    return tree
