"""Streaming JSON text decoder.

``JsonDecoder`` walks JSON text with a cursor and reports each value to the
visitor as it is reached; no intermediate tree is built. String literals are
unescaped with the standard library's JSON string scanner and numbers are
matched with its number pattern, so both follow exactly the same grammar as
:mod:`json`.

Shape mapping:
    - ``null`` -> ``visit_unit`` (``visit_none`` under ``decode_option``)
    - ``true``/``false`` -> ``visit_bool``
    - non-negative integers -> ``visit_u64``, negative -> ``visit_i64``,
      integers outside 64 bits -> ``visit_f64``
    - numbers with a fraction or exponent -> ``visit_f64``
    - strings -> ``visit_str``
    - arrays -> ``visit_seq``, objects -> ``visit_map``

JSON aggregates are delimited on the wire, so a visitor must drain every
sequence and map it is given; leftovers are reported as errors. Values that
are decoded as ``IgnoredAny`` are skipped textually without visiting their
contents.
"""

from __future__ import annotations

from json.decoder import scanstring
from json.scanner import NUMBER_RE
from typing import TYPE_CHECKING, Any

from ..de.access import END, MapAccess, SeqAccess
from ..de.decoder import Decoder
from ..de.primitives import I64_MIN, U64_MAX
from ..exceptions import CustomError

if TYPE_CHECKING:
    from ..de.seed import DecodeSeed
    from ..de.visitor import Visitor

_WHITESPACE = " \t\n\r"
_DIGITS = "-0123456789"


class JsonDecoder(Decoder):
    """Decoder over one JSON document.

    Args:
        text: JSON text; bytes are decoded as UTF-8

    Example:
        >>> from shapedecode.de.types import decode_type
        >>> decoder = JsonDecoder('{"a": [1, 2]}')
        >>> decode_type(dict[str, list[int]], decoder)
        {'a': [1, 2]}
        >>> decoder.end()
    """

    def __init__(self, text: str | bytes) -> None:
        if isinstance(text, (bytes, bytearray)):
            text = text.decode("utf-8")
        self.text = text
        self.pos = 0

    # ------------------------------------------------------------------
    # Cursor helpers
    # ------------------------------------------------------------------

    def _peek(self) -> str:
        """Skip whitespace and return the next character ('' at end of input)."""
        text = self.text
        pos = self.pos
        while pos < len(text) and text[pos] in _WHITESPACE:
            pos += 1
        self.pos = pos
        return text[pos] if pos < len(text) else ""

    def position(self) -> tuple[int, int]:
        """Return the 1-based ``(line, column)`` of the cursor."""
        line = self.text.count("\n", 0, self.pos) + 1
        column = self.pos - self.text.rfind("\n", 0, self.pos)
        return line, column

    def error(self, message: str) -> CustomError:
        """Build a syntax error located at the cursor."""
        err = CustomError(message)
        err.set_position(*self.position())
        return err

    def _parse_string(self) -> str:
        try:
            value, end = scanstring(self.text, self.pos + 1, True)
        except ValueError as e:
            raise self.error(f"invalid string: {getattr(e, 'msg', e)}") from e
        self.pos = end
        return value

    def _parse_literal(self, word: str) -> None:
        if not self.text.startswith(word, self.pos):
            raise self.error("expected value")
        self.pos += len(word)

    def _parse_number(self) -> int | float:
        match = NUMBER_RE.match(self.text, self.pos)
        if match is None:
            raise self.error("invalid number")
        integer, frac, exp = match.groups()
        self.pos = match.end()
        if frac or exp:
            return float(match.group())
        return int(integer)

    def _expect(self, char: str, context: str) -> None:
        if self._peek() != char:
            found = self._peek() or "end of input"
            raise self.error(f"expected `{char}` {context}, found {found!r}")
        self.pos += 1

    def end(self) -> None:
        """Fail if anything but whitespace follows the decoded document."""
        if self._peek():
            raise self.error("trailing characters")

    # ------------------------------------------------------------------
    # Decoder protocol
    # ------------------------------------------------------------------

    def decode_any(self, visitor: Visitor[Any]) -> Any:
        char = self._peek()

        if char == "n":
            self._parse_literal("null")
            return visitor.visit_unit()
        if char == "t":
            self._parse_literal("true")
            return visitor.visit_bool(True)
        if char == "f":
            self._parse_literal("false")
            return visitor.visit_bool(False)
        if char == '"':
            return visitor.visit_str(self._parse_string())
        if char and char in _DIGITS:
            number = self._parse_number()
            if isinstance(number, float):
                return visitor.visit_f64(number)
            if 0 <= number <= U64_MAX:
                return visitor.visit_u64(number)
            if I64_MIN <= number < 0:
                return visitor.visit_i64(number)
            return visitor.visit_f64(float(number))
        if char == "[":
            return self._visit_seq(visitor)
        if char == "{":
            return self._visit_map(visitor)
        if not char:
            raise self.error("EOF while parsing a value")
        raise self.error(f"expected value, found {char!r}")

    def decode_option(self, visitor: Visitor[Any]) -> Any:
        if self._peek() == "n":
            self._parse_literal("null")
            return visitor.visit_none()
        return visitor.visit_some(self)

    def decode_ignored_any(self, visitor: Visitor[Any]) -> Any:
        self._skip_value()
        return visitor.visit_unit()

    def _visit_seq(self, visitor: Visitor[Any]) -> Any:
        self.pos += 1
        access = JsonSeqAccess(self)
        try:
            result = visitor.visit_seq(access)
        finally:
            access.close()

        if self._peek() != "]":
            raise self.error(f"trailing elements in sequence after {access.consumed} were read")
        self.pos += 1
        return result

    def _visit_map(self, visitor: Visitor[Any]) -> Any:
        self.pos += 1
        access = JsonMapAccess(self)
        try:
            result = visitor.visit_map(access)
        finally:
            access.close()

        if self._peek() != "}":
            raise self.error(f"trailing entries in map after {access.consumed} were read")
        self.pos += 1
        return result

    def _skip_value(self) -> None:
        char = self._peek()

        if char == '"':
            self._parse_string()
        elif char and char in _DIGITS:
            self._parse_number()
        elif char == "n":
            self._parse_literal("null")
        elif char == "t":
            self._parse_literal("true")
        elif char == "f":
            self._parse_literal("false")
        elif char == "[":
            self.pos += 1
            if self._peek() == "]":
                self.pos += 1
                return
            while True:
                self._skip_value()
                if self._peek() == ",":
                    self.pos += 1
                    continue
                self._expect("]", "after array element")
                return
        elif char == "{":
            self.pos += 1
            if self._peek() == "}":
                self.pos += 1
                return
            while True:
                if self._peek() != '"':
                    raise self.error("key must be a string")
                self._parse_string()
                self._expect(":", "after object key")
                self._skip_value()
                if self._peek() == ",":
                    self.pos += 1
                    continue
                self._expect("}", "after object value")
                return
        elif not char:
            raise self.error("EOF while parsing a value")
        else:
            raise self.error(f"expected value, found {char!r}")


class JsonSeqAccess(SeqAccess):
    def __init__(self, decoder: JsonDecoder) -> None:
        super().__init__()
        self.decoder = decoder
        self._first = True

    def _next_element_seed(self, seed: DecodeSeed[Any]) -> Any:
        decoder = self.decoder
        char = decoder._peek()
        if char == "]":
            return END

        if not self._first:
            if char != ",":
                raise decoder.error("expected `,` or `]` after array element")
            decoder.pos += 1
            if decoder._peek() == "]":
                raise decoder.error("trailing comma")
        elif not char:
            raise decoder.error("EOF while parsing a list")

        self._first = False
        return seed.consume(decoder)


class JsonMapAccess(MapAccess):
    def __init__(self, decoder: JsonDecoder) -> None:
        super().__init__()
        self.decoder = decoder
        self._first = True

    def _next_key_seed(self, seed: DecodeSeed[Any]) -> Any:
        decoder = self.decoder
        char = decoder._peek()
        if char == "}":
            return END

        if not self._first:
            if char != ",":
                raise decoder.error("expected `,` or `}` after object value")
            decoder.pos += 1
            char = decoder._peek()
            if char == "}":
                raise decoder.error("trailing comma")

        if char != '"':
            raise decoder.error("key must be a string")

        self._first = False
        key = decoder._parse_string()
        self._raw_key = key
        return seed.consume(JsonKeyDecoder(key))

    def _next_value_seed(self, seed: DecodeSeed[Any]) -> Any:
        self.decoder._expect(":", "after object key")
        return seed.consume(self.decoder)


class JsonKeyDecoder(Decoder):
    """Decoder for an object key, which JSON always writes as a string.

    Integer and boolean targets parse the key text, so ``dict[int, str]``
    round-trips through JSON.
    """

    def __init__(self, key: str) -> None:
        self.key = key

    def decode_any(self, visitor: Visitor[Any]) -> Any:
        return visitor.visit_str(self.key)

    def decode_option(self, visitor: Visitor[Any]) -> Any:
        return visitor.visit_some(self)

    def decode_int(self, visitor: Visitor[Any]) -> Any:
        try:
            number = int(self.key)
        except ValueError:
            return self.decode_any(visitor)
        if number < 0:
            return visitor.visit_i64(number)
        return visitor.visit_u64(number)

    def decode_bool(self, visitor: Visitor[Any]) -> Any:
        if self.key in ("true", "false"):
            return visitor.visit_bool(self.key == "true")
        return self.decode_any(visitor)
