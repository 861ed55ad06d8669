"""
Schema-driven binary record parser.

A parser is built fluently from field descriptors and then applied to a byte
buffer. Each builder call returns a new parser, so a schema is never mutated
once it has been handed to another parser (for example as an array element).

Supported descriptors:
- fixed-length strings
- fixed-length ASCII-digit integers (unparsable digits read as zero)
- byte runs ended by a stop predicate, the stop byte being consumed
- arrays of sub-records whose count is a literal or a previously parsed field
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, NamedTuple

from .types import FieldKind, SchemaError, TruncatedInputError

logger = logging.getLogger(__name__)

StopPredicate = Callable[[int, "ParseContext"], bool]


class ParseContext:
    """
    Values parsed so far for one record, plus a link to the enclosing record.

    Stop predicates receive the context of the record being parsed. A child
    record reaches its parent's already-parsed fields through ``parent``.
    """

    def __init__(self, parent: ParseContext | None = None) -> None:
        self.parent = parent
        self._values: dict[str, Any] = {}

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __contains__(self, name: str) -> bool:
        return name in self._values

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def set(self, name: str, value: Any) -> None:
        self._values[name] = value

    def values(self) -> dict[str, Any]:
        return dict(self._values)


@dataclass(frozen=True)
class FieldDescriptor:
    """A single entry in a parser schema."""
    name: str
    kind: FieldKind
    length: int | str | None = None
    read_until: StopPredicate | None = None
    parser: BinaryParser | None = None
    formatter: Callable[[Any], Any] | None = None
    strict: bool = True


class ParseResult(NamedTuple):
    record: dict[str, Any]
    consumed: int


class BinaryParser:
    """
    Fluent builder and single-pass parser for fixed-layout binary records.

    Example:
        parser = (
            BinaryParser()
            .string("tag", length=2)
            .int("count", length=2)
            .array("items", parser=BinaryParser().string("code", length=3), length="count")
        )
        result = parser.parse(b"AB02XYZQRS")
    """

    def __init__(self, schema: tuple[FieldDescriptor, ...] = ()) -> None:
        self._schema = schema

    @property
    def schema(self) -> tuple[FieldDescriptor, ...]:
        return self._schema

    def _with(self, descriptor: FieldDescriptor) -> BinaryParser:
        if any(field.name == descriptor.name for field in self._schema):
            msg = f"Duplicate field name '{descriptor.name}' in schema"
            raise SchemaError(msg)
        return BinaryParser((*self._schema, descriptor))

    @staticmethod
    def _check_fixed_length(name: str, length: int) -> None:
        if not isinstance(length, int) or length < 1:
            msg = f"Field '{name}' must consume at least one byte, got length {length!r}"
            raise SchemaError(msg)

    def string(
        self,
        name: str,
        length: int,
        formatter: Callable[[str], Any] | None = None,
    ) -> BinaryParser:
        """Add a fixed-length text field."""
        self._check_fixed_length(name, length)
        return self._with(FieldDescriptor(name, FieldKind.STRING, length, formatter=formatter))

    def int(self, name: str, length: int) -> BinaryParser:
        """Add a fixed-length field of ASCII digits parsed to an integer."""
        self._check_fixed_length(name, length)
        return self._with(FieldDescriptor(name, FieldKind.INT, length))

    def buffer(self, name: str, read_until: StopPredicate, strict: bool = True) -> BinaryParser:
        """
        Add a byte run that ends at the first byte satisfying ``read_until``.

        The stop byte is consumed but not included in the value. When the
        buffer ends first, a strict field raises TruncatedInputError; a
        lenient one returns the rest of the buffer and consumes no stop byte.
        """
        if not callable(read_until):
            msg = f"Field '{name}' requires a callable stop predicate"
            raise SchemaError(msg)
        return self._with(
            FieldDescriptor(name, FieldKind.BUFFER, read_until=read_until, strict=strict)
        )

    def array(self, name: str, parser: BinaryParser, length: int | str) -> BinaryParser:
        """
        Add an array of sub-records.

        ``length`` is either a literal count or the name of an integer field
        parsed earlier in this record.
        """
        if not isinstance(parser, BinaryParser):
            msg = f"Field '{name}' requires a BinaryParser for its elements"
            raise SchemaError(msg)
        if isinstance(length, str):
            if not any(field.name == length for field in self._schema):
                msg = f"Array '{name}' count refers to unknown field '{length}'"
                raise SchemaError(msg)
        elif not isinstance(length, int) or length < 0:
            msg = f"Array '{name}' count must be a field name or non-negative integer"
            raise SchemaError(msg)
        return self._with(FieldDescriptor(name, FieldKind.ARRAY, length, parser=parser))

    def parse(
        self,
        data: bytes | bytearray | memoryview,
        parent: ParseContext | None = None,
    ) -> ParseResult:
        """
        Parse a record from the start of ``data``.

        Args:
            data: Input buffer
            parent: Context of the enclosing record, if any

        Returns:
            The parsed record and the number of bytes consumed

        Raises:
            TruncatedInputError: If the buffer ends inside a field
        """
        context, end = self._parse_at(bytes(data), 0, parent)
        return ParseResult(context.values(), end)

    def _parse_at(
        self, data: bytes, start: int, parent: ParseContext | None
    ) -> tuple[ParseContext, int]:
        context = ParseContext(parent)
        offset = start

        for field in self._schema:
            if field.kind is FieldKind.STRING:
                raw, offset = _read_fixed(data, offset, field)
                value = raw.decode("utf-8", errors="replace")
                context.set(field.name, field.formatter(value) if field.formatter else value)
            elif field.kind is FieldKind.INT:
                raw, offset = _read_fixed(data, offset, field)
                context.set(field.name, _ascii_int(raw))
            elif field.kind is FieldKind.BUFFER:
                value, offset = _read_until(data, offset, field, context)
                context.set(field.name, value)
            elif field.kind is FieldKind.ARRAY:
                count = field.length if isinstance(field.length, int) else context[field.length]
                items = []
                for _ in range(max(count, 0)):
                    item, offset = field.parser._parse_at(data, offset, context)
                    items.append(item.values())
                context.set(field.name, items)

        return context, offset


def _read_fixed(data: bytes, offset: int, field: FieldDescriptor) -> tuple[bytes, int]:
    end = offset + field.length
    if end > len(data):
        msg = (
            f"Field '{field.name}' needs {field.length} bytes at offset {offset}, "
            f"only {max(len(data) - offset, 0)} available"
        )
        raise TruncatedInputError(msg, offset)
    return data[offset:end], end


def _ascii_int(raw: bytes) -> int:
    if raw.isdigit():
        return int(raw)
    return 0


def _read_until(
    data: bytes, offset: int, field: FieldDescriptor, context: ParseContext
) -> tuple[bytes, int]:
    start = offset
    while offset < len(data):
        if field.read_until(data[offset], context):
            return data[start:offset], offset + 1
        offset += 1

    if field.strict:
        msg = f"Field '{field.name}' starting at offset {start} has no terminator"
        raise TruncatedInputError(msg, start)
    logger.debug("Field '%s' ran to end of buffer without terminator", field.name)
    return data[start:], offset
