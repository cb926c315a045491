##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Tabula
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Tabula.
##############################################################################

"""
Semantic field types and their SQLite storage affinities.

SQLite only stores five kinds of value: NULL, 64-bit integers, doubles, text,
and blobs. Every field type Tabula supports is mapped onto one of those by a
[`TypeConverter`][mapping.affinity.TypeConverter] that knows the column
affinity to declare and how to encode and decode values.

Types SQLite has no representation for are stored as text:

- booleans as the literals `"true"` and `"false"`
- timestamps as the 17 digit pattern `yyyyMMddHHmmssSSS`
- decimals as their plain (non-exponent) string form
"""

import logging
import types
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Dict, List, NewType, Tuple, Union, get_args, get_origin

from tabula.exceptions import ConfigurationError, ConversionError, TypeMismatchError


LOG = logging.getLogger(__name__)

Int32 = NewType("Int32", int)

INT32_RANGE = (-(2**31), 2**31 - 1)
INT64_RANGE = (-(2**63), 2**63 - 1)
TIMESTAMP_LENGTH = 17

_UNION_TYPES = (Union, getattr(types, "UnionType", Union))


class Affinity(Enum):
    """The column types declared in generated `CREATE TABLE` statements."""

    INTEGER = "INTEGER"
    REAL = "REAL"
    TEXT = "TEXT"
    BLOB = "BLOB"


class SemanticType(Enum):
    """The logical field types that Tabula knows how to store."""

    INT32 = "Int32"
    INT64 = "Int64"
    FLOAT64 = "Float64"
    TEXT = "Text"
    BOOLEAN = "Boolean"
    TIMESTAMP = "Timestamp"
    DECIMAL = "Decimal"
    BYTES = "Bytes"


@dataclass(frozen=True)
class TypeConverter:
    """
    One row of the affinity table.

    Attributes:
        semantic_type: The semantic type this row describes.
        affinity: The affinity declared for columns of this type.
        primitive: True for the number and boolean types, whose columns are
            `NOT NULL` unless the field is annotated as `Optional`.
        encode: Converts a (non-None) record value to its storage value.
            Raises `TypeMismatchError` for values of the wrong type.
        decode: Converts a (non-None) storage value back to a record value.
            Raises `ConversionError` for malformed storage values.
        null_default: The value a non-nullable field receives when its column is NULL.
    """

    semantic_type: SemanticType
    affinity: Affinity
    primitive: bool
    encode: Callable[[Any], Any]
    decode: Callable[[Any], Any]
    null_default: Any = None


def _type_name(value: Any) -> str:
    return type(value).__name__


def _check_integer(value: Any, bounds: Tuple[int, int], label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeMismatchError(f"Expected an {label} value but got {_type_name(value)}: {value!r}")
    if not bounds[0] <= value <= bounds[1]:
        raise TypeMismatchError(f"Value {value} does not fit in an {label} column")
    return int(value)


def _encode_int32(value: Any) -> int:
    return _check_integer(value, INT32_RANGE, "Int32")


def _encode_int64(value: Any) -> int:
    return _check_integer(value, INT64_RANGE, "Int64")


def _decode_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConversionError(f"Stored value {value!r} is not an integer") from exc


def _encode_float(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeMismatchError(f"Expected a Float64 value but got {_type_name(value)}: {value!r}")
    return float(value)


def _decode_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConversionError(f"Stored value {value!r} is not a number") from exc


def _encode_text(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeMismatchError(f"Expected a Text value but got {_type_name(value)}: {value!r}")
    return value


def _decode_text(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


def _encode_bool(value: Any) -> str:
    if not isinstance(value, bool):
        raise TypeMismatchError(f"Expected a Boolean value but got {_type_name(value)}: {value!r}")
    return "true" if value else "false"


def _decode_bool(value: Any) -> bool:
    # Anything that isn't the literal "true" reads as False
    return str(value).lower() == "true"


def format_timestamp(value: datetime) -> str:
    """
    Format a datetime with the `yyyyMMddHHmmssSSS` pattern.

    Time zone information is dropped and microseconds are truncated to
    milliseconds.

    Args:
        value: The datetime to format.

    Returns:
        A string of exactly 17 ASCII digits.
    """
    return (
        f"{value.year:04d}{value.month:02d}{value.day:02d}"
        f"{value.hour:02d}{value.minute:02d}{value.second:02d}{value.microsecond // 1000:03d}"
    )


def parse_timestamp(value: Union[str, int]) -> datetime:
    """
    Parse a value produced by [`format_timestamp`][mapping.affinity.format_timestamp].

    Timestamp columns are declared with INTEGER affinity, so SQLite hands the
    stored digits back as an integer. Integers are left-padded with zeros to
    17 digits before parsing.

    Args:
        value: The stored text or integer.

    Returns:
        The naive datetime the value represents.

    Raises:
        (exceptions.ConversionError): If the value is not 17 digits or does not
            describe a valid date and time.
    """
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        text = str(value).zfill(TIMESTAMP_LENGTH)
    elif isinstance(value, str):
        text = value
    else:
        raise ConversionError(f"Cannot parse timestamp from {value!r}")

    if len(text) != TIMESTAMP_LENGTH or not (text.isascii() and text.isdigit()):
        raise ConversionError(f"Timestamp '{text}' does not match the pattern yyyyMMddHHmmssSSS")

    try:
        return datetime(
            int(text[0:4]),
            int(text[4:6]),
            int(text[6:8]),
            int(text[8:10]),
            int(text[10:12]),
            int(text[12:14]),
            int(text[14:17]) * 1000,
        )
    except ValueError as exc:
        raise ConversionError(f"Timestamp '{text}' is not a valid date: {exc}") from exc


def _encode_timestamp(value: Any) -> str:
    if not isinstance(value, datetime):
        raise TypeMismatchError(f"Expected a Timestamp (datetime) value but got {_type_name(value)}: {value!r}")
    return format_timestamp(value)


def _encode_decimal(value: Any) -> str:
    if not isinstance(value, Decimal):
        raise TypeMismatchError(f"Expected a Decimal value but got {_type_name(value)}: {value!r}")
    if not value.is_finite():
        raise ConversionError(f"Cannot store non-finite decimal {value}")
    return format(value, "f")


def _decode_decimal(value: Any) -> Decimal:
    try:
        decoded = Decimal(str(value))
    except InvalidOperation as exc:
        raise ConversionError(f"Stored value {value!r} is not a decimal") from exc
    if not decoded.is_finite():
        raise ConversionError(f"Stored value {value!r} is not a finite decimal")
    return decoded


def _encode_bytes(value: Any) -> bytes:
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise TypeMismatchError(f"Expected a Bytes value but got {_type_name(value)}: {value!r}")
    return bytes(value)


def _decode_bytes(value: Any) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


class TypeAffinityRegistry:
    """
    Registry of the semantic types that can appear in a record type.

    The registry maps Python annotations (`int`, `Int32`, `datetime`, ...) to
    semantic types and semantic types to their
    [`TypeConverter`][mapping.affinity.TypeConverter].

    Attributes:
        _registry (Dict[SemanticType, TypeConverter]): Maps semantic types to their converters.
        _aliases (Dict[Any, SemanticType]): Maps Python annotations to semantic types.

    Methods:
        register: Register a converter and the annotations that resolve to it.
        list_available: Return the names of every registered semantic type.
        get: Return the converter for a semantic type.
        resolve: Resolve a field annotation to its converter and nullability.
    """

    def __init__(self):
        self._registry: Dict[SemanticType, TypeConverter] = {}
        self._aliases: Dict[Any, SemanticType] = {}
        self._register_builtins()

    def _register_builtins(self):
        """Register the eight semantic types SQLite can hold."""
        builtins = [
            (TypeConverter(SemanticType.INT32, Affinity.INTEGER, True, _encode_int32, _decode_int, 0), [Int32]),
            (TypeConverter(SemanticType.INT64, Affinity.INTEGER, True, _encode_int64, _decode_int, 0), [int]),
            (TypeConverter(SemanticType.FLOAT64, Affinity.REAL, True, _encode_float, _decode_float, 0.0), [float]),
            (TypeConverter(SemanticType.TEXT, Affinity.TEXT, False, _encode_text, _decode_text), [str]),
            (TypeConverter(SemanticType.BOOLEAN, Affinity.TEXT, True, _encode_bool, _decode_bool, False), [bool]),
            (
                TypeConverter(SemanticType.TIMESTAMP, Affinity.INTEGER, False, _encode_timestamp, parse_timestamp),
                [datetime],
            ),
            (TypeConverter(SemanticType.DECIMAL, Affinity.TEXT, False, _encode_decimal, _decode_decimal), [Decimal]),
            (TypeConverter(SemanticType.BYTES, Affinity.BLOB, False, _encode_bytes, _decode_bytes), [bytes]),
        ]
        for converter, aliases in builtins:
            self.register(converter, aliases)

    def register(self, converter: TypeConverter, aliases: List[Any] = None):
        """
        Register a converter, replacing any previous one for the same semantic type.

        Args:
            converter: The converter to register.
            aliases: Python annotations that should resolve to this converter.

        Raises:
            TypeError: If `converter` is not a `TypeConverter`.
        """
        if not isinstance(converter, TypeConverter):
            raise TypeError(f"Expected a TypeConverter, got {_type_name(converter)}")

        self._registry[converter.semantic_type] = converter
        LOG.debug(f"Registered semantic type: {converter.semantic_type.value}")

        for alias in aliases or []:
            self._aliases[alias] = converter.semantic_type

    def list_available(self) -> List[str]:
        """
        Return the names of all registered semantic types.

        Returns:
            A list of semantic type names.
        """
        return [semantic_type.value for semantic_type in self._registry]

    def get(self, semantic_type: SemanticType) -> TypeConverter:
        """
        Return the converter registered for `semantic_type`.

        Args:
            semantic_type: The semantic type to look up.

        Returns:
            The registered converter.

        Raises:
            (exceptions.ConfigurationError): If nothing is registered for `semantic_type`.
        """
        converter = self._registry.get(semantic_type)
        if converter is None:
            available = ", ".join(self.list_available())
            raise ConfigurationError(
                f"Semantic type '{semantic_type}' is not supported. Available types: {available}"
            )
        return converter

    def resolve(self, annotation: Any) -> Tuple[TypeConverter, bool]:
        """
        Resolve a field annotation to its converter and nullability.

        `Optional[X]` unwraps to `X` and makes the field nullable. Fields of a
        non-primitive type are always nullable.

        Args:
            annotation: The (already evaluated) type annotation of a field.

        Returns:
            A tuple of the converter and whether the column accepts NULL.

        Raises:
            (exceptions.ConfigurationError): If the annotation does not resolve
                to a registered semantic type.
        """
        optional = False
        inner = annotation
        if get_origin(annotation) in _UNION_TYPES:
            members = [arg for arg in get_args(annotation) if arg is not type(None)]
            if len(members) != 1:
                raise ConfigurationError(
                    f"Unavailable field type: {annotation} (only Optional[X] unions are supported)"
                )
            inner = members[0]
            optional = True

        try:
            semantic_type = self._aliases.get(inner)
        except TypeError:  # unhashable annotation
            semantic_type = None
        if semantic_type is None:
            raise ConfigurationError(f"Unavailable field type: {annotation}")

        converter = self.get(semantic_type)
        return converter, optional or not converter.primitive


REGISTRY = TypeAffinityRegistry()


def encode_param(value: Any) -> Any:
    """
    Convert a query parameter to the form its column stores.

    Timestamps, booleans, and decimals are converted with the same rules used
    when a record is written so that they compare equal to stored values.
    Everything else is passed through untouched.

    Args:
        value: A parameter for a `WHERE` clause.

    Returns:
        The storage form of `value`.
    """
    if isinstance(value, bool):
        return _encode_bool(value)
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, Decimal):
        return _encode_decimal(value)
    return value
