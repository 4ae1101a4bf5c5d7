"""Codable types every coder starts with.

Most common types come first since unmatched values are looked up linearly.
"""

from __future__ import annotations

import array
import builtins
import datetime as dt
import re
import traceback
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Final

import httpx

from codables.codable_type import CodableType, codable_type
from codables.errors import DecodeError, ReaderError
from codables.format import MAX_SAFE_INTEGER, record_key_escaper
from codables.readers import (
	Accessor,
	PathCursor,
	format_path,
	map_reader,
	set_reader,
)
from codables.sentinels import UNDEFINED, ExternalReference, Symbol

if TYPE_CHECKING:
	from codables.context import DecodeContext, EncodeContext


def _hashable(value: Any) -> Any:
	# Tuples travel as arrays and frozensets as sets; bring them back where a
	# hash is required.
	if isinstance(value, list):
		return tuple(_hashable(item) for item in value)
	if isinstance(value, set):
		return frozenset(value)
	return value


# ---------------------------------------------------------------------------
# Date


def _datetime_to_iso(value: dt.datetime) -> str:
	# Aware values travel in UTC with a `Z`; naive ones keep no offset.
	if value.tzinfo is not None:
		value = value.astimezone(dt.timezone.utc)
	timespec = "milliseconds" if value.microsecond % 1000 == 0 else "microseconds"
	return value.isoformat(timespec=timespec).replace("+00:00", "Z")


def _datetime_from_iso(value: str | None) -> dt.datetime | None:
	# Invalid dates travel as null.
	if value is None:
		return None
	if value.endswith("Z"):
		value = value[:-1] + "+00:00"
	return dt.datetime.fromisoformat(value)


date_type = codable_type(
	"Date",
	lambda value: isinstance(value, dt.datetime),
	_datetime_to_iso,
	_datetime_from_iso,
	is_flat=True,
	classes=dt.datetime,
)


# ---------------------------------------------------------------------------
# Set / Map

set_type = codable_type(
	"Set",
	lambda value: isinstance(value, (set, frozenset)),
	list,
	lambda items: {_hashable(item) for item in items},
	classes=(set, frozenset),
	reader=set_reader,
)


def _is_map(value: Any) -> bool:
	return isinstance(value, dict) and any(not isinstance(key, str) for key in value)


map_type = codable_type(
	"Map",
	_is_map,
	lambda mapping: [[key, item] for key, item in mapping.items()],
	lambda entries: {_hashable(key): item for key, item in entries},
	reader=map_reader,
)


# ---------------------------------------------------------------------------
# Error

_ERROR_CLASSES: Final[dict[str, type[BaseException]]] = {
	name: obj
	for name, obj in vars(builtins).items()
	if isinstance(obj, type) and issubclass(obj, BaseException)
}
_ERROR_CLASSES["Error"] = Exception

_ERROR_RESERVED_ATTRIBUTES: Final = frozenset({"name", "stack", "cause"})


def _format_stack(exc: BaseException) -> str:
	return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def _error_name(error: BaseException) -> str | None:
	name = vars(error).get("name")
	if not isinstance(name, str):
		name = type(error).__name__
	if name in ("Exception", "Error"):
		return None
	return name


def _error_message(error: BaseException) -> str:
	if len(error.args) == 1 and isinstance(error.args[0], str):
		return error.args[0]
	return str(error)


def _error_cause(error: BaseException) -> Any:
	if error.__cause__ is not None:
		return error.__cause__
	return vars(error).get("cause")


def _set_error_cause(error: BaseException, cause: Any) -> None:
	if cause is None or isinstance(cause, BaseException):
		error.__cause__ = cause
		vars(error).pop("cause", None)
	else:
		error.__cause__ = None
		error.cause = cause  # pyright: ignore[reportAttributeAccessIssue]


def _error_properties(error: BaseException) -> dict[str, Any] | None:
	properties = {
		key: value
		for key, value in vars(error).items()
		if not key.startswith("_") and key not in _ERROR_RESERVED_ATTRIBUTES
	}
	return properties or None


def _encode_error(error: BaseException, context: EncodeContext) -> Any:
	message = _error_message(error)
	name = _error_name(error)
	cause = _error_cause(error)
	properties = _error_properties(error)
	stack = _format_stack(error) if context.options.include_error_stack else None

	if properties is None and name is None and cause is None and stack is None:
		return message

	data = {
		"message": message,
		"name": name,
		"cause": cause,
		"properties": properties,
		"stack": stack,
	}
	return {key: value for key, value in data.items() if value is not None}


def _create_error(name: str | None, message: str) -> BaseException:
	cls = _ERROR_CLASSES.get(name or "Error")
	if cls is not None:
		try:
			return cls(message)
		except TypeError:
			# Builtins like UnicodeDecodeError need more than a message.
			pass
	error = Exception(message)
	if name:
		error.name = name  # pyright: ignore[reportAttributeAccessIssue]
	return error


def _decode_error(data: str | dict[str, Any]) -> BaseException:
	if isinstance(data, str):
		return Exception(data)

	error = _create_error(data.get("name"), data.get("message", ""))
	if "cause" in data:
		_set_error_cause(error, data["cause"])
	if data.get("stack"):
		error.stack = data["stack"]  # pyright: ignore[reportAttributeAccessIssue]
	for key, value in (data.get("properties") or {}).items():
		setattr(error, key, value)
	return error


def _error_reader(error: BaseException, cursor: PathCursor) -> Accessor:
	segment = cursor.take()
	if segment == "cause":
		return Accessor(
			get=lambda: _error_cause(error),
			set=lambda value: _set_error_cause(error, value),
		)
	if segment == "properties":
		key = record_key_escaper.unescape(str(cursor.take()))
		return Accessor(
			get=lambda: getattr(error, key),
			set=lambda value: setattr(error, key, value),
		)
	raise ReaderError(
		f"Cannot address {segment!r} inside an error in {format_path(cursor.path)}"
	)


error_type = codable_type(
	"Error",
	lambda value: isinstance(value, BaseException),
	_encode_error,
	_decode_error,
	classes=Exception,
	reader=_error_reader,
)


# ---------------------------------------------------------------------------
# Scalars

undefined_type = codable_type(
	"undefined",
	lambda value: value is UNDEFINED,
	lambda _value: None,
	lambda _payload: UNDEFINED,
	is_flat=True,
)


def _is_big_int(value: Any) -> bool:
	return (
		isinstance(value, int)
		and not isinstance(value, bool)
		and abs(value) > MAX_SAFE_INTEGER
	)


big_int_type = codable_type(
	"BigInt",
	_is_big_int,
	lambda value: str(value),
	lambda payload: int(payload),
	is_flat=True,
)

_REGEXP_FLAGS: Final = (
	("i", re.IGNORECASE),
	("m", re.MULTILINE),
	("s", re.DOTALL),
)


def _encode_regexp(pattern: re.Pattern[str]) -> str:
	flags = "".join(letter for letter, flag in _REGEXP_FLAGS if pattern.flags & flag)
	return f"/{pattern.pattern}/{flags}"


def _decode_regexp(value: str) -> re.Pattern[str]:
	if not value.startswith("/"):
		raise ValueError(f"Invalid RegExp payload {value!r}")
	source, _, letters = value[1:].rpartition("/")
	flags = 0
	for letter, flag in _REGEXP_FLAGS:
		if letter in letters:
			flags |= flag
	return re.compile(source, flags)


regexp_type = codable_type(
	"RegExp",
	lambda value: isinstance(value, re.Pattern) and isinstance(value.pattern, str),
	_encode_regexp,
	_decode_regexp,
	is_flat=True,
	classes=re.Pattern,
)

url_type = codable_type(
	"URL",
	lambda value: isinstance(value, httpx.URL),
	lambda value: str(value),
	lambda payload: httpx.URL(payload),
	is_flat=True,
	classes=httpx.URL,
)

# Symbols seen by any encode call in this process, so decoding in the same
# process hands back the very same atom.
_encoded_symbols: dict[str, Symbol] = {}


def _encode_symbol(symbol: Symbol) -> str:
	key = Symbol.key_for(symbol) or symbol.description or ""
	_encoded_symbols[key] = symbol
	return key


symbol_type = codable_type(
	"Symbol",
	lambda value: isinstance(value, Symbol),
	_encode_symbol,
	lambda key: _encoded_symbols.get(key) or Symbol.for_key(key),
	is_flat=True,
	classes=Symbol,
)


def _resolve_external_reference(key: str, context: DecodeContext) -> Any:
	references = context.options.external_references or {}
	if key not in references:
		raise DecodeError(f"No value supplied for external reference {key!r}")
	return references[key]


external_reference_type = codable_type(
	"externalReference",
	lambda value: isinstance(value, ExternalReference),
	lambda reference: reference.key,
	_resolve_external_reference,
	is_flat=True,
	classes=ExternalReference,
)


# ---------------------------------------------------------------------------
# Typed arrays

_TYPED_ARRAY_CODES: Final = {
	"Uint8ClampedArray": "B",
	"Int8Array": "b",
	"Int16Array": "h",
	"Uint16Array": "H",
	"Int32Array": "i",
	"Uint32Array": "I",
	"Float32Array": "f",
	"Float64Array": "d",
	"BigInt64Array": "q",
	"BigUint64Array": "Q",
}


def _typed_array_type(name: str, typecode: str) -> CodableType:
	return codable_type(
		name,
		lambda value: isinstance(value, array.array) and value.typecode == typecode,
		# Not flat: float arrays may hold NaN and 64-bit ones big integers.
		list,
		lambda items: array.array(typecode, items),
		classes=array.array,
	)


uint8_array_type = codable_type(
	"Uint8Array",
	lambda value: isinstance(value, bytes),
	list,
	lambda items: bytes(items),
	is_flat=True,
	classes=bytes,
)

byte_array_type = codable_type(
	"ByteArray",
	lambda value: isinstance(value, bytearray),
	list,
	lambda items: bytearray(items),
	is_flat=True,
	classes=bytearray,
)

typed_array_types: list[CodableType] = [
	uint8_array_type,
	byte_array_type,
	*(_typed_array_type(name, code) for name, code in _TYPED_ARRAY_CODES.items()),
]


url_search_params_type = codable_type(
	"URLSearchParams",
	lambda value: isinstance(value, httpx.QueryParams),
	lambda value: str(value),
	lambda payload: httpx.QueryParams(payload),
	classes=httpx.QueryParams,
)


def builtin_types() -> Iterable[CodableType]:
	return (
		date_type,
		set_type,
		map_type,
		error_type,
		undefined_type,
		big_int_type,
		regexp_type,
		url_type,
		symbol_type,
		*typed_array_types,
		url_search_params_type,
		external_reference_type,
	)
