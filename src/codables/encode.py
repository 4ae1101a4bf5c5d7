from __future__ import annotations

import functools
import inspect
from typing import Any

from codables.builtin import big_int_type, symbol_type
from codables.context import EncodeContext
from codables.errors import UnknownValueError
from codables.format import (
	ARRAY_EMPTY_STRING,
	FORBIDDEN_RECORD_KEYS,
	MAX_SAFE_INTEGER,
	UNDEFINED_STRING,
	JSONValue,
	array_ref_id_escaper,
	encode_number,
	encode_special_string,
	record_key_escaper,
)
from codables.sentinels import HOLE, UNDEFINED, Symbol


def _is_function(value: Any) -> bool:
	return inspect.isroutine(value) or isinstance(value, (type, functools.partial))


def _is_record(value: Any) -> bool:
	return isinstance(value, dict) and all(isinstance(key, str) for key in value)


def _encode_array(value: list[Any] | tuple[Any, ...], context: EncodeContext) -> JSONValue:
	result: list[JSONValue] = []
	context.register_encoded(value, result)

	for index, item in enumerate(value):
		if item is HOLE:
			result.append(ARRAY_EMPTY_STRING)
			continue

		# A leading string shaped like an array id marker would be read back as one.
		if index == 0 and isinstance(item, str) and array_ref_id_escaper.is_maybe_escaped(item):
			result.append(array_ref_id_escaper.escape(item))
			continue

		result.append(perform_encode(item, context))

	return result


def _encode_record(value: dict[str, Any], context: EncodeContext) -> JSONValue:
	result: dict[str, JSONValue] = {}
	context.register_encoded(value, result)

	for key, item in value.items():
		if key in FORBIDDEN_RECORD_KEYS:
			continue
		result[record_key_escaper.escape(key)] = perform_encode(item, context)

	return result


def _encode_custom_type(value: Any, context: EncodeContext) -> JSONValue:
	matching = context.registry.match(value)

	if matching is None:
		# Unknown values are never aliased, so every occurrence gets the same policy.
		context.forget_seen(value)
		match context.unknown_mode:
			case "unchanged":
				return value
			case "null":
				return None
			case "throw":
				raise UnknownValueError(value)

	payload = matching.encode(value, context)
	if not matching.is_flat:
		payload = perform_encode(payload, context)

	tag = matching.create_tag(payload)
	context.register_encoded(value, tag)
	return tag


def perform_encode(value: Any, context: EncodeContext) -> JSONValue:
	if value is None:
		return None

	if isinstance(value, bool):
		return value
	if isinstance(value, str):
		return encode_special_string(value)
	if isinstance(value, int):
		if abs(value) > MAX_SAFE_INTEGER:
			return big_int_type.encode_tag(value, context)
		return value
	if isinstance(value, float):
		return encode_number(value)
	if value is UNDEFINED or value is HOLE:
		# Outside an array a hole reads as undefined.
		return UNDEFINED_STRING
	if isinstance(value, Symbol):
		return symbol_type.encode_tag(value, context)
	if _is_function(value):
		return None

	# Composite from here on: a list, a record or an extended kind.
	if context.preserve_references:
		alias = context.alias_for(value)
		if alias is not None:
			return alias
		context.register_new_seen(value)

	if isinstance(value, (list, tuple)):
		return _encode_array(value, context)

	if _is_record(value):
		return _encode_record(value, context)

	return _encode_custom_type(value, context)
