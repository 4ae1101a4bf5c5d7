from __future__ import annotations

from typing import Any

from codables.context import DecodeContext
from codables.errors import DecodeError
from codables.format import (
	ARRAY_EMPTY_STRING,
	FORBIDDEN_RECORD_KEYS,
	REF_ID_KEY,
	REF_TAG,
	JSONObject,
	JSONValue,
	array_ref_id_escaper,
	decode_special_string,
	get_tag,
	is_ref_id,
	parse_array_ref_id,
	record_key_escaper,
	tag_key,
)
from codables.readers import Path, format_path
from codables.sentinels import HOLE


def _expect_ref_id(value: Any, path: Path) -> int:
	if not is_ref_id(value):
		raise DecodeError(f"Invalid reference id {value!r} at {format_path(path)}")
	return value


def _decode_array(value: list[JSONValue], context: DecodeContext, path: Path) -> list[Any]:
	ref_id: int | None = None
	items = value
	if items and isinstance(items[0], str):
		ref_id = parse_array_ref_id(items[0])
		if ref_id is not None:
			items = items[1:]

	result: list[Any] = []
	for index, item in enumerate(items):
		if isinstance(item, str):
			if index == 0 and array_ref_id_escaper.is_already_escaped(item):
				result.append(array_ref_id_escaper.unescape(item))
				continue
			if item == ARRAY_EMPTY_STRING:
				result.append(HOLE)
				continue
		result.append(decode_input(item, context, (*path, index)))

	if ref_id is not None:
		context.resolve(ref_id, result)
	return result


def _decode_record(value: JSONObject, context: DecodeContext, path: Path) -> dict[str, Any]:
	ref_id: int | None = None
	if REF_ID_KEY in value:
		ref_id = _expect_ref_id(value[REF_ID_KEY], path)

	result: dict[str, Any] = {}
	for key, item in value.items():
		if key == REF_ID_KEY:
			continue
		decoded_key = record_key_escaper.unescape(key)
		if decoded_key in FORBIDDEN_RECORD_KEYS:
			continue
		result[decoded_key] = decode_input(item, context, (*path, key))

	if ref_id is not None:
		context.resolve(ref_id, result)
	return result


def _decode_tag(
	value: JSONObject,
	name: str,
	payload: JSONValue,
	ref_id: JSONValue,
	context: DecodeContext,
	path: Path,
) -> Any:
	if name == REF_TAG:
		target_id = _expect_ref_id(payload, path)
		if target_id in context.resolved:
			return context.resolved[target_id]
		# The target is still being decoded (a cycle) or comes later; leave a
		# placeholder for the patch pass.
		return context.defer(target_id, path)

	codable = context.registry.get(name)
	if codable is None:
		# Tags from newer or foreign coders read as plain records.
		return _decode_record(value, context, path)

	if ref_id is not None:
		ref_id = _expect_ref_id(ref_id, path)

	if not codable.is_flat:
		payload = decode_input(payload, context, (*path, tag_key(name)))

	try:
		result = codable.decode(payload, context)
	except DecodeError:
		raise
	except Exception as exc:
		raise DecodeError(
			f"Invalid {name} payload at {format_path(path)}: {exc}"
		) from exc

	if ref_id is not None:
		context.resolve(ref_id, result)
	return result


def decode_input(value: JSONValue, context: DecodeContext, path: Path) -> Any:
	if value is None or isinstance(value, (bool, int, float)):
		return value

	if isinstance(value, str):
		return decode_special_string(value)

	if isinstance(value, list):
		return _decode_array(value, context, path)

	if isinstance(value, dict):
		tag = get_tag(value)
		if tag is None:
			return _decode_record(value, context, path)
		name, payload, ref_id = tag
		return _decode_tag(value, name, payload, ref_id, context, path)

	raise DecodeError(
		f"Unsupported wire value of type {type(value).__qualname__} at {format_path(path)}"
	)
