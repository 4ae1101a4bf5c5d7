"""Wire grammar shared by the encoder and the decoder.

Tags look like ``{"$$Set": [1, 2]}``: one ``"$$" + name`` key holding the
payload, optionally next to an integer ``"$$id"`` that marks the node as the
target of later ``{"$$ref": id}`` aliases. Referenced arrays carry their id
as a leading ``"$$id:<n>"`` element instead. Bare strings of the form
``"$$NaN"`` and friends stand for values JSON cannot spell. Anything a user
wrote that could be mistaken for one of these gets a leading ``~``.
"""

from __future__ import annotations

import math
import re
from typing import Any, Final, TypeAlias

from codables.escaper import Escaper
from codables.sentinels import UNDEFINED

JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = (
	JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]
)
JSONObject: TypeAlias = dict[str, JSONValue]
JSONArray: TypeAlias = list[JSONValue]

TAG_PREFIX: Final = "$$"
REF_ID_KEY: Final = "$$id"
REF_TAG: Final = "ref"
REF_KEY: Final = TAG_PREFIX + REF_TAG
RESERVED_TYPE_NAMES: Final = frozenset({REF_TAG, "id"})

UNDEFINED_STRING: Final = "$$undefined"
NAN_STRING: Final = "$$NaN"
NEGATIVE_ZERO_STRING: Final = "$$-0"
INFINITY_STRING: Final = "$$Infinity"
NEGATIVE_INFINITY_STRING: Final = "$$-Infinity"
ARRAY_EMPTY_STRING: Final = "$$empty"

MAX_SAFE_INTEGER: Final = 2**53 - 1

# Keys that would reach inherited slots once the document is read back by a
# JavaScript consumer.
FORBIDDEN_RECORD_KEYS: Final = frozenset({"__proto__", "constructor", "prototype"})

special_string_escaper = Escaper(
	r"\$\$(?:undefined|NaN|-0|Infinity|-Infinity|empty)"
)
record_key_escaper = Escaper(r"^json$|^\$\$.+$", re.DOTALL)
array_ref_id_escaper = Escaper(r"\$\$id:\d+")

_ARRAY_REF_ID_RE = re.compile(r"\$\$id:(\d+)")

_SPECIAL_STRING_VALUES: Final[dict[str, Any]] = {
	UNDEFINED_STRING: UNDEFINED,
	NAN_STRING: math.nan,
	NEGATIVE_ZERO_STRING: -0.0,
	INFINITY_STRING: math.inf,
	NEGATIVE_INFINITY_STRING: -math.inf,
}


def is_tag_key(key: str) -> bool:
	return key.startswith(TAG_PREFIX) and len(key) > len(TAG_PREFIX)


def tag_key(name: str) -> str:
	return TAG_PREFIX + name


def tag_name(key: str) -> str:
	return key[len(TAG_PREFIX) :]


def create_tag(name: str, payload: JSONValue) -> JSONObject:
	return {tag_key(name): payload}


def create_ref_alias(ref_id: int) -> JSONObject:
	return create_tag(REF_TAG, ref_id)


def get_tag(value: JSONObject) -> tuple[str, JSONValue, JSONValue] | None:
	"""Split a tag into ``(name, payload, ref_id)``; ``None`` for plain records.

	``ref_id`` is returned unvalidated, ``None`` when absent.
	"""
	name: str | None = None
	for key in value:
		if key == REF_ID_KEY:
			continue
		if name is not None or not is_tag_key(key):
			return None
		name = tag_name(key)
	if name is None:
		return None
	return name, value[tag_key(name)], value.get(REF_ID_KEY)


def is_ref_id(value: Any) -> bool:
	return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def array_ref_id_marker(ref_id: int) -> str:
	return f"$$id:{ref_id}"


def parse_array_ref_id(value: str) -> int | None:
	match = _ARRAY_REF_ID_RE.fullmatch(value)
	if match is None:
		return None
	return int(match.group(1))


def encode_special_string(value: str) -> str:
	return special_string_escaper.escape(value)


def decode_special_string(value: str) -> Any:
	if value in _SPECIAL_STRING_VALUES:
		return _SPECIAL_STRING_VALUES[value]
	return special_string_escaper.unescape(value)


def encode_number(value: float) -> float | str:
	if math.isnan(value):
		return NAN_STRING
	if value == math.inf:
		return INFINITY_STRING
	if value == -math.inf:
		return NEGATIVE_INFINITY_STRING
	if value == 0 and math.copysign(1.0, value) < 0:
		return NEGATIVE_ZERO_STRING
	return value
