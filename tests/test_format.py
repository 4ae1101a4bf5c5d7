import math

from codables.format import (
	create_ref_alias,
	create_tag,
	decode_special_string,
	encode_number,
	encode_special_string,
	get_tag,
	is_ref_id,
	is_tag_key,
	parse_array_ref_id,
)
from codables.sentinels import UNDEFINED


def test_tag_helpers():
	assert create_tag("Set", [1]) == {"$$Set": [1]}
	assert create_ref_alias(3) == {"$$ref": 3}
	assert is_tag_key("$$Set")
	assert not is_tag_key("$$")
	assert not is_tag_key("~$$Set")


def test_get_tag():
	assert get_tag({"$$Set": [1]}) == ("Set", [1], None)
	assert get_tag({"$$Set": [1], "$$id": 2}) == ("Set", [1], 2)
	assert get_tag({"$$ref": 0}) == ("ref", 0, None)


def test_get_tag_rejects_records():
	assert get_tag({}) is None
	assert get_tag({"$$id": 1}) is None
	assert get_tag({"a": 1}) is None
	assert get_tag({"$$Set": [1], "a": 2}) is None
	assert get_tag({"$$Set": [1], "$$Map": []}) is None


def test_ref_ids():
	assert is_ref_id(0)
	assert is_ref_id(7)
	assert not is_ref_id(-1)
	assert not is_ref_id(True)
	assert not is_ref_id("1")
	assert not is_ref_id(1.0)


def test_array_ref_id_marker():
	assert parse_array_ref_id("$$id:0") == 0
	assert parse_array_ref_id("$$id:42") == 42
	assert parse_array_ref_id("~$$id:42") is None
	assert parse_array_ref_id("$$id:x") is None


def test_encode_number():
	assert encode_number(1.5) == 1.5
	assert encode_number(0.0) == 0.0
	assert encode_number(-0.0) == "$$-0"
	assert encode_number(math.nan) == "$$NaN"
	assert encode_number(math.inf) == "$$Infinity"
	assert encode_number(-math.inf) == "$$-Infinity"


def test_special_strings():
	assert encode_special_string("$$NaN") == "~$$NaN"
	assert encode_special_string("$$empty") == "~$$empty"
	assert encode_special_string("NaN") == "NaN"

	assert decode_special_string("$$undefined") is UNDEFINED
	assert math.isnan(decode_special_string("$$NaN"))
	assert decode_special_string("$$Infinity") == math.inf
	assert decode_special_string("$$-Infinity") == -math.inf
	negative_zero = decode_special_string("$$-0")
	assert negative_zero == 0 and math.copysign(1.0, negative_zero) < 0
	# A hole only means something inside arrays
	assert decode_special_string("$$empty") == "$$empty"
	assert decode_special_string("~$$NaN") == "$$NaN"
