import json
import math
from dataclasses import dataclass
from typing import Any

import pytest
from codables.builtin import set_type
from codables.codable_type import CodableType, codable_type
from codables.coder import (
	Coder,
	clone,
	coder,
	create_coder,
	decode,
	encode,
	parse,
	stringify,
)
from codables.context import DecodeOptions, EncodeContext, EncodeOptions
from codables.errors import (
	FrozenCoderError,
	TypeNameConflictError,
	UnregisteredClassError,
	UnresolvedReferenceError,
)


@dataclass
class Point:
	x: float
	y: float


Point.__codable_type__ = codable_type(  # pyright: ignore[reportAttributeAccessIssue]
	"Point",
	lambda value: isinstance(value, Point),
	lambda point: {"x": point.x, "y": point.y},
	lambda data: Point(**data),
	classes=Point,
)


class Plain:
	pass


class TestDefaultCoder:
	def test_is_frozen(self):
		assert coder.is_default
		with pytest.raises(FrozenCoderError):
			coder.register(Point)
		with pytest.raises(FrozenCoderError):
			coder.add_type("Nope", lambda v: False, lambda v: v, lambda v: v)

	def test_new_coders_are_not_default(self):
		assert not Coder().is_default
		assert not create_coder().is_default

	def test_module_functions_delegate(self):
		assert encode({1}) == coder.encode({1})
		assert decode({"$$Set": [1]}) == {1}
		assert stringify([math.nan]) == '["$$NaN"]'
		assert parse('["$$NaN", 1]')[1] == 1
		assert clone({"a": {2}}) == {"a": {2}}


class TestRegistration:
	def test_register_class_with_codable_type(self):
		custom = Coder()
		custom.register(Point)
		assert custom.get_type_by_name("Point") is Point.__codable_type__

		wire = custom.encode([Point(1, 2)])
		assert wire == [{"$$Point": {"x": 1, "y": 2}}]
		assert custom.decode(wire) == [Point(1, 2)]

	def test_register_in_constructor(self):
		custom = Coder([Point])
		assert custom.clone(Point(0.5, -0.0)) == Point(0.5, -0.0)

	def test_register_plain_class_fails(self):
		with pytest.raises(UnregisteredClassError):
			Coder().register(Plain)

	def test_name_conflict_with_builtin(self):
		with pytest.raises(TypeNameConflictError):
			Coder().add_type("Set", lambda v: False, lambda v: v, lambda v: v)

	def test_add_type_returns_descriptor(self):
		custom = Coder()
		codable = custom.add_type(
			"Complex",
			lambda value: isinstance(value, complex),
			lambda value: [value.real, value.imag],
			lambda data: complex(*data),
		)
		assert isinstance(codable, CodableType)
		assert custom.get_matching_type(1j) is codable
		assert custom.encode(1 + 2j) == {"$$Complex": [1.0, 2.0]}
		assert custom.decode({"$$Complex": [1.0, 2.0]}) == 1 + 2j

	def test_custom_types_do_not_leak(self):
		custom = Coder([Point])
		assert custom.get_type_by_name("Point") is not None
		assert coder.get_type_by_name("Point") is None
		# Without the type the default coder leaves the value as is
		point = Point(1, 1)
		assert coder.encode(point) is point

	def test_encode_with_context(self):
		def encode_point(point: Point, context: EncodeContext) -> Any:
			if context.options.include_error_stack:
				return {"x": point.x, "y": point.y, "verbose": True}
			return {"x": point.x, "y": point.y}

		custom = Coder()
		custom.add_type("Point", lambda v: isinstance(v, Point), encode_point, lambda d: d)
		assert custom.encode(Point(1, 2)) == {"$$Point": {"x": 1, "y": 2}}
		assert custom.encode(Point(1, 2), include_error_stack=True) == {
			"$$Point": {"x": 1, "y": 2, "verbose": True}
		}

	def test_payload_is_encoded_recursively(self):
		custom = Coder([Point])
		assert custom.encode(Point(math.inf, math.nan)) == {
			"$$Point": {"x": "$$Infinity", "y": "$$NaN"}
		}

	def test_shared_custom_values(self):
		custom = Coder([Point])
		point = Point(3, 4)
		result = custom.clone({"a": point, "b": point})
		assert result["a"] is result["b"]

	def test_lookup(self):
		assert coder.get_type_by_name("Set") is set_type
		assert coder.get_matching_type({1}) is set_type
		assert coder.get_matching_type(Plain()) is None
		assert coder.get_type_by_name("Missing") is None


class TestText:
	def test_stringify_is_compact(self):
		assert stringify({"a": [1, 2]}) == '{"a":[1,2]}'

	def test_stringify_with_indent(self):
		text = stringify({"a": {1}}, indent=2)
		assert text == json.dumps({"a": {"$$Set": [1]}}, indent=2)

	def test_parse(self):
		assert parse('{"$$Set":[1,2]}') == {1, 2}
		assert parse(b'{"a":"$$-Infinity"}') == {"a": -math.inf}

	def test_options_objects(self):
		shared = [1]
		options = EncodeOptions(preserve_references=False)
		assert coder.encode([shared, shared], options) == [[1], [1]]
		assert coder.stringify([shared, shared], None, options) == "[[1],[1]]"
		with pytest.raises(UnresolvedReferenceError):
			coder.decode({"a": {"$$ref": 1}}, DecodeOptions(strict_references=True))


class TestScenarios:
	def test_set(self):
		assert encode({1, 2, 3}) == {"$$Set": [1, 2, 3]}

	def test_numeric_sentinels(self):
		assert encode({"a": math.nan, "b": -0.0, "c": math.inf}) == {
			"a": "$$NaN",
			"b": "$$-0",
			"c": "$$Infinity",
		}

	def test_escaped_lookalike(self):
		assert encode("$$NaN") == "~$$NaN"
		assert decode("~$$NaN") == "$$NaN"

	def test_self_reference(self):
		node: dict[str, Any] = {}
		node["self"] = node
		wire = encode(node)
		assert wire == {"self": {"$$ref": 0}, "$$id": 0}
		result = decode(wire)
		assert result["self"] is result

	def test_map_shared_values(self):
		shared = {"v": 1}
		result = clone({1: shared, 2: shared})
		assert result[1] is result[2]
