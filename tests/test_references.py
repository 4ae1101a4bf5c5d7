import logging
from typing import Any

import pytest
from codables.codable_type import codable_type
from codables.coder import Coder, clone, decode, encode
from codables.context import DecodeOptions
from codables.errors import UnresolvedReferenceError
from codables.sentinels import PendingReference


class Node:
	"""Hashable holder, so it can sit inside a set it is reachable from."""

	def __init__(self, members: set[Any] | None = None):
		self.members = members if members is not None else set()


node_type = codable_type(
	"Node",
	lambda value: isinstance(value, Node),
	lambda node: {"members": node.members},
	lambda data: Node(data["members"]),
	classes=Node,
)


def test_self_referencing_record():
	node: dict[str, Any] = {}
	node["self"] = node

	wire = encode(node)
	assert wire == {"self": {"$$ref": 0}, "$$id": 0}

	result = decode(wire)
	assert result["self"] is result


def test_self_referencing_array():
	items: list[Any] = ["a"]
	items.append(items)

	result = clone(items)
	assert result[0] == "a"
	assert result[1] is result


def test_shared_values_keep_identity():
	shared = {"x": [1, 2]}
	data = {"a": shared, "b": [shared, {"c": shared}]}

	result = clone(data)
	assert result["a"] == {"x": [1, 2]}
	assert result["b"][0] is result["a"]
	assert result["b"][1]["c"] is result["a"]


def test_mutual_cycle():
	a: dict[str, Any] = {"name": "a"}
	b: dict[str, Any] = {"name": "b", "peer": a}
	a["peer"] = b

	result = clone([a, b])
	first, second = result
	assert first["peer"] is second
	assert second["peer"] is first


def test_map_with_shared_values():
	shared = {"k": 1}
	mapping = {1: shared, 2: shared}

	wire = encode(mapping)
	assert wire == {"$$Map": [[1, {"k": 1, "$$id": 0}], [2, {"$$ref": 0}]]}

	result = decode(wire)
	assert result[1] == {"k": 1}
	assert result[1] is result[2]


def test_cycle_through_map_value():
	mapping: dict[Any, Any] = {1: None}
	mapping[1] = mapping

	wire = encode(mapping)
	assert wire == {"$$Map": [[1, {"$$ref": 0}]], "$$id": 0}

	result = decode(wire)
	assert result[1] is result


def test_cycle_through_set_member():
	coder = Coder([node_type])
	node = Node()
	node.members.add(node)

	wire = coder.encode(node)
	assert wire == {"$$Node": {"members": {"$$Set": [{"$$ref": 0}]}}, "$$id": 0}

	result = coder.decode(wire)
	assert isinstance(result, Node)
	assert result.members == {result}


def test_cycle_through_error_causes():
	first = ValueError("first")
	second = RuntimeError("second")
	first.__cause__ = second
	second.__cause__ = first

	result = clone(first)
	assert isinstance(result, ValueError)
	assert isinstance(result.__cause__, RuntimeError)
	assert result.__cause__.__cause__ is result


def test_error_property_pointing_back():
	error = KeyError("missing")
	error.owner = {"error": error}  # pyright: ignore[reportAttributeAccessIssue]

	result = clone(error)
	assert result.owner["error"] is result


def test_unresolved_reference_is_logged(caplog: pytest.LogCaptureFixture):
	with caplog.at_level(logging.WARNING, logger="codables"):
		result = decode({"a": {"$$ref": 7}})

	placeholder = result["a"]
	assert isinstance(placeholder, PendingReference)
	assert placeholder.ref_id == 7
	assert any("Reference 7" in record.getMessage() for record in caplog.records)


def test_unresolved_reference_strict():
	with pytest.raises(UnresolvedReferenceError) as exc:
		decode({"a": [{"$$ref": 7}]}, DecodeOptions(strict_references=True))
	assert exc.value.ref_id == 7
	assert exc.value.path == ("a", 0)


def test_forward_reference_is_patched():
	# Not produced by the encoder, but accepted.
	result = decode([{"$$ref": 0}, {"x": 1, "$$id": 0}])
	assert result[0] is result[1]


def test_reference_inside_unknown_tag():
	result = decode({"$$Foo": {"back": {"$$ref": 0}}, "$$id": 0})
	assert result["$$Foo"]["back"] is result
