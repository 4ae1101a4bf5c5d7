from __future__ import annotations

import inspect
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Final, TypeAlias

from codables.format import RESERVED_TYPE_NAMES, JSONObject, JSONValue, create_tag
from codables.readers import Reader

if TYPE_CHECKING:
	from codables.context import EncodeContext

DEFAULT_CODABLE_TYPE_PRIORITY: Final = 0

Dependencies: TypeAlias = (
	"Sequence[CodableType] | Callable[[], Sequence[CodableType]]"
)


def _accepts_context(fn: Callable[..., Any]) -> bool:
	try:
		signature = inspect.signature(fn)
	except (TypeError, ValueError):
		# Builtins such as `str` or `list` take the value only.
		return False
	positional = 0
	for param in signature.parameters.values():
		if param.kind in (
			inspect.Parameter.POSITIONAL_ONLY,
			inspect.Parameter.POSITIONAL_OR_KEYWORD,
		):
			positional += 1
	return positional >= 2


@dataclass(frozen=True, slots=True, eq=False)
class CodableType:
	"""Describes how one extended kind of value crosses the wire.

	``can_encode`` decides membership, ``encode`` turns a value into a payload
	and ``decode`` turns a payload back into a value. A flat type promises its
	payload is already wire-safe, so it is neither re-encoded nor decoded
	recursively. ``classes`` seed the coder's fast lookup by exact class and
	``reader`` lets reference patching reach into values whose layout is not
	plain indexing. ``dependencies`` are registered alongside this type.

	``encode`` may accept ``(value)`` or ``(value, context)``, and ``decode``
	``(payload)`` or ``(payload, context)``. Callables taking ``*args`` get the
	value only.
	"""

	name: str
	can_encode: Callable[[Any], bool]
	encode: Callable[..., Any]
	decode: Callable[..., Any]
	priority: int = DEFAULT_CODABLE_TYPE_PRIORITY
	is_flat: bool = False
	classes: tuple[type, ...] = ()
	reader: Reader | None = None
	dependencies: Dependencies | None = field(default=None, repr=False)

	def __post_init__(self) -> None:
		if not isinstance(self.name, str) or not self.name:
			raise ValueError("Codable type name must be a non-empty string")
		if self.name in RESERVED_TYPE_NAMES:
			raise ValueError(f'Codable type name "{self.name}" is reserved')
		object.__setattr__(self, "classes", tuple(self.classes))
		if not _accepts_context(self.encode):
			encode_value = self.encode
			object.__setattr__(self, "encode", lambda value, _ctx: encode_value(value))
		if not _accepts_context(self.decode):
			decode_payload = self.decode
			object.__setattr__(self, "decode", lambda payload, _ctx: decode_payload(payload))

	@property
	def has_default_priority(self) -> bool:
		return self.priority == DEFAULT_CODABLE_TYPE_PRIORITY

	@property
	def tag_key(self) -> str:
		return "$$" + self.name

	def create_tag(self, payload: JSONValue) -> JSONObject:
		return create_tag(self.name, payload)

	def encode_tag(self, value: Any, context: EncodeContext) -> JSONObject:
		"""Encode a value of a flat type straight into its tag."""
		return self.create_tag(self.encode(value, context))

	def resolve_dependencies(self) -> list[CodableType]:
		dependencies = self.dependencies
		if dependencies is None:
			return []
		if callable(dependencies):
			dependencies = dependencies()
		return list(dependencies)


def codable_type(
	name: str,
	can_encode: Callable[[Any], bool],
	encode: Callable[..., Any],
	decode: Callable[..., Any],
	*,
	priority: int = DEFAULT_CODABLE_TYPE_PRIORITY,
	is_flat: bool = False,
	classes: Iterable[type] | type | None = None,
	reader: Reader | None = None,
	dependencies: Dependencies | None = None,
) -> CodableType:
	if classes is None:
		class_tuple: tuple[type, ...] = ()
	elif isinstance(classes, type):
		class_tuple = (classes,)
	else:
		class_tuple = tuple(classes)
	return CodableType(
		name=name,
		can_encode=can_encode,
		encode=encode,
		decode=decode,
		priority=priority,
		is_flat=is_flat,
		classes=class_tuple,
		reader=reader,
		dependencies=dependencies,
	)


def get_is_codable_type(value: Any) -> bool:
	return isinstance(value, CodableType)
