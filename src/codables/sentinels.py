"""Host-side stand-ins for wire values Python has no native spelling for."""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar, Final, Literal


class UndefinedType(Enum):
	UNDEFINED = "undefined"

	def __bool__(self) -> Literal[False]:
		return False

	def __repr__(self) -> str:
		return "UNDEFINED"


class HoleType(Enum):
	"""A missing slot in a sparse array, distinct from a present ``UNDEFINED``."""

	HOLE = "hole"

	def __bool__(self) -> Literal[False]:
		return False

	def __repr__(self) -> str:
		return "HOLE"


UNDEFINED: Final = UndefinedType.UNDEFINED
HOLE: Final = HoleType.HOLE


class Symbol:
	"""Unique atom compared by identity.

	``Symbol.for_key`` returns the process-wide symbol registered under a key,
	creating it on first use, the same way ``Symbol.for`` works in JavaScript.
	"""

	__slots__: tuple[str, ...] = ("description",)
	_global: ClassVar[dict[str, Symbol]] = {}

	description: str | None

	def __init__(self, description: str | None = None) -> None:
		self.description = description

	@classmethod
	def for_key(cls, key: str) -> Symbol:
		symbol = cls._global.get(key)
		if symbol is None:
			symbol = cls(key)
			cls._global[key] = symbol
		return symbol

	@classmethod
	def key_for(cls, symbol: Symbol) -> str | None:
		if symbol.description is None:
			return None
		if cls._global.get(symbol.description) is symbol:
			return symbol.description
		return None

	def __repr__(self) -> str:
		if self.description is None:
			return "Symbol()"
		return f"Symbol({self.description!r})"


class PendingReference:
	"""Placeholder left where an alias could not be resolved yet.

	The patch pass replaces it with the referenced value. It stays in the
	output only when the alias points at an id that never appeared.
	"""

	__slots__: tuple[str, ...] = ("ref_id", "path")

	ref_id: int
	path: tuple[str | int, ...]

	def __init__(self, ref_id: int, path: tuple[str | int, ...]) -> None:
		self.ref_id = ref_id
		self.path = path

	def __repr__(self) -> str:
		return f"PendingReference({self.ref_id})"


class ExternalReference:
	"""A value owned by the caller that crosses the wire by key only.

	Decoding hands back whatever the caller supplies for ``key`` in
	``DecodeOptions.external_references``.
	"""

	__slots__: tuple[str, ...] = ("key", "value")

	key: str
	value: Any

	def __init__(self, key: str, value: Any = None) -> None:
		self.key = key
		self.value = value

	def __eq__(self, other: object) -> bool:
		if not isinstance(other, ExternalReference):
			return NotImplemented
		return self.key == other.key

	def __hash__(self) -> int:
		return hash((ExternalReference, self.key))

	def __repr__(self) -> str:
		return f"ExternalReference({self.key!r})"


def external_reference(key: str, value: Any = None) -> ExternalReference:
	return ExternalReference(key, value)
