from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Any

from codables.codable_type import CodableType
from codables.errors import TypeNameConflictError

logger = logging.getLogger(__name__)


class TypeRegistry:
	"""Ordered set of codable types keyed by name.

	Types are kept sorted by descending priority, ties keeping registration
	order, so :meth:`match` can stop at the first type that accepts a value.
	A class cache answers the common case of values whose exact class was
	declared by a type; its hit is still confirmed by the type's predicate.
	"""

	__slots__: tuple[str, ...] = ("_types", "_by_class")

	_types: dict[str, CodableType]
	_by_class: dict[type, CodableType]

	def __init__(self, types: Iterable[CodableType] = ()) -> None:
		self._types = {}
		self._by_class = {}
		self.register(*types)

	def get(self, name: str) -> CodableType | None:
		return self._types.get(name)

	def has(self, codable: CodableType) -> bool:
		return self._types.get(codable.name) is codable

	def names(self) -> list[str]:
		return list(self._types)

	def register(self, *types: CodableType) -> None:
		# The whole dependency closure is checked before anything is inserted,
		# so a conflict leaves the registry untouched.
		added: dict[str, CodableType] = {}
		queue = list(types)
		while queue:
			codable = queue.pop(0)
			if self.has(codable) or added.get(codable.name) is codable:
				continue
			if codable.name in self._types or codable.name in added:
				raise TypeNameConflictError(codable.name)
			added[codable.name] = codable
			queue.extend(codable.resolve_dependencies())

		if not added:
			return
		for name, codable in added.items():
			self._types[name] = codable
			logger.debug("Registered codable type %s", name)
		self._organize()

	def match(self, value: Any) -> CodableType | None:
		by_class = self._by_class.get(type(value))
		if by_class is not None and by_class.can_encode(value):
			return by_class

		for codable in self._types.values():
			if codable.can_encode(value):
				return codable
		return None

	def _organize(self) -> None:
		if any(not codable.has_default_priority for codable in self._types.values()):
			ordered = sorted(self._types.values(), key=lambda c: -c.priority)
			self._types = {codable.name: codable for codable in ordered}

		self._by_class.clear()
		for codable in self._types.values():
			for cls in codable.classes:
				self._by_class.setdefault(cls, codable)

	def __iter__(self) -> Iterator[CodableType]:
		return iter(self._types.values())

	def __len__(self) -> int:
		return len(self._types)

	def __contains__(self, name: object) -> bool:
		return name in self._types
