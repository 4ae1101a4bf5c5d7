"""Addressing values inside a decoded graph.

A path is the tuple of wire-level segments leading from the decoded root to a
value: integer positions for arrays and set members, escaped record keys,
and ``"$$Name"`` tag keys where the walk enters the payload of an extended
kind. Readers turn the next few segments into an :class:`Accessor` over the
live container, which is how the patch pass overwrites placeholders left by
deferred aliases, including placeholders sitting inside maps and sets.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Final, TypeAlias

from codables.errors import ReaderError
from codables.format import record_key_escaper
from codables.sentinels import PendingReference

PathSegment: TypeAlias = str | int
Path: TypeAlias = tuple[PathSegment, ...]

ROOT_PATH: Final[Path] = ()

MAP_ENTRY_KEY: Final = 0
MAP_ENTRY_VALUE: Final = 1


def format_path(path: Sequence[PathSegment]) -> str:
	if not path:
		return "<root>"
	return "/".join(str(segment) for segment in path)


class PathCursor:
	"""Consumes the segments of a path one at a time."""

	__slots__: tuple[str, ...] = ("path", "_position")

	path: Path
	_position: int

	def __init__(self, path: Path) -> None:
		self.path = path
		self._position = 0

	@property
	def done(self) -> bool:
		return self._position >= len(self.path)

	def peek(self) -> PathSegment | None:
		if self.done:
			return None
		return self.path[self._position]

	def take(self) -> PathSegment:
		if self.done:
			raise ReaderError(f"Path {format_path(self.path)} ended too early")
		segment = self.path[self._position]
		self._position += 1
		return segment


@dataclass(frozen=True, slots=True)
class Accessor:
	get: Callable[[], Any]
	set: Callable[[Any], None]


Reader: TypeAlias = Callable[[Any, PathCursor], Accessor]


def as_index(segment: PathSegment, size: int, cursor: PathCursor) -> int:
	try:
		index = int(segment)
	except (TypeError, ValueError):
		raise ReaderError(
			f"Expected a numeric segment in {format_path(cursor.path)}, got {segment!r}"
		) from None
	if not 0 <= index < size:
		raise ReaderError(
			f"Index {index} out of range in {format_path(cursor.path)} (size {size})"
		)
	return index


def default_reader(container: Any, cursor: PathCursor) -> Accessor:
	"""Index lists by position, dicts by key and anything else by attribute."""
	segment = cursor.take()

	if isinstance(container, list):
		index = as_index(segment, len(container), cursor)

		def set_item(value: Any) -> None:
			container[index] = value

		return Accessor(get=lambda: container[index], set=set_item)

	key = record_key_escaper.unescape(str(segment))

	if isinstance(container, dict):
		if key not in container:
			raise ReaderError(f"Missing key {key!r} in {format_path(cursor.path)}")

		def set_key(value: Any) -> None:
			container[key] = value

		return Accessor(get=lambda: container[key], set=set_key)

	if not hasattr(container, key):
		raise ReaderError(
			f"{type(container).__qualname__} has no attribute {key!r} "
			+ f"in {format_path(cursor.path)}"
		)
	return Accessor(
		get=lambda: getattr(container, key),
		set=lambda value: setattr(container, key, value),
	)


def _set_member_at(members: set[Any], index: int) -> Any:
	# Placeholders remember the wire position they were decoded at, which is
	# the only stable position a Python set has.
	for member in members:
		if isinstance(member, PendingReference) and member.path[-1:] == (index,):
			return member
	return list(members)[index]


def set_reader(container: set[Any], cursor: PathCursor) -> Accessor:
	"""Address set members by position.

	Positions follow the wire order for placeholders and the set's iteration
	order otherwise.
	"""
	index = as_index(cursor.take(), len(container), cursor)

	def replace(value: Any) -> None:
		member = _set_member_at(container, index)
		container.discard(member)
		container.add(value)

	return Accessor(get=lambda: _set_member_at(container, index), set=replace)


def _entry_at(mapping: dict[Any, Any], index: int) -> tuple[Any, Any]:
	for position, entry in enumerate(mapping.items()):
		if position == index:
			return entry
	raise IndexError(index)


def _replace_key_at(mapping: dict[Any, Any], index: int, key: Any) -> None:
	entries = list(mapping.items())
	entries[index] = (key, entries[index][1])
	mapping.clear()
	mapping.update(entries)


def map_reader(container: dict[Any, Any], cursor: PathCursor) -> Accessor:
	"""Address map entries by entry position plus a key/value discriminator."""
	index = as_index(cursor.take(), len(container), cursor)
	part = cursor.take()

	if part in (MAP_ENTRY_KEY, str(MAP_ENTRY_KEY)):
		return Accessor(
			get=lambda: _entry_at(container, index)[0],
			set=lambda key: _replace_key_at(container, index, key),
		)

	if part in (MAP_ENTRY_VALUE, str(MAP_ENTRY_VALUE)):

		def set_value(value: Any) -> None:
			container[_entry_at(container, index)[0]] = value

		return Accessor(get=lambda: _entry_at(container, index)[1], set=set_value)

	raise ReaderError(
		f"Entry path should be either 0 or 1, got {part!r} in {format_path(cursor.path)}"
	)
