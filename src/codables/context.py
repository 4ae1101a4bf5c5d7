from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Final, Literal, get_args

from codables.format import (
	REF_ID_KEY,
	REF_KEY,
	JSONObject,
	array_ref_id_marker,
	create_ref_alias,
)
from codables.readers import Path
from codables.sentinels import PendingReference

if TYPE_CHECKING:
	from codables.registry import TypeRegistry

UnknownMode = Literal["unchanged", "null", "throw"]

REF_ID_BASE: Final = 0


@dataclass(frozen=True, slots=True)
class EncodeOptions:
	include_error_stack: bool = False
	preserve_references: bool = True
	unknown_mode: UnknownMode = "unchanged"

	def __post_init__(self) -> None:
		if self.unknown_mode not in get_args(UnknownMode):
			raise ValueError(
				f"unknown_mode must be one of {get_args(UnknownMode)}, "
				+ f"got {self.unknown_mode!r}"
			)


@dataclass(frozen=True, slots=True)
class DecodeOptions:
	# Raise instead of logging when an alias targets an id that never appeared.
	strict_references: bool = False
	# Values handed back for external references, keyed by reference key.
	external_references: Mapping[str, Any] | None = None


def resolve_encode_options(
	options: EncodeOptions | None, overrides: dict[str, Any]
) -> EncodeOptions:
	if options is None:
		return EncodeOptions(**overrides)
	return replace(options, **overrides) if overrides else options


def resolve_decode_options(
	options: DecodeOptions | None, overrides: dict[str, Any]
) -> DecodeOptions:
	if options is None:
		return DecodeOptions(**overrides)
	return replace(options, **overrides) if overrides else options


class _Seen:
	__slots__: tuple[str, ...] = ("value", "aliases", "output")

	def __init__(self, value: Any) -> None:
		# Holding the value keeps its id() from being recycled mid-call.
		self.value = value
		self.aliases: list[JSONObject] = []
		self.output: Any = None


class EncodeContext:
	"""State of a single encode call."""

	__slots__: tuple[str, ...] = ("registry", "options", "_seen")

	registry: TypeRegistry
	options: EncodeOptions
	_seen: dict[int, _Seen]

	def __init__(self, registry: TypeRegistry, options: EncodeOptions) -> None:
		self.registry = registry
		self.options = options
		# Insertion order is first-visit order.
		self._seen = {}

	@property
	def preserve_references(self) -> bool:
		return self.options.preserve_references

	@property
	def unknown_mode(self) -> UnknownMode:
		return self.options.unknown_mode

	def alias_for(self, value: Any) -> JSONObject | None:
		"""Return an alias to a value visited earlier in this call.

		The alias id is only a placeholder until :meth:`finalize`.
		"""
		seen = self._seen.get(id(value))
		if seen is None:
			return None
		alias = create_ref_alias(REF_ID_BASE)
		seen.aliases.append(alias)
		return alias

	def register_new_seen(self, value: Any) -> None:
		self._seen[id(value)] = _Seen(value)

	def forget_seen(self, value: Any) -> None:
		seen = self._seen.get(id(value))
		if seen is not None and seen.value is value:
			del self._seen[id(value)]

	def register_encoded(self, value: Any, output: Any) -> None:
		seen = self._seen.get(id(value))
		if seen is not None and seen.value is value:
			seen.output = output

	def finalize(self) -> None:
		"""Number referenced values in first-visit order and stamp their ids."""
		next_id = REF_ID_BASE
		for seen in self._seen.values():
			if not seen.aliases:
				continue
			ref_id = next_id
			next_id += 1
			for alias in seen.aliases:
				alias[REF_KEY] = ref_id
			output = seen.output
			if isinstance(output, list):
				output.insert(0, array_ref_id_marker(ref_id))
			elif isinstance(output, dict):
				output[REF_ID_KEY] = ref_id


class DecodeContext:
	"""State of a single decode call."""

	__slots__: tuple[str, ...] = ("registry", "options", "resolved", "pending")

	registry: TypeRegistry
	options: DecodeOptions
	resolved: dict[int, Any]
	pending: dict[int, list[Path]]

	def __init__(self, registry: TypeRegistry, options: DecodeOptions) -> None:
		self.registry = registry
		self.options = options
		self.resolved = {}
		self.pending = {}

	def resolve(self, ref_id: int, value: Any) -> None:
		self.resolved[ref_id] = value

	def defer(self, ref_id: int, path: Path) -> PendingReference:
		self.pending.setdefault(ref_id, []).append(path)
		return PendingReference(ref_id, path)
