from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable
from typing import Any, TypeAlias

from codables.builtin import builtin_types
from codables.codable_type import CodableType, codable_type
from codables.context import (
	DecodeContext,
	DecodeOptions,
	EncodeContext,
	EncodeOptions,
	resolve_decode_options,
	resolve_encode_options,
)
from codables.decode import decode_input
from codables.encode import perform_encode
from codables.errors import (
	FrozenCoderError,
	ReaderError,
	UnregisteredClassError,
	UnresolvedReferenceError,
)
from codables.format import JSONValue, is_tag_key, tag_name
from codables.readers import (
	ROOT_PATH,
	Accessor,
	Path,
	PathCursor,
	default_reader,
	format_path,
)
from codables.registry import TypeRegistry

logger = logging.getLogger(__name__)

CodableTypeOrClass: TypeAlias = CodableType | type

CODABLE_CLASS_ATTRIBUTE = "__codable_type__"


def get_codable_class_type(cls: type) -> CodableType | None:
	codable = getattr(cls, CODABLE_CLASS_ATTRIBUTE, None)
	if isinstance(codable, CodableType):
		return codable
	return None


class Coder:
	"""Encodes value graphs to JSON-compatible trees and back.

	Every coder starts with the built-in types. Extra types are registered at
	setup time, either as :class:`CodableType` instances or as classes that
	carry one in ``__codable_type__``.
	"""

	__slots__: tuple[str, ...] = ("registry",)

	def __init__(self, types: Iterable[CodableTypeOrClass] = ()) -> None:
		self.registry = TypeRegistry(builtin_types())
		self.register(*types)

	@property
	def is_default(self) -> bool:
		return self is coder

	def get_type_by_name(self, name: str) -> CodableType | None:
		return self.registry.get(name)

	def get_matching_type(self, value: Any) -> CodableType | None:
		return self.registry.match(value)

	def register(self, *types_or_classes: CodableTypeOrClass) -> None:
		if not types_or_classes:
			return
		if self.is_default:
			raise FrozenCoderError()

		types: list[CodableType] = []
		for item in types_or_classes:
			if isinstance(item, CodableType):
				types.append(item)
				continue
			codable = get_codable_class_type(item)
			if codable is None:
				raise UnregisteredClassError(item)
			types.append(codable)

		self.registry.register(*types)

	def add_type(
		self,
		name: str,
		can_encode: Callable[[Any], bool],
		encode: Callable[..., Any],
		decode: Callable[[Any], Any],
		**options: Any,
	) -> CodableType:
		codable = codable_type(name, can_encode, encode, decode, **options)
		self.register(codable)
		return codable

	def encode(
		self, value: Any, options: EncodeOptions | None = None, **overrides: Any
	) -> JSONValue:
		context = EncodeContext(self.registry, resolve_encode_options(options, overrides))
		result = perform_encode(value, context)
		context.finalize()
		return result

	def decode(
		self, value: JSONValue, options: DecodeOptions | None = None, **overrides: Any
	) -> Any:
		context = DecodeContext(self.registry, resolve_decode_options(options, overrides))
		result = decode_input(value, context, ROOT_PATH)
		self._resolve_pending_references(result, context)
		return result

	def stringify(
		self,
		value: Any,
		indent: int | str | None = None,
		options: EncodeOptions | None = None,
		**overrides: Any,
	) -> str:
		encoded = self.encode(value, options, **overrides)
		if indent is None:
			return json.dumps(encoded, separators=(",", ":"))
		return json.dumps(encoded, indent=indent)

	def parse(
		self,
		text: str | bytes,
		options: DecodeOptions | None = None,
		**overrides: Any,
	) -> Any:
		return self.decode(json.loads(text), options, **overrides)

	def clone(self, value: Any, options: EncodeOptions | None = None, **overrides: Any) -> Any:
		return self.decode(self.encode(value, options, **overrides))

	def _resolve_pending_references(self, output: Any, context: DecodeContext) -> None:
		for ref_id, paths in context.pending.items():
			if ref_id not in context.resolved:
				message = (
					f"Reference {ref_id} points to no decoded value "
					+ f"(used at {', '.join(format_path(p) for p in paths)})"
				)
				if context.options.strict_references:
					raise UnresolvedReferenceError(ref_id, paths[0], message)
				logger.warning(message)
				continue

			target = context.resolved[ref_id]
			for path in paths:
				if not path:
					logger.warning("Cannot patch reference %s at the root", ref_id)
					continue
				self._update_value_in_output(output, path, target)

	def _update_value_in_output(self, root: Any, path: Path, value: Any) -> None:
		cursor = PathCursor(path)
		current = root
		while True:
			accessor = self._accessor_for(current, cursor)
			if cursor.done:
				accessor.set(value)
				return
			current = accessor.get()

	def _accessor_for(self, node: Any, cursor: PathCursor) -> Accessor:
		segment = cursor.peek()
		if not (isinstance(segment, str) and is_tag_key(segment)):
			return default_reader(node, cursor)

		name = tag_name(segment)
		codable = self.get_matching_type(node)
		if codable is None or codable.name != name:
			if isinstance(node, dict) and segment in node:
				# A tag nobody could decode, kept as a plain record.
				return default_reader(node, cursor)
			codable = self.get_type_by_name(name)

		# Entering the payload of an extended kind.
		cursor.take()
		if codable is None:
			raise ReaderError(f"Unknown type {name!r} in {format_path(cursor.path)}")
		if cursor.done:
			raise ReaderError(f"Path {format_path(cursor.path)} ends at a type boundary")

		reader = codable.reader or default_reader
		return reader(node, cursor)


def create_coder(types: Iterable[CodableTypeOrClass] = ()) -> Coder:
	return Coder(types)


coder = create_coder()


def encode(value: Any, options: EncodeOptions | None = None, **overrides: Any) -> JSONValue:
	return coder.encode(value, options, **overrides)


def decode(value: JSONValue, options: DecodeOptions | None = None, **overrides: Any) -> Any:
	return coder.decode(value, options, **overrides)


def stringify(value: Any, indent: int | str | None = None, **overrides: Any) -> str:
	return coder.stringify(value, indent, **overrides)


def parse(text: str | bytes, **overrides: Any) -> Any:
	return coder.parse(text, **overrides)


def clone(value: Any, **overrides: Any) -> Any:
	return coder.clone(value, **overrides)
