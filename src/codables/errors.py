from __future__ import annotations

from typing import Any


class CodablesError(Exception):
	"""Base class for every error raised by codables."""


class RegistrationError(CodablesError):
	"""Raised when a type cannot be registered on a coder."""


class TypeNameConflictError(RegistrationError):
	"""Raised when a different type is already registered under the same name."""

	name: str

	def __init__(self, name: str) -> None:
		super().__init__(f'Other codable type with name "{name}" already registered')
		self.name = name


class FrozenCoderError(RegistrationError):
	"""Raised when registering types on the shared default coder."""

	def __init__(self) -> None:
		super().__init__(
			"Cannot register types on the default coder. Create a custom coder "
			+ "instance using `Coder()` and register types on that instance."
		)


class UnregisteredClassError(RegistrationError):
	"""Raised when registering a class that carries no codable type."""

	def __init__(self, cls: type) -> None:
		super().__init__(f'Codable class "{cls.__qualname__}" not registered')
		self.cls = cls


class EncodeError(CodablesError):
	pass


class UnknownValueError(EncodeError):
	"""Raised in ``unknown_mode="throw"`` when no type matches a value."""

	value: Any

	def __init__(self, value: Any) -> None:
		super().__init__(
			f"Not able to encode {type(value).__qualname__!r} - no matching type found"
		)
		self.value = value


class DecodeError(CodablesError):
	"""Raised when a wire document violates the format."""


class ReaderError(DecodeError):
	"""Raised when a reference path cannot be followed in the decoded output."""


class UnresolvedReferenceError(DecodeError):
	"""Raised in strict mode when an alias points at an id that never appeared."""

	ref_id: int
	path: tuple[str | int, ...]

	def __init__(self, ref_id: int, path: tuple[str | int, ...], message: str) -> None:
		super().__init__(message)
		self.ref_id = ref_id
		self.path = path
