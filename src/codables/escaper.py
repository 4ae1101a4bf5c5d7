from __future__ import annotations

import re

ESCAPE_MARKER = "~"


def _strip_start_anchors(pattern: str) -> str:
	"""Drop ``^`` anchors so matching can start after leading markers.

	Outside a character class an unescaped ``^`` is always an anchor. Inside
	one it is either the negation or a literal, and is kept.
	"""
	result: list[str] = []
	in_class = False
	escaped = False
	class_start = 0
	for index, char in enumerate(pattern):
		if escaped:
			escaped = False
		elif char == "\\":
			escaped = True
		elif in_class:
			# `]` right after `[` or `[^` is a literal member.
			if char == "]" and index > class_start:
				in_class = False
		elif char == "[":
			in_class = True
			class_start = index + 1
			if pattern.startswith("^", class_start):
				class_start += 1
		elif char == "^":
			continue
		result.append(char)
	return "".join(result)


class Escaper:
	"""Reversible escaping for strings that look like reserved wire syntax.

	A string is *maybe escaped* when it is the hazard pattern preceded by zero
	or more ``~`` markers, and *already escaped* when there is at least one.
	``escape`` adds exactly one marker to maybe-escaped strings and
	``unescape`` removes exactly one from already-escaped ones, so the marker
	count tracks the escape depth and ``unescape(escape(s)) == s`` for any
	string.
	"""

	__slots__: tuple[str, ...] = (
		"pattern",
		"maybe_escaped_pattern",
		"already_escaped_pattern",
	)

	pattern: re.Pattern[str]
	maybe_escaped_pattern: re.Pattern[str]
	already_escaped_pattern: re.Pattern[str]

	def __init__(self, pattern: str | re.Pattern[str], flags: int = 0) -> None:
		if isinstance(pattern, re.Pattern):
			flags |= pattern.flags
			pattern = pattern.pattern
		source = _strip_start_anchors(pattern)
		marker = re.escape(ESCAPE_MARKER)
		self.pattern = re.compile(f"(?:{source})", flags)
		self.maybe_escaped_pattern = re.compile(f"{marker}*(?:{source})", flags)
		self.already_escaped_pattern = re.compile(f"{marker}+(?:{source})", flags)

	def is_matching(self, value: str) -> bool:
		return self.pattern.fullmatch(value) is not None

	def is_maybe_escaped(self, value: str) -> bool:
		return self.maybe_escaped_pattern.fullmatch(value) is not None

	def is_already_escaped(self, value: str) -> bool:
		return self.already_escaped_pattern.fullmatch(value) is not None

	def escape(self, value: str) -> str:
		if not self.is_maybe_escaped(value):
			return value
		return ESCAPE_MARKER + value

	def unescape(self, value: str) -> str:
		if self.is_already_escaped(value):
			return value[1:]
		return value

	def __repr__(self) -> str:
		return f"Escaper({self.pattern.pattern!r})"


def create_escaper(pattern: str | re.Pattern[str], flags: int = 0) -> Escaper:
	return Escaper(pattern, flags)
