"""Starlette helpers for sending and receiving codables documents."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from starlette.background import BackgroundTask
from starlette.requests import Request
from starlette.responses import JSONResponse

from codables.coder import Coder
from codables.coder import coder as default_coder


class CodableResponse(JSONResponse):
	"""JSON response whose body is the codables wire form of ``content``."""

	coder: Coder

	def __init__(
		self,
		content: Any,
		status_code: int = 200,
		headers: Mapping[str, str] | None = None,
		media_type: str | None = None,
		background: BackgroundTask | None = None,
		*,
		coder: Coder | None = None,
	) -> None:
		# `render` runs inside the base constructor.
		self.coder = coder or default_coder
		super().__init__(content, status_code, headers, media_type, background)

	def render(self, content: Any) -> bytes:
		return self.coder.stringify(content).encode("utf-8")


async def read_codable(request: Request, coder: Coder | None = None) -> Any:
	body = await request.body()
	return (coder or default_coder).parse(body)
