"""
Command-line interface for codables.
Inspect wire documents and produce them from Python literals.
"""
# typer relies on function calls used as default values
# pyright: reportCallInDefaultInitializer=false

from __future__ import annotations

import ast
import json
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.pretty import Pretty
from rich.table import Table

from codables.coder import coder
from codables.errors import CodablesError

cli = typer.Typer(
	name="codables",
	help="codables - encode Python value graphs to JSON and back",
	no_args_is_help=True,
)


def _read_source(source: str) -> str:
	if source == "-":
		return sys.stdin.read()
	path = Path(source)
	if not path.is_file():
		raise FileNotFoundError(f"File not found: {path}")
	return path.read_text()


@cli.command("decode")
def decode(
	source: str = typer.Argument("-", help="Wire document to decode, '-' for stdin"),
	strict: bool = typer.Option(
		False, "--strict", help="Fail on references to ids that never appear"
	),
):
	"""Decode a wire document and pretty-print the resulting value."""
	console = Console()
	try:
		value = coder.parse(_read_source(source), strict_references=strict)
	except (OSError, json.JSONDecodeError, CodablesError) as exc:
		console.print(f"❌ {exc}", markup=False)
		raise typer.Exit(1) from None
	console.print(Pretty(value))


@cli.command("encode")
def encode(
	source: str = typer.Argument("-", help="Python literal to encode, '-' for stdin"),
	indent: int = typer.Option(0, "--indent", help="Indent the JSON output, 0 for compact"),
	references: bool = typer.Option(
		True,
		"--references/--no-references",
		help="Emit aliases for values seen more than once",
	),
):
	"""Encode a Python literal (as accepted by ast.literal_eval) to its wire form."""
	console = Console()
	try:
		value = ast.literal_eval(_read_source(source).strip())
		output = coder.stringify(value, indent or None, preserve_references=references)
	except (OSError, ValueError, SyntaxError, CodablesError) as exc:
		console.print(f"❌ {exc}", markup=False)
		raise typer.Exit(1) from None
	typer.echo(output)


@cli.command("types")
def types():
	"""List the codable types of the default coder, in matching order."""
	table = Table(title="Codable types")
	table.add_column("Name", style="cyan")
	table.add_column("Priority", justify="right")
	table.add_column("Flat")
	table.add_column("Classes")
	for codable in coder.registry:
		table.add_row(
			codable.name,
			str(codable.priority),
			"yes" if codable.is_flat else "no",
			", ".join(cls.__qualname__ for cls in codable.classes),
		)
	Console().print(table)


def main():
	"""Main CLI entry point."""
	try:
		cli()
	except Exception:
		console = Console()
		console.print_exception()
		raise typer.Exit(1) from None


if __name__ == "__main__":
	main()
