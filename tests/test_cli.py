import json
from pathlib import Path

from codables.cli import cli
from typer.testing import CliRunner

runner = CliRunner()


def test_encode_from_stdin():
	result = runner.invoke(cli, ["encode", "-"], input="{1, 2}\n")
	assert result.exit_code == 0, result.output
	assert result.output.strip() == '{"$$Set":[1,2]}'


def test_encode_from_file_with_indent(tmp_path: Path):
	source = tmp_path / "value.py"
	source.write_text("{'a': (1, 2), 'b': '$$NaN'}")
	result = runner.invoke(cli, ["encode", str(source), "--indent", "2"])
	assert result.exit_code == 0, result.output
	assert json.loads(result.output) == {"a": [1, 2], "b": "~$$NaN"}
	assert "\n  " in result.output


def test_encode_rejects_non_literals():
	result = runner.invoke(cli, ["encode", "-"], input="open('x')")
	assert result.exit_code == 1


def test_decode_pretty_prints(tmp_path: Path):
	source = tmp_path / "doc.json"
	source.write_text('{"items": {"$$Set": [1, 2]}, "n": "$$-Infinity"}')
	result = runner.invoke(cli, ["decode", str(source)])
	assert result.exit_code == 0, result.output
	assert "{1, 2}" in result.output
	assert "-inf" in result.output


def test_decode_invalid_json():
	result = runner.invoke(cli, ["decode", "-"], input="{not json")
	assert result.exit_code == 1


def test_decode_missing_file(tmp_path: Path):
	result = runner.invoke(cli, ["decode", str(tmp_path / "missing.json")])
	assert result.exit_code == 1
	assert "File not found" in result.output


def test_decode_strict_references():
	document = '{"a": {"$$ref": 3}}'
	assert runner.invoke(cli, ["decode", "-"], input=document).exit_code == 0
	result = runner.invoke(cli, ["decode", "-", "--strict"], input=document)
	assert result.exit_code == 1
	assert "Reference 3" in result.output


def test_types_lists_builtins():
	result = runner.invoke(cli, ["types"])
	assert result.exit_code == 0, result.output
	for name in ["Date", "Set", "Map", "Error", "BigInt", "URL"]:
		assert name in result.output
