"""Unit tests for the oprops command line interface."""

from __future__ import annotations

from typing import TYPE_CHECKING

from typer.testing import CliRunner

from ordered_properties.cli.app import app
from tests.helpers import DATE_COMMENT

if TYPE_CHECKING:
  from pathlib import Path

runner = CliRunner()

SAMPLE = b"# settings\nzeta=26\nalpha = 1\nmiddle : caf\\u00e9\n"


def write_sample(tmp_path: Path) -> Path:
  path = tmp_path / "app.properties"
  path.write_bytes(SAMPLE)
  return path


class TestNormalize:
  def test_prints_entries_in_file_order(self, tmp_path: Path) -> None:
    result = runner.invoke(app, ["normalize", str(write_sample(tmp_path))])
    assert result.exit_code == 0
    assert result.stdout.splitlines() == ["zeta=26", "alpha=1", "middle=caf\\u00E9"]

  def test_keep_date(self, tmp_path: Path) -> None:
    result = runner.invoke(
      app, ["normalize", str(write_sample(tmp_path)), "--keep-date"]
    )
    assert result.exit_code == 0
    assert DATE_COMMENT.match(result.stdout.splitlines()[0])

  def test_output_file(self, tmp_path: Path) -> None:
    target = tmp_path / "out.properties"
    result = runner.invoke(
      app,
      ["normalize", str(write_sample(tmp_path)), "-o", str(target), "--comment", "x"],
    )
    assert result.exit_code == 0
    assert target.read_bytes().splitlines() == [
      b"#x",
      b"zeta=26",
      b"alpha=1",
      b"middle=caf\\u00E9",
    ]

  def test_malformed_input_exits_1(self, tmp_path: Path) -> None:
    path = tmp_path / "bad.properties"
    path.write_bytes(b"a=\\u12\n")
    result = runner.invoke(app, ["normalize", str(path)])
    assert result.exit_code == 1


class TestXmlConversion:
  def test_to_xml_and_back(self, tmp_path: Path) -> None:
    xml_path = tmp_path / "app.xml"
    result = runner.invoke(
      app, ["to-xml", str(write_sample(tmp_path)), "-o", str(xml_path)]
    )
    assert result.exit_code == 0
    document = xml_path.read_text(encoding="utf-8")
    assert document.index('key="zeta"') < document.index('key="alpha"')
    assert '<entry key="middle">café</entry>' in document

    result = runner.invoke(app, ["from-xml", str(xml_path)])
    assert result.exit_code == 0
    assert result.stdout.splitlines() == ["zeta=26", "alpha=1", "middle=caf\\u00E9"]

  def test_to_xml_unknown_encoding(self, tmp_path: Path) -> None:
    result = runner.invoke(
      app, ["to-xml", str(write_sample(tmp_path)), "--encoding", "no-such-codec"]
    )
    assert result.exit_code == 1


class TestQueries:
  def test_get(self, tmp_path: Path) -> None:
    result = runner.invoke(app, ["get", str(write_sample(tmp_path)), "middle"])
    assert result.exit_code == 0
    assert result.stdout == "café\n"

  def test_get_missing(self, tmp_path: Path) -> None:
    result = runner.invoke(app, ["get", str(write_sample(tmp_path)), "nope"])
    assert result.exit_code == 1

  def test_get_default(self, tmp_path: Path) -> None:
    result = runner.invoke(
      app, ["get", str(write_sample(tmp_path)), "nope", "--default", "fallback"]
    )
    assert result.exit_code == 0
    assert result.stdout == "fallback\n"

  def test_keys(self, tmp_path: Path) -> None:
    result = runner.invoke(app, ["keys", str(write_sample(tmp_path))])
    assert result.exit_code == 0
    assert result.stdout.splitlines() == ["zeta", "alpha", "middle"]


class TestSet:
  def test_update_keeps_position(self, tmp_path: Path) -> None:
    path = write_sample(tmp_path)
    result = runner.invoke(app, ["set", str(path), "zeta", "99"])
    assert result.exit_code == 0
    assert path.read_bytes().splitlines() == [
      b"zeta=99",
      b"alpha=1",
      b"middle=caf\\u00E9",
    ]

  def test_new_key_appended(self, tmp_path: Path) -> None:
    path = write_sample(tmp_path)
    result = runner.invoke(app, ["set", str(path), "new key", "a=b"])
    assert result.exit_code == 0
    assert path.read_bytes().splitlines()[-1] == b"new\\ key=a\\=b"
