"""Unit tests for Settings."""

from __future__ import annotations

import os

import pytest
from pydantic import ValidationError

from ordered_properties.settings import Settings


class TestSettings:
  """Defaults, environment overrides and validation."""

  def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
      if name.startswith("ORDERED_PROPERTIES_"):
        monkeypatch.delenv(name)
    settings = Settings(_env_file=None)
    assert settings.log_level == "INFO"
    assert settings.text_encoding == "iso-8859-1"
    assert settings.xml_encoding == "UTF-8"
    assert settings.line_separator == os.linesep
    assert settings.unicode_escape_threshold == 0x7E

  def test_environment_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ORDERED_PROPERTIES_TEXT_ENCODING", "utf-8")
    monkeypatch.setenv("ORDERED_PROPERTIES_UNICODE_ESCAPE_THRESHOLD", "255")
    settings = Settings(_env_file=None)
    assert settings.text_encoding == "utf-8"
    assert settings.unicode_escape_threshold == 255

  def test_log_level_normalized(self) -> None:
    assert Settings(log_level="debug").log_level == "DEBUG"

  @pytest.mark.parametrize(
    "overrides",
    [
      {"text_encoding": "no-such-codec"},
      {"xml_encoding": "no-such-codec"},
      {"line_separator": "\n\n"},
      {"unicode_escape_threshold": 0x20},
      {"log_level": "LOUD"},
    ],
  )
  def test_invalid_values(self, overrides: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
      Settings(**overrides)
