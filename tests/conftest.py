"""Shared fixtures for ordered-properties tests."""

from __future__ import annotations

import pytest

from ordered_properties.settings import Settings


@pytest.fixture
def lf_settings() -> Settings:
  """Settings that write ``\\n`` line endings regardless of platform."""
  return Settings(line_separator="\n")
