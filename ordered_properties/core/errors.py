"""Exceptions raised while reading or writing properties."""

from __future__ import annotations


class PropertiesError(Exception):
  """Base class for all ordered-properties errors."""


class PropertiesFormatError(PropertiesError, ValueError):
  """Raised when a text or XML properties document is malformed.

  Args:
      message: Human-readable description of the problem
      line: 1-based line number where the problem was found, if known
      path: Element path for XML documents (e.g. ``/properties/entry[2]``)
  """

  def __init__(
    self,
    message: str,
    *,
    line: int | None = None,
    path: str | None = None,
  ) -> None:
    self.message = message
    self.line = line
    self.path = path
    super().__init__(self._describe())

  def _describe(self) -> str:
    where: list[str] = []
    if self.line is not None:
      where.append(f"line {self.line}")
    if self.path:
      where.append(self.path)
    if not where:
      return self.message
    return f"{self.message} ({', '.join(where)})"
