"""Writer that drops the date comment from text properties output."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from ordered_properties.core.text_format import COMMENT_CHARS

if TYPE_CHECKING:
  from ordered_properties.core.adapter import TextSink


class DateSuppressingWriter:
  """
  Passes text through to ``out`` except for the last leading comment line.

  The properties writer emits its comments as a contiguous block before the
  first entry, with the date comment last. This writer holds back each
  complete comment line until the next one is complete, so the final line of
  the block is never written. Input is processed character by character, so
  the output does not depend on how callers split their ``write`` calls.
  Lines starting with ``!`` count as comment lines, the same as ``#`` lines.
  """

  def __init__(self, out: TextSink, line_separator: str = os.linesep) -> None:
    self._out = out
    self._line_separator = line_separator
    self._current = ""
    self._previous: str | None = None
    self._in_comment_block = True

  def write(self, chunk: str) -> int:
    if not self._in_comment_block:
      self._out.write(chunk)
      return len(chunk)

    for i, char in enumerate(chunk):
      if not self._current and char not in COMMENT_CHARS:
        # First non-comment line: the held line is the date, drop it
        self._in_comment_block = False
        self._discard()
        self._out.write(chunk[i:])
        break

      self._current += char
      if self._current.endswith(self._line_separator):
        if self._previous is not None:
          self._out.write(self._previous)
        self._previous = self._current
        self._current = ""
    return len(chunk)

  def close(self) -> None:
    """Drop anything still held back. The wrapped sink stays open."""
    self._discard()
    self._in_comment_block = False

  def _discard(self) -> None:
    self._previous = None
    self._current = ""
