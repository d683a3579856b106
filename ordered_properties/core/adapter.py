"""
Bridge between the properties formats and an ordered store.

The adapter owns no entries itself. Parsers push every entry they read into an
``EntrySink``; writers pull entries from an ``EntrySource`` in its key order.
"""

from __future__ import annotations

import codecs
import io
from typing import TYPE_CHECKING, Protocol

from ordered_properties.core.comment_filter import DateSuppressingWriter
from ordered_properties.core.errors import PropertiesFormatError
from ordered_properties.core.text_format import parse_properties, write_properties
from ordered_properties.core.xml_format import (
  parse_properties_xml,
  write_properties_xml,
)
from ordered_properties.settings import Settings, settings as default_settings

if TYPE_CHECKING:
  from typing import BinaryIO, TextIO


class EntrySink(Protocol):
  """Receives entries from a parser, in document order."""

  def set(self, key: str, value: str) -> str | None: ...


class EntrySource(EntrySink, Protocol):
  """Supplies entries to a writer, in the order they should be written."""

  def keys_in_order(self) -> list[str]: ...

  def get(self, key: str) -> str | None: ...


class TextSink(Protocol):
  def write(self, text: str, /) -> object: ...


class _StagedEntries:
  """Collects parsed entries so a failed load leaves the target untouched."""

  def __init__(self) -> None:
    self.entries: dict[str, str] = {}

  def set(self, key: str, value: str) -> str | None:
    previous = self.entries.get(key)
    self.entries[key] = value
    return previous


class _EncodingSink:
  """Encodes text before handing it to a byte stream."""

  def __init__(self, stream: BinaryIO, encoding: str) -> None:
    self._stream = stream
    self._encoding = encoding

  def write(self, text: str) -> int:
    self._stream.write(text.encode(self._encoding))
    return len(text)


def _is_text_sink(sink: object) -> bool:
  """Whether ``sink.write`` takes str rather than bytes."""
  if isinstance(sink, (io.TextIOBase, codecs.StreamWriter)):
    return True
  # Wrappers such as SpooledTemporaryFile report the mode they were opened with
  mode = getattr(sink, "mode", None)
  return isinstance(mode, str) and "b" not in mode


def _flush(stream: object) -> None:
  flush = getattr(stream, "flush", None)
  if flush is not None:
    flush()


class PropertiesFormatAdapter:
  """
  Loads and stores an ``EntrySource`` in text or XML properties format.

  Order is established by first appearance while parsing and preserved while
  writing. The suppress-date option only affects ``store_text``.
  """

  def __init__(
    self,
    target: EntrySource,
    *,
    settings: Settings | None = None,
    suppress_date: bool = False,
  ) -> None:
    self.target = target
    self.settings = settings or default_settings
    self.suppress_date = suppress_date

  def _commit(self, staged: _StagedEntries) -> None:
    for key, value in staged.entries.items():
      self.target.set(key, value)

  def _ordered_entries(self) -> list[tuple[str, str]]:
    entries: list[tuple[str, str]] = []
    for key in self.target.keys_in_order():
      value = self.target.get(key)
      if value is not None:
        entries.append((key, value))
    return entries

  def load_text(self, source: BinaryIO | TextIO) -> None:
    """Parse text-format properties from ``source`` into the target.

    Raises:
        PropertiesFormatError: If the text is malformed or cannot be decoded
    """
    data = source.read()
    if isinstance(data, bytes):
      encoding = self.settings.text_encoding
      try:
        text = data.decode(encoding)
      except UnicodeDecodeError as e:
        raise PropertiesFormatError(
          f"Cannot decode input as {encoding}: {e.reason}",
          line=data[: e.start].count(b"\n") + 1,
        ) from e
    else:
      text = data

    staged = _StagedEntries()
    parse_properties(text, staged)
    self._commit(staged)

  def load_xml(self, source: BinaryIO) -> None:
    """Parse an XML properties document from ``source`` into the target.

    Raises:
        PropertiesFormatError: If the document is malformed or violates the
            properties schema
    """
    staged = _StagedEntries()
    parse_properties_xml(source, staged)
    self._commit(staged)

  def store_text(self, sink: BinaryIO | TextIO, comment: str | None = None) -> None:
    """Write the target in text format.

    Text sinks (text streams, codec writers and anything opened in a text
    mode) receive characters as they are; byte sinks receive text encoded
    with ``settings.text_encoding``, with characters outside the configured
    range written as ``\\uXXXX``.
    """
    encoding: str | None = None
    out: TextSink
    if _is_text_sink(sink):
      out = sink  # type: ignore[assignment]
    else:
      encoding = self.settings.text_encoding
      out = _EncodingSink(sink, encoding)  # type: ignore[arg-type]

    line_separator = self.settings.line_separator
    writer: TextSink = out
    if self.suppress_date:
      writer = DateSuppressingWriter(out, line_separator)

    try:
      write_properties(
        self._ordered_entries(),
        writer,
        comment,
        line_separator=line_separator,
        encoding=encoding,
        unicode_escape_threshold=self.settings.unicode_escape_threshold,
      )
    finally:
      if isinstance(writer, DateSuppressingWriter):
        writer.close()
    _flush(sink)

  def store_xml(
    self,
    sink: BinaryIO,
    comment: str | None = None,
    encoding: str | None = None,
  ) -> None:
    """Write the target as an XML properties document.

    Raises:
        LookupError: If ``encoding`` is not a known codec
    """
    encoding = encoding or self.settings.xml_encoding
    write_properties_xml(self._ordered_entries(), sink, comment, encoding)
    _flush(sink)
