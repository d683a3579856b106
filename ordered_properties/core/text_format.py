"""
Line-oriented properties grammar.

Parses and writes the classic ``key=value`` properties format: ``#``/``!``
comments, ``=``/``:``/whitespace separators, backslash line continuations and
``\\t \\n \\r \\f \\uXXXX`` escapes. Parsed entries are handed to an
``EntrySink`` one at a time in file order; the parser keeps no state of its own.
"""

from __future__ import annotations

import re
import string
from datetime import datetime
from functools import lru_cache
from typing import TYPE_CHECKING

from ordered_properties.core.errors import PropertiesFormatError

if TYPE_CHECKING:
  from collections.abc import Callable, Iterable, Iterator

  from ordered_properties.core.adapter import EntrySink, TextSink

COMMENT_CHARS = "#!"
SEPARATOR_CHARS = "=:"
WHITESPACE_CHARS = " \t\f"

# e.g. "Mon Oct 19 12:00:00 UTC 2026"
DATE_COMMENT_FORMAT = "%a %b %d %H:%M:%S %Z %Y"

_LINE_BREAK = re.compile(r"\r\n|\r|\n")

_LOAD_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_STORE_ESCAPES = {
  "\t": "\\t",
  "\n": "\\n",
  "\r": "\\r",
  "\f": "\\f",
  "\\": "\\\\",
  "=": "\\=",
  ":": "\\:",
  "#": "\\#",
  "!": "\\!",
}


# --- Reading ---


def _physical_lines(text: str) -> list[str]:
  lines = _LINE_BREAK.split(text)
  # A trailing terminator does not start another line
  if lines and lines[-1] == "":
    lines.pop()
  return lines


def _ends_with_continuation(line: str) -> bool:
  trailing = len(line) - len(line.rstrip("\\"))
  return trailing % 2 == 1


def iter_logical_lines(text: str) -> Iterator[tuple[int, str]]:
  """Yield (line number, logical line) for every non-comment, non-blank line.

  Continuation lines are joined with their leading whitespace removed. The
  line number is that of the first physical line.

  Raises:
      PropertiesFormatError: If the input ends inside a line continuation
  """
  lines = _physical_lines(text)
  index = 0
  while index < len(lines):
    line_no = index + 1
    line = lines[index].lstrip(WHITESPACE_CHARS)
    index += 1
    if not line or line[0] in COMMENT_CHARS:
      continue

    parts: list[str] = []
    while _ends_with_continuation(line):
      parts.append(line[:-1])
      if index >= len(lines):
        raise PropertiesFormatError(
          "Line continuation at end of input", line=index
        )
      line = lines[index].lstrip(WHITESPACE_CHARS)
      index += 1
    parts.append(line)
    yield line_no, "".join(parts)


def split_entry(line: str) -> tuple[str, str]:
  """Split a logical line into its still-escaped key and value.

  The key ends at the first unescaped ``=``, ``:`` or whitespace. Whitespace
  after the key is skipped, and so is one ``=`` or ``:`` following it.
  """
  length = len(line)
  key_end = length
  value_start = length
  has_separator = False
  preceding_backslash = False

  for i, char in enumerate(line):
    if not preceding_backslash:
      if char in SEPARATOR_CHARS:
        key_end, value_start, has_separator = i, i + 1, True
        break
      if char in WHITESPACE_CHARS:
        key_end, value_start = i, i + 1
        break
    preceding_backslash = char == "\\" and not preceding_backslash

  while value_start < length:
    char = line[value_start]
    if char not in WHITESPACE_CHARS:
      if has_separator or char not in SEPARATOR_CHARS:
        break
      has_separator = True
    value_start += 1

  return line[:key_end], line[value_start:]


def unescape(raw: str, line_no: int | None = None) -> str:
  """Decode backslash escapes.

  ``\\uXXXX`` sequences that form a UTF-16 surrogate pair are combined into a
  single code point. Unknown escapes such as ``\\=`` decode to the escaped
  character.

  Raises:
      PropertiesFormatError: If a ``\\uXXXX`` sequence is malformed
  """
  if "\\" not in raw:
    return raw

  out: list[str] = []
  has_surrogates = False
  i = 0
  length = len(raw)
  while i < length:
    char = raw[i]
    i += 1
    if char != "\\":
      out.append(char)
      continue
    if i >= length:
      raise PropertiesFormatError("Dangling escape character", line=line_no)
    char = raw[i]
    i += 1
    if char == "u":
      digits = raw[i : i + 4]
      if len(digits) != 4 or any(d not in string.hexdigits for d in digits):
        raise PropertiesFormatError("Malformed \\uxxxx encoding", line=line_no)
      code = int(digits, 16)
      has_surrogates = has_surrogates or 0xD800 <= code <= 0xDFFF
      out.append(chr(code))
      i += 4
    else:
      out.append(_LOAD_ESCAPES.get(char, char))

  result = "".join(out)
  if has_surrogates:
    result = result.encode("utf-16-le", "surrogatepass").decode(
      "utf-16-le", "surrogatepass"
    )
  return result


def parse_properties(text: str, sink: EntrySink) -> int:
  """Parse properties text, forwarding each entry to ``sink`` in file order.

  Args:
      text: Complete document text
      sink: Receives ``set(key, value)`` for every entry

  Returns:
      Number of entries read (duplicates included)

  Raises:
      PropertiesFormatError: On a malformed escape or dangling continuation
  """
  count = 0
  for line_no, line in iter_logical_lines(text):
    raw_key, raw_value = split_entry(line)
    sink.set(unescape(raw_key, line_no), unescape(raw_value, line_no))
    count += 1
  return count


# --- Writing ---


@lru_cache(maxsize=1024)
def _is_encodable(char: str, encoding: str) -> bool:
  try:
    char.encode(encoding)
  except UnicodeEncodeError:
    return False
  return True


def unicode_escape(char: str) -> str:
  """Return ``\\uXXXX`` escapes for ``char``, using a surrogate pair if needed."""
  units = char.encode("utf-16-be", "surrogatepass")
  return "".join(
    f"\\u{int.from_bytes(units[i : i + 2], 'big'):04X}"
    for i in range(0, len(units), 2)
  )


def escape(
  text: str,
  *,
  is_key: bool,
  needs_unicode_escape: Callable[[str], bool] | None = None,
) -> str:
  """Escape a key or value for the text format.

  Spaces are escaped everywhere in keys but only in leading position in
  values.
  """
  out: list[str] = []
  for i, char in enumerate(text):
    if char == " ":
      out.append("\\ " if is_key or i == 0 else " ")
    elif char in _STORE_ESCAPES:
      out.append(_STORE_ESCAPES[char])
    elif needs_unicode_escape is not None and needs_unicode_escape(char):
      out.append(unicode_escape(char))
    else:
      out.append(char)
  return "".join(out)


def format_comment(
  comments: str,
  line_separator: str,
  needs_unicode_escape: Callable[[str], bool] | None = None,
) -> str:
  """Render a comment block, one ``#`` line per line of ``comments``."""

  def needs_escape(char: str) -> bool:
    if ord(char) > 0xFF:
      return True
    return needs_unicode_escape is not None and needs_unicode_escape(char)

  lines: list[str] = []
  for i, part in enumerate(_LINE_BREAK.split(comments)):
    rendered = "".join(unicode_escape(c) if needs_escape(c) else c for c in part)
    if i == 0 or not rendered or rendered[0] not in COMMENT_CHARS:
      rendered = "#" + rendered
    lines.append(rendered + line_separator)
  return "".join(lines)


def date_comment(now: datetime | None = None) -> str:
  """Return the text of the timestamp comment, without the leading ``#``."""
  moment = now or datetime.now().astimezone()
  return moment.strftime(DATE_COMMENT_FORMAT)


def _escape_predicates(
  encoding: str, unicode_escape_threshold: int
) -> tuple[Callable[[str], bool], Callable[[str], bool]]:
  """Build the entry and comment escape tests for a byte sink."""

  def entry_needs_escape(char: str) -> bool:
    code = ord(char)
    return (
      code < 0x20
      or code > unicode_escape_threshold
      or not _is_encodable(char, encoding)
    )

  def comment_needs_escape(char: str) -> bool:
    return not _is_encodable(char, encoding)

  return entry_needs_escape, comment_needs_escape


def write_properties(
  entries: Iterable[tuple[str, str]],
  out: TextSink,
  comments: str | None = None,
  *,
  line_separator: str = "\n",
  encoding: str | None = None,
  unicode_escape_threshold: int = 0x7E,
  now: datetime | None = None,
) -> int:
  """Write entries in text format, preceded by the comment block.

  The comment block is the optional caller comment followed by the date
  comment, which is always the last comment line.

  Args:
      entries: (key, value) pairs in output order
      out: Text sink
      comments: Optional leading comment
      line_separator: Terminator written after every line
      encoding: Target byte encoding. When set, control characters, characters
          above ``unicode_escape_threshold`` and characters the encoding
          cannot represent are written as ``\\uXXXX``.
      unicode_escape_threshold: Highest code point written unescaped
      now: Timestamp for the date comment; defaults to the current time

  Returns:
      Number of entries written
  """
  needs_unicode_escape: Callable[[str], bool] | None = None
  comment_escape: Callable[[str], bool] | None = None
  if encoding is not None:
    needs_unicode_escape, comment_escape = _escape_predicates(
      encoding, unicode_escape_threshold
    )

  if comments is not None:
    out.write(format_comment(comments, line_separator, comment_escape))
  out.write("#" + date_comment(now) + line_separator)

  count = 0
  for key, value in entries:
    out.write(
      escape(key, is_key=True, needs_unicode_escape=needs_unicode_escape)
      + "="
      + escape(value, is_key=False, needs_unicode_escape=needs_unicode_escape)
      + line_separator
    )
    count += 1
  return count
