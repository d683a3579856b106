"""XML properties documents.

Documents follow the standard properties DTD::

    <!ELEMENT properties ( comment?, entry* ) >
    <!ELEMENT comment (#PCDATA) >
    <!ELEMENT entry (#PCDATA) >
    <!ATTLIST entry key CDATA #REQUIRED>
"""

from __future__ import annotations

import codecs
import io
import xml.sax
from typing import TYPE_CHECKING
from xml.sax.handler import ContentHandler, property_lexical_handler
from xml.sax.saxutils import escape

from ordered_properties.core.errors import PropertiesFormatError

if TYPE_CHECKING:
  from collections.abc import Iterable
  from typing import BinaryIO
  from xml.sax.xmlreader import AttributesImpl, Locator

  from ordered_properties.core.adapter import EntrySink

PROPERTIES_DTD_URI = "http://java.sun.com/dtd/properties.dtd"

ROOT_ELEMENT = "properties"
COMMENT_ELEMENT = "comment"
ENTRY_ELEMENT = "entry"

# Characters XML parsers normalize away unless written as references
_TEXT_ENTITIES = {"\r": "&#13;"}
_ATTR_ENTITIES = {'"': "&quot;", "\t": "&#9;", "\n": "&#10;", "\r": "&#13;"}


class PropertiesHandler(ContentHandler):
  """SAX handler that validates the document and forwards each entry."""

  def __init__(self, sink: EntrySink) -> None:
    super().__init__()
    self.sink = sink
    self.entries = 0
    self._locator: Locator | None = None
    self._path: list[str] = []
    self._child_counts: list[dict[str, int]] = [{}]
    self._text: list[str] = []
    self._entry_key: str | None = None
    self._seen_comment = False

  def _fail(self, message: str) -> PropertiesFormatError:
    line = self._locator.getLineNumber() if self._locator else None
    path = "/" + "/".join(self._path) if self._path else None
    return PropertiesFormatError(message, line=line, path=path)

  def setDocumentLocator(self, locator: Locator) -> None:  # noqa: N802
    self._locator = locator

  # Lexical handler callbacks

  def startDTD(  # noqa: N802
    self, name: str, public_id: str | None, system_id: str | None
  ) -> None:
    if name != ROOT_ELEMENT:
      raise self._fail(f"Document type must be '{ROOT_ELEMENT}', got '{name}'")
    if system_id and system_id != PROPERTIES_DTD_URI:
      raise self._fail(f"Invalid system identifier: {system_id}")

  def endDTD(self) -> None:  # noqa: N802
    pass

  def comment(self, content: str) -> None:
    pass

  def startCDATA(self) -> None:  # noqa: N802
    pass

  def endCDATA(self) -> None:  # noqa: N802
    pass

  # Content handler callbacks

  def startElement(self, name: str, attrs: AttributesImpl) -> None:  # noqa: N802
    counts = self._child_counts[-1]
    counts[name] = counts.get(name, 0) + 1
    depth = len(self._path)
    self._path.append(f"{name}[{counts[name]}]" if depth else name)
    self._child_counts.append({})

    if depth == 0:
      if name != ROOT_ELEMENT:
        raise self._fail(f"Root element must be <{ROOT_ELEMENT}>, got <{name}>")
    elif depth == 1:
      if name == COMMENT_ELEMENT:
        if self._seen_comment or self.entries:
          raise self._fail("<comment> may only appear once, before any <entry>")
        self._seen_comment = True
      elif name == ENTRY_ELEMENT:
        key = attrs.get("key")
        if key is None:
          raise self._fail("<entry> requires a 'key' attribute")
        self._entry_key = key
      else:
        raise self._fail(f"Unexpected element <{name}> in <{ROOT_ELEMENT}>")
    else:
      raise self._fail(f"Element <{name}> is not allowed here")
    self._text = []

  def characters(self, content: str) -> None:
    if len(self._path) == 2:
      self._text.append(content)

  def endElement(self, name: str) -> None:  # noqa: N802
    if name == ENTRY_ELEMENT and self._entry_key is not None:
      self.sink.set(self._entry_key, "".join(self._text))
      self.entries += 1
      self._entry_key = None
    self._path.pop()
    self._child_counts.pop()


def parse_properties_xml(source: BinaryIO, sink: EntrySink) -> int:
  """Parse an XML properties document, forwarding entries to ``sink``.

  The stream is read to the end but left open.

  Args:
      source: Byte stream holding the document
      sink: Receives ``set(key, value)`` for every entry, in document order

  Returns:
      Number of entries read

  Raises:
      PropertiesFormatError: If the XML is malformed or breaks the schema
  """
  handler = PropertiesHandler(sink)
  parser = xml.sax.make_parser()
  parser.setContentHandler(handler)
  parser.setProperty(property_lexical_handler, handler)
  data = source.read()
  try:
    # expat closes the stream it parses, so hand it a private copy
    parser.parse(io.StringIO(data) if isinstance(data, str) else io.BytesIO(data))
  except xml.sax.SAXParseException as e:
    raise PropertiesFormatError(
      f"Malformed XML: {e.getMessage()}", line=e.getLineNumber()
    ) from e
  return handler.entries


def write_properties_xml(
  entries: Iterable[tuple[str, str]],
  sink: BinaryIO,
  comment: str | None = None,
  encoding: str = "UTF-8",
) -> int:
  """Write entries as an XML properties document.

  Characters the encoding cannot represent are written as character
  references.

  Returns:
      Number of entries written

  Raises:
      LookupError: If ``encoding`` is unknown
  """
  codecs.lookup(encoding)

  lines = [
    f'<?xml version="1.0" encoding="{encoding}" standalone="no"?>',
    f'<!DOCTYPE {ROOT_ELEMENT} SYSTEM "{PROPERTIES_DTD_URI}">',
    f"<{ROOT_ELEMENT}>",
  ]
  if comment is not None:
    lines.append(f"<comment>{escape(comment, _TEXT_ENTITIES)}</comment>")
  count = 0
  for key, value in entries:
    lines.append(
      f'<entry key="{escape(key, _ATTR_ENTITIES)}">'
      f"{escape(value, _TEXT_ENTITIES)}</entry>"
    )
    count += 1
  lines.append(f"</{ROOT_ELEMENT}>")

  sink.write(("\n".join(lines) + "\n").encode(encoding, "xmlcharrefreplace"))
  return count
