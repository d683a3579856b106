"""Order-preserving property store.

``OrderedProperties`` keeps its keys in the order they were first added,
either through ``set`` or by reading them top-to-bottom from a text or XML
properties document. Re-setting an existing key replaces its value without
moving it, so load/modify/store cycles produce stable, diffable files.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, BinaryIO, TextIO

from ordered_properties.core.adapter import PropertiesFormatAdapter
from ordered_properties.settings import Settings, settings as default_settings

if TYPE_CHECKING:
  from collections.abc import Iterator, KeysView


def _require_str(name: str, value: object) -> None:
  if not isinstance(value, str):
    raise TypeError(f"{name} must be str, got {type(value).__name__}")


class OrderedProperties:
  """A string-to-string mapping that remembers insertion order.

  Instances are not synchronized; callers sharing one instance across threads
  must serialize access themselves or use ``SynchronizedOrderedProperties``.
  """

  def __init__(
    self,
    settings: Settings | None = None,
    *,
    suppress_date: bool = False,
  ) -> None:
    """
    Initialize an empty store.

    Args:
        settings: Format settings; defaults to the process-wide settings
        suppress_date: Omit the timestamp comment when storing as text
    """
    self._entries: dict[str, str] = {}
    self._suppress_date = suppress_date
    self._settings = settings or default_settings

  @classmethod
  def without_writing_date_comment(
    cls, settings: Settings | None = None
  ) -> OrderedProperties:
    """Create a store that omits the date comment when writing text."""
    return cls(settings, suppress_date=True)

  @property
  def suppress_date(self) -> bool:
    return self._suppress_date

  @property
  def settings(self) -> Settings:
    return self._settings

  def get(self, key: str) -> str | None:
    return self._entries.get(key)

  def get_or_default(self, key: str, default: str) -> str:
    value = self._entries.get(key)
    return default if value is None else value

  def set(self, key: str, value: str) -> str | None:
    """Insert or update a property.

    New keys are appended at the end; existing keys keep their position.

    Args:
        key: Property name
        value: Property value

    Returns:
        The previous value, or None if the key was new

    Raises:
        TypeError: If key or value is not a string
    """
    _require_str("key", key)
    _require_str("value", value)
    previous = self._entries.get(key)
    self._entries[key] = value
    return previous

  def is_empty(self) -> bool:
    return not self._entries

  def keys_in_order(self) -> list[str]:
    """Return a snapshot of the keys in insertion order."""
    return list(self._entries)

  def keys_as_set(self) -> KeysView[str]:
    """Return a snapshot of the keys with set semantics.

    Iteration follows insertion order; the view is detached from the store.
    """
    return dict.fromkeys(self._entries).keys()

  def items(self) -> list[tuple[str, str]]:
    """Return a snapshot of (key, value) pairs in insertion order."""
    return list(self._entries.items())

  def to_display_string(self) -> str:
    pairs = ", ".join(f"{key}={value}" for key, value in self._entries.items())
    return "{" + pairs + "}"

  # --- Loading and storing ---

  def _adapter(self) -> PropertiesFormatAdapter:
    return PropertiesFormatAdapter(
      self, settings=self._settings, suppress_date=self._suppress_date
    )

  def load(self, source: BinaryIO | TextIO) -> None:
    """Read properties in text format, appending new keys in file order.

    Byte streams are decoded with ``settings.text_encoding``.

    Raises:
        PropertiesFormatError: If the text is malformed; the store is unchanged
    """
    self._adapter().load_text(source)

  def load_from_xml(self, source: BinaryIO) -> None:
    """Read properties from an XML properties document.

    Raises:
        PropertiesFormatError: If the document is malformed; the store is
            unchanged
    """
    self._adapter().load_xml(source)

  def store(self, sink: BinaryIO | TextIO, comments: str | None = None) -> None:
    """Write all properties in text format, in insertion order."""
    self._adapter().store_text(sink, comments)

  def store_to_xml(
    self,
    sink: BinaryIO,
    comment: str | None = None,
    encoding: str | None = None,
  ) -> None:
    """Write all properties as an XML properties document."""
    self._adapter().store_xml(sink, comment, encoding)

  # --- Python protocols ---

  def __len__(self) -> int:
    return len(self._entries)

  def __contains__(self, key: object) -> bool:
    return key in self._entries

  def __iter__(self) -> Iterator[str]:
    return iter(self.keys_in_order())

  def __eq__(self, other: object) -> bool:
    if not isinstance(other, OrderedProperties):
      return NotImplemented
    return self.items() == other.items()

  __hash__ = None  # type: ignore[assignment]

  def __repr__(self) -> str:
    return self.to_display_string()
