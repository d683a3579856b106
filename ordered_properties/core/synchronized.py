"""Lock-per-instance wrapper around ``OrderedProperties``."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from ordered_properties.core.store import OrderedProperties

if TYPE_CHECKING:
  from collections.abc import Iterator, KeysView
  from typing import BinaryIO, TextIO

  from ordered_properties.settings import Settings


class SynchronizedOrderedProperties:
  """
  Serializes every operation on one ``OrderedProperties`` instance.

  Each public method holds this wrapper's lock for its whole duration, so at
  most one load, store, get or set runs at a time. The lock belongs to the
  instance; separate wrappers never block each other.
  """

  def __init__(self, properties: OrderedProperties | None = None) -> None:
    self._properties = properties if properties is not None else OrderedProperties()
    self._lock = threading.Lock()

  @classmethod
  def without_writing_date_comment(
    cls, settings: Settings | None = None
  ) -> SynchronizedOrderedProperties:
    return cls(OrderedProperties.without_writing_date_comment(settings))

  @property
  def suppress_date(self) -> bool:
    return self._properties.suppress_date

  @property
  def settings(self) -> Settings:
    return self._properties.settings

  def get(self, key: str) -> str | None:
    with self._lock:
      return self._properties.get(key)

  def get_or_default(self, key: str, default: str) -> str:
    with self._lock:
      return self._properties.get_or_default(key, default)

  def set(self, key: str, value: str) -> str | None:
    with self._lock:
      return self._properties.set(key, value)

  def is_empty(self) -> bool:
    with self._lock:
      return self._properties.is_empty()

  def keys_in_order(self) -> list[str]:
    with self._lock:
      return self._properties.keys_in_order()

  def keys_as_set(self) -> KeysView[str]:
    with self._lock:
      return self._properties.keys_as_set()

  def items(self) -> list[tuple[str, str]]:
    with self._lock:
      return self._properties.items()

  def to_display_string(self) -> str:
    with self._lock:
      return self._properties.to_display_string()

  def load(self, source: BinaryIO | TextIO) -> None:
    with self._lock:
      self._properties.load(source)

  def load_from_xml(self, source: BinaryIO) -> None:
    with self._lock:
      self._properties.load_from_xml(source)

  def store(self, sink: BinaryIO | TextIO, comments: str | None = None) -> None:
    with self._lock:
      self._properties.store(sink, comments)

  def store_to_xml(
    self,
    sink: BinaryIO,
    comment: str | None = None,
    encoding: str | None = None,
  ) -> None:
    with self._lock:
      self._properties.store_to_xml(sink, comment, encoding)

  def __len__(self) -> int:
    with self._lock:
      return len(self._properties)

  def __contains__(self, key: object) -> bool:
    with self._lock:
      return key in self._properties

  def __iter__(self) -> Iterator[str]:
    return iter(self.keys_in_order())

  def __eq__(self, other: object) -> bool:
    if not isinstance(other, (OrderedProperties, SynchronizedOrderedProperties)):
      return NotImplemented
    # Snapshot each side under its own lock so comparing two wrappers never
    # holds both locks at once
    return self.items() == other.items()

  __hash__ = None  # type: ignore[assignment]

  def __repr__(self) -> str:
    return self.to_display_string()
