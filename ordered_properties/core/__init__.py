"""Core ordered-properties functionality: the store and its two file formats."""

from ordered_properties.core.errors import PropertiesError, PropertiesFormatError
from ordered_properties.core.store import OrderedProperties
from ordered_properties.core.synchronized import SynchronizedOrderedProperties

__all__ = [
  "OrderedProperties",
  "PropertiesError",
  "PropertiesFormatError",
  "SynchronizedOrderedProperties",
]
