"""Order-preserving properties store with text and XML load/store support."""

__version__ = "0.1.0"

from ordered_properties.core import (  # noqa: E402
  OrderedProperties,
  PropertiesError,
  PropertiesFormatError,
  SynchronizedOrderedProperties,
)

__all__ = [
  "OrderedProperties",
  "PropertiesError",
  "PropertiesFormatError",
  "SynchronizedOrderedProperties",
  "__version__",
]
