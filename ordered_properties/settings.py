import codecs
import os

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
  log_level: str = "INFO"

  # Text format
  text_encoding: str = Field(
    default="iso-8859-1",
    description="Encoding used when loading from or storing to byte streams",
  )
  line_separator: str = Field(
    default=os.linesep,
    description="Line terminator written after every line of text output",
  )
  unicode_escape_threshold: int = Field(
    default=0x7E,
    ge=0x7E,
    le=0x10FFFF,
    description="Characters above this code point are written as \\uXXXX",
  )

  # XML format
  xml_encoding: str = "UTF-8"

  model_config = SettingsConfigDict(
    env_prefix="ORDERED_PROPERTIES_",
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
  )

  @field_validator("text_encoding", "xml_encoding")
  @classmethod
  def check_encoding(cls, value: str) -> str:
    """Reject encoding names the codec registry does not know."""
    try:
      codecs.lookup(value)
    except LookupError as e:
      raise ValueError(f"Unknown encoding: {value}") from e
    return value

  @field_validator("log_level")
  @classmethod
  def check_log_level(cls, value: str) -> str:
    """Normalize the level name and reject unknown levels."""
    name = value.upper()
    if name not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
      raise ValueError(f"Unknown log level: {value}")
    return name

  @field_validator("line_separator")
  @classmethod
  def check_line_separator(cls, value: str) -> str:
    """Only the three standard line terminators are allowed."""
    if value not in ("\n", "\r", "\r\n"):
      raise ValueError(f"Line separator must be \\n, \\r or \\r\\n, got {value!r}")
    return value


settings = Settings()
