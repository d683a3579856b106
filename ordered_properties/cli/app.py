"""Command line interface for reading and rewriting properties files."""

from __future__ import annotations

import io
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import structlog
import typer
from rich.console import Console
from rich.markup import escape

if TYPE_CHECKING:
  from structlog.typing import FilteringBoundLogger

from ordered_properties.core.errors import PropertiesError
from ordered_properties.core.store import OrderedProperties
from ordered_properties.logging_config import configure_logging
from ordered_properties.settings import settings

# stderr console for logs/status, stdout console for the properties data
err_console = Console(stderr=True)
out_console = Console()


def get_logger() -> FilteringBoundLogger:
  """Configure logging and return a logger instance."""
  configure_logging()
  return structlog.get_logger()


app = typer.Typer(
  help="Ordered Properties: load and store properties files without losing key order.",
  no_args_is_help=True,
)

XmlOption = Annotated[
  bool, typer.Option("--xml", help="Read the input as an XML properties document.")
]
OutputOption = Annotated[
  Path | None, typer.Option("--output", "-o", help="Write output to this file.")
]
CommentOption = Annotated[
  str | None, typer.Option("--comment", help="Leading comment for the output.")
]
KeepDateOption = Annotated[
  bool, typer.Option("--keep-date", help="Keep the timestamp comment line.")
]
InputPath = Annotated[
  Path,
  typer.Argument(exists=True, file_okay=True, dir_okay=False, help="Input file"),
]


def _load(
  log: FilteringBoundLogger,
  path: Path,
  *,
  xml: bool = False,
  keep_date: bool = True,
) -> OrderedProperties:
  """Read ``path`` into a new store, exiting with code 1 on a format error."""
  if keep_date:
    props = OrderedProperties()
  else:
    props = OrderedProperties.without_writing_date_comment()
  try:
    with path.open("rb") as f:
      if xml:
        props.load_from_xml(f)
      else:
        props.load(f)
  except PropertiesError as e:
    log.error("load_failed", path=str(path), error=str(e))
    err_console.print(f"[red]Fatal Error: {escape(str(e))}[/red]")
    raise typer.Exit(code=1) from e
  log.debug("loaded", path=str(path), keys=len(props))
  return props


def _emit(
  log: FilteringBoundLogger,
  props: OrderedProperties,
  output: Path | None,
  *,
  comment: str | None = None,
  xml: bool = False,
  encoding: str | None = None,
) -> None:
  """Store ``props`` to ``output``, or to stdout when no file is given."""
  buffer = io.BytesIO()
  if xml:
    encoding = encoding or settings.xml_encoding
    try:
      props.store_to_xml(buffer, comment, encoding)
    except LookupError as e:
      err_console.print(f"[red]Unknown encoding: {escape(encoding)}[/red]")
      raise typer.Exit(code=1) from e
  else:
    encoding = settings.text_encoding
    props.store(buffer, comment)

  if output is not None:
    output.write_bytes(buffer.getvalue())
    log.info("wrote_file", path=str(output), keys=len(props))
    err_console.print(f"[bold green]✓ Saved to {output}[/bold green]")
  else:
    out_console.out(buffer.getvalue().decode(encoding), end="", highlight=False)


@app.command()
def normalize(
  path: InputPath,
  output: OutputOption = None,
  comment: CommentOption = None,
  keep_date: KeepDateOption = False,
):
  """
  Re-store a text properties file, keeping its key order.
  """
  log = get_logger()
  props = _load(log, path, keep_date=keep_date)
  _emit(log, props, output, comment=comment)


@app.command("to-xml")
def to_xml(
  path: InputPath,
  output: OutputOption = None,
  comment: CommentOption = None,
  encoding: Annotated[
    str | None, typer.Option("--encoding", help="Output encoding (default UTF-8).")
  ] = None,
):
  """
  Convert a text properties file to an XML properties document.
  """
  log = get_logger()
  props = _load(log, path)
  _emit(log, props, output, comment=comment, xml=True, encoding=encoding)


@app.command("from-xml")
def from_xml(
  path: InputPath,
  output: OutputOption = None,
  comment: CommentOption = None,
  keep_date: KeepDateOption = False,
):
  """
  Convert an XML properties document to a text properties file.
  """
  log = get_logger()
  props = _load(log, path, xml=True, keep_date=keep_date)
  _emit(log, props, output, comment=comment)


@app.command()
def get(
  path: InputPath,
  key: Annotated[str, typer.Argument(help="Property name")],
  default: Annotated[
    str | None, typer.Option("--default", "-d", help="Value to print if missing.")
  ] = None,
  xml: XmlOption = False,
):
  """
  Print the value of one property.
  """
  log = get_logger()
  props = _load(log, path, xml=xml)
  value = props.get(key) if default is None else props.get_or_default(key, default)
  if value is None:
    err_console.print(f"[yellow]Key not found: {escape(key)}[/yellow]")
    raise typer.Exit(code=1)
  out_console.out(value, highlight=False)


@app.command()
def keys(path: InputPath, xml: XmlOption = False):
  """
  Print all property names in file order.
  """
  log = get_logger()
  props = _load(log, path, xml=xml)
  for key in props.keys_in_order():
    out_console.out(key, highlight=False)


@app.command("set")
def set_value(
  path: InputPath,
  key: Annotated[str, typer.Argument(help="Property name")],
  value: Annotated[str, typer.Argument(help="New value")],
  comment: CommentOption = None,
  keep_date: KeepDateOption = False,
):
  """
  Update or append one property and rewrite the text file in place.

  Existing keys keep their position; new keys go at the end. Comments in the
  original file are not preserved.
  """
  log = get_logger()
  props = _load(log, path, keep_date=keep_date)
  previous = props.set(key, value)
  log.info("property_set", key=key, replaced=previous is not None)
  _emit(log, props, path, comment=comment)


if __name__ == "__main__":
  app()
