from pathlib import Path
from typing import Any

import orjson
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from dspfkit.catalog import find_overlaps_in_record
from dspfkit.describe import (
    describe_constant,
    describe_field,
    describe_size,
    format_attributes,
    format_indicators,
)
from dspfkit.logging_config import setup_logging
from dspfkit.model import Attribute, ConstantElement, FieldElement, ParseResult, RecordElement
from dspfkit.parser import parse
from dspfkit.report import (
    append_csv,
    append_jsonl,
    catalog_rows,
    entry_to_dict,
    result_to_payload,
    summary_row,
    write_payload,
)
from dspfkit.session import is_dds_file
from dspfkit.settings import SettingsError, StructureSettings, load_settings
from dspfkit.source.synth import SynthConfig, synthesize_display_file

app = typer.Typer(help="Inspect the structure of DDS display-file source.")
console = Console()


def _load_settings(path: Path | None) -> StructureSettings:
    if path is None:
        return StructureSettings()
    if not path.is_file():
        raise typer.BadParameter(f"Settings file not found: {path}")
    try:
        return load_settings(path)
    except SettingsError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _settings(ctx: typer.Context) -> StructureSettings:
    if isinstance(ctx.obj, StructureSettings):
        return ctx.obj
    return StructureSettings()


def _parse_source(path: Path, settings: StructureSettings) -> ParseResult:
    if not path.is_file():
        raise typer.BadParameter(f"Input file not found: {path}")
    if not is_dds_file(path, settings.extensions):
        expected = ", ".join(settings.extensions)
        raise typer.BadParameter(f"Not a display file: {path} (expected {expected})")
    return parse(path.read_text(errors="replace"), settings=settings)


def _add_attributes(node: Tree, attributes: list[Attribute]) -> None:
    for attr in attributes:
        node.add(f"[dim]{escape(format_attributes([attr]))}[/]")


@app.callback()
def main(
    ctx: typer.Context,
    settings: Path | None = typer.Option(
        None, "--settings", "-s", help="YAML or JSON settings file."
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Override the settings log level (DEBUG, INFO, ...)."
    ),
) -> None:
    """Load settings and configure logging for every command."""
    cfg = _load_settings(settings)
    setup_logging(log_level or cfg.log_level)
    ctx.obj = cfg


@app.command()
def structure(
    ctx: typer.Context,
    input: Path = typer.Argument(..., help="Display-file source to parse."),
) -> None:
    """Print the record/field/constant tree with keywords and indicators."""
    result = _parse_source(input, _settings(ctx))
    root = Tree(f"[bold]{escape(input.name)}[/] {describe_size(result.default_size)}")
    if result.file.attributes:
        _add_attributes(root.add("Attributes"), result.file.attributes)

    parent = root
    for element in result.elements[1:]:
        if isinstance(element, RecordElement):
            parent = root.add(
                f"[bold cyan]{escape(element.name)}[/] {describe_size(element.size)} "
                f"[dim]lines {element.line_index + 1}-{(element.end_index or 0) + 1}[/]"
            )
            _add_attributes(parent, element.attributes)
        elif isinstance(element, FieldElement):
            label = f"{escape(element.name)} {escape(describe_field(element))}"
            indicators = format_indicators(element.indicators)
            node = parent.add(f"{label} {escape(indicators)}" if indicators else label)
            _add_attributes(node, element.attributes)
        elif isinstance(element, ConstantElement):
            label = f"[green]{escape(element.text)}[/] {escape(describe_constant(element))}"
            node = parent.add(label)
            _add_attributes(node, element.attributes)
    console.print(root)


@app.command()
def catalog(
    ctx: typer.Context,
    input: Path = typer.Argument(..., help="Display-file source to parse."),
    record: str | None = typer.Option(None, "--record", "-r", help="Only this record."),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Optional path to write the catalog as JSON."
    ),
    csv_path: Path | None = typer.Option(
        None, "--csv", help="Append one row per field/constant to a CSV file."
    ),
    jsonl_path: Path | None = typer.Option(
        None, "--jsonl", help="Append a one-line parse summary to a JSONL log."
    ),
) -> None:
    """Emit the per-record catalog of fields, constants and keywords."""
    result = _parse_source(input, _settings(ctx))
    cat = result.catalog
    if record is not None:
        entry = cat.get(record.upper()) or cat.get(record)
        if entry is None:
            raise typer.BadParameter(f"Record '{record}' not found in {input}")
        payload: dict[str, Any] = entry_to_dict(entry)
        rows = [row for row in catalog_rows(cat) if row["record"] == entry.name]
    else:
        payload = result_to_payload(result)
        rows = catalog_rows(cat)

    if csv_path:
        append_csv(csv_path, rows)
        console.print(f"[bold green]Appended {len(rows)} rows[/] to {csv_path}")
    if jsonl_path:
        append_jsonl(jsonl_path, summary_row(result, source=str(input), tag=record))
        console.print(f"[bold green]Logged summary[/] to {jsonl_path}")
    if output:
        write_payload(output, payload)
        console.print(f"[bold green]Wrote catalog[/] to {output}")
    elif not (csv_path or jsonl_path):
        console.print_json(orjson.dumps(payload).decode())


@app.command()
def sizes(
    ctx: typer.Context,
    input: Path = typer.Argument(..., help="Display-file source to parse."),
) -> None:
    """Show the file display sizes and each record's effective size."""
    result = _parse_source(input, _settings(ctx))
    console.print(f"[bold]Default[/] {describe_size(result.default_size)}")
    if result.alternate_size is not None:
        console.print(f"[bold]Alternate[/] {describe_size(result.alternate_size)}")

    table = Table(title=f"Record sizes: {input.name}")
    for column in ("Record", "Rows", "Cols", "Origin", "Source"):
        table.add_column(column)
    for element in result.records():
        size = element.size
        if size is None:
            continue
        origin = f"{size.origin[0]},{size.origin[1]}" if size.origin else ""
        table.add_row(element.name, str(size.rows), str(size.cols), origin, size.source)
    console.print(table)


@app.command()
def overlaps(
    ctx: typer.Context,
    input: Path = typer.Argument(..., help="Display-file source to parse."),
) -> None:
    """List fields and constants that share screen positions within a record."""
    result = _parse_source(input, _settings(ctx))
    table = Table(title=f"Overlaps: {input.name}")
    for column in ("Record", "Row", "First", "Second"):
        table.add_column(column)
    found = 0
    for entry in result.catalog:
        for overlap in find_overlaps_in_record(entry):
            found += 1
            table.add_row(
                entry.name,
                str(overlap.first.row),
                escape(f"{overlap.first.name} @{overlap.first.col}"),
                escape(f"{overlap.second.name} @{overlap.second.col}"),
            )
    if found:
        console.print(table)
    else:
        console.print("[bold green]No overlapping fields or constants.[/]")


@app.command()
def synthetic(
    output: Path = typer.Argument(..., help="Path to write the generated display file."),
    metadata: Path | None = typer.Option(
        None, "--metadata", "-m", help="Optional path to write JSON metadata about records."
    ),
    records: int = typer.Option(3, "--records", "-c", help="Number of records to emit."),
    fields: int = typer.Option(4, "--fields", help="Fields per record."),
    seed: int = typer.Option(1234, "--seed", help="Seed for reproducible generation."),
) -> None:
    """Generate a synthetic display file for fixtures and benchmarks."""
    text, meta = synthesize_display_file(
        SynthConfig(seed=seed, records=records, fields_per_record=fields)
    )
    output.write_text(text)
    console.print(f"[bold green]Wrote[/] {len(text.splitlines())} lines to {output}")
    if metadata:
        metadata.write_bytes(orjson.dumps(meta, option=orjson.OPT_INDENT_2))
        console.print(f"[bold green]Wrote metadata[/] to {metadata}")


if __name__ == "__main__":
    app()
