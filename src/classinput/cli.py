"""CLI interface for classinput."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

import click

from .config import Config, load_config
from .dataset import InputDataSet
from .errors import InputDataError, SkipEvent
from .names import is_archive, is_class_file, is_inner_class_file, outer_class_name

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(__name__)


def _format_mtime(mtime: float) -> str | None:
    if mtime < 0:
        return None
    return datetime.fromtimestamp(mtime).strftime(DATE_FORMAT)


def _summarize(
    data_set: InputDataSet,
    skipped: list[SkipEvent],
    *,
    names: list[str] | None = None,
) -> dict[str, Any]:
    """Drain *data_set* and report what came out of it."""
    streams = 0
    class_bytes = 0
    cursor = data_set.try_iterate()
    if cursor is not None:
        with cursor:
            for stream in cursor:
                streams += 1
                class_bytes += len(stream.read())
                if names is not None and cursor.source is not None:
                    if is_archive(cursor.source.name):
                        names.append(f"{cursor.source}!{stream.name}")
                    else:
                        names.append(str(cursor.source))

    return {
        "files": data_set.size(),
        "bytes": data_set.size_in_bytes(),
        "streams": streams,
        "class_bytes": class_bytes,
        "skipped": len(skipped),
        "last_modified": _format_mtime(data_set.last_modified),
    }


def _echo_summary(summary: dict[str, Any], indent: str = "") -> None:
    click.echo(f"{indent}Files in input data set: {summary['files']} ({summary['bytes']} bytes)")
    click.echo(f"{indent}Class streams: {summary['streams']} ({summary['class_bytes']} bytes)")
    if summary["skipped"]:
        click.echo(f"{indent}Skipped: {summary['skipped']}")
    click.echo(f"{indent}Last modified: {summary['last_modified'] or '-'}")


@click.group()
@click.version_option(package_name="classinput")
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="Properties file (default: $CLASSINPUT_CONFIG or classinput.properties).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """classinput — stream compiled classes out of files, directories and jars."""
    config = load_config(config_path)
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.log_level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )
    ctx.obj = config


@cli.command()
@click.argument("paths", nargs=-1, type=click.Path(exists=True))
@click.option(
    "--recursive/--no-recursive",
    default=None,
    help="Descend into subdirectories (default from config).",
)
@click.option("--list", "list_streams", is_flag=True, help="Print every class stream.")
@click.option("--json-output", "-j", is_flag=True, help="Output as JSON.")
@click.pass_obj
def scan(
    config: Config,
    paths: tuple[str, ...],
    recursive: bool | None,
    list_streams: bool,
    json_output: bool,
) -> None:
    """Collect class files and archives from PATHS and stream them."""
    if recursive is None:
        recursive = config.recursive
    targets = paths or (config.builds_directory,)

    skipped: list[SkipEvent] = []
    data_set = InputDataSet(on_skip=skipped.append)
    try:
        for target in targets:
            if Path(target).is_dir():
                data_set.add_directory(target, recursive)
            else:
                data_set.add_path(target)
    except InputDataError as exc:
        raise click.ClickException(f"Cannot read input: {exc}") from exc

    names: list[str] | None = [] if list_streams else None
    summary = _summarize(data_set, skipped, names=names)

    if json_output:
        if names is not None:
            summary["names"] = names
        summary["skipped_entries"] = [str(event) for event in skipped]
        click.echo(json.dumps(summary, indent=2))
        return

    for name in names or []:
        click.echo(name)
    for event in skipped:
        click.echo(f"skipped: {event}", err=True)
    _echo_summary(summary)


@cli.command()
@click.argument("history_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json-output", "-j", is_flag=True, help="Output as JSON.")
def history(history_file: str, json_output: bool) -> None:
    """Stream every build listed in HISTORY_FILE and report per version."""
    from .history import parse_history_file

    try:
        parsed = parse_history_file(history_file)
    except InputDataError as exc:
        raise click.ClickException(str(exc)) from exc

    rows: list[dict[str, Any]] = []
    for version in parsed.versions:
        row: dict[str, Any] = {"rsn": version.rsn, "id": version.version_id}
        skipped: list[SkipEvent] = []
        try:
            data_set = version.data_set(on_skip=skipped.append)
        except InputDataError as exc:
            logger.error("Failed to read RSN %d (%s): %s", version.rsn, version.version_id, exc)
            row["error"] = str(exc)
        else:
            row.update(_summarize(data_set, skipped))
        rows.append(row)

    if json_output:
        click.echo(json.dumps({"name": parsed.short_name, "versions": rows}, indent=2))
        return

    click.echo(f"{parsed.short_name}: {len(rows)} versions")
    for row in rows:
        click.echo(f"[{row['rsn']}] {row['id']}")
        if "error" in row:
            click.echo(f"  Failed: {row['error']}")
        else:
            _echo_summary(row, indent="  ")


@cli.command()
@click.argument("names", nargs=-1, required=True)
def classify(names: tuple[str, ...]) -> None:
    """Show how each of NAMES is classified."""
    for name in names:
        if is_archive(name):
            kind = "archive"
        elif is_class_file(name):
            kind = "inner class" if is_inner_class_file(name) else "class"
        else:
            kind = "ignored"
        line = f"{name}: {kind}"
        outer = outer_class_name(name)
        if kind == "inner class" and outer is not None:
            line += f" (outer: {outer})"
        click.echo(line)
