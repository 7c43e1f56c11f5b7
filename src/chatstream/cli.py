#!/usr/bin/env python3
"""chatstream CLI - inspect recorded assistant output streams.

Usage:
    chatstream replay session.jsonl
    chatstream replay --json - < session.jsonl
    chatstream classify 'mv a.txt "b c.txt"'
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

import click

from . import __version__
from .operations.bash import analyze_bash_command
from .operations.tracker import OperationTracker
from .runner.config import ConfigError, load_config
from .runner.output import create_output
from .runner.processor import StreamProcessor


@click.group()
@click.version_option(version=__version__, prog_name="chatstream")
@click.option("--debug", is_flag=True, help="Log processing details to stderr.")
def main(debug: bool):
    """chatstream - event processing for assistant chat clients.

    \b
    Quick start:
        claude -p "..." --output-format stream-json --verbose > session.jsonl
        chatstream replay session.jsonl
    """
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(levelname)s %(name)s: %(message)s",
        )


@main.command()
@click.argument("stream", type=click.File("r", encoding="utf-8"))
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML configuration file. Defaults to $CHATSTREAM_CONFIG.",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Print the replay transcript as JSON.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also save the JSON transcript to this file.",
)
@click.option(
    "--show-hidden",
    is_flag=True,
    help="Include tool results that are normally hidden.",
)
def replay(
    stream: TextIO,
    config_path: Optional[Path],
    as_json: bool,
    output: Optional[Path],
    show_hidden: bool,
):
    """Replay a recorded stream-json log through the stream processor.

    STREAM is a file with one event per line, or - for stdin.

    \b
    Examples:
        chatstream replay session.jsonl
        chatstream replay --json -o transcript.json session.jsonl
    """
    try:
        config = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e))

    tracker = OperationTracker()
    processor = StreamProcessor(operation_store=tracker, config=config)
    transcript = create_output()
    callbacks = transcript.callbacks()

    line_count = 0
    for line in stream:
        line_count += 1
        processor.process_line(line, callbacks)
    transcript.finalize()

    if output:
        transcript.save(output)

    if as_json:
        click.echo(transcript.to_json())
    else:
        click.echo(transcript.to_text(show_hidden=show_hidden))

    totals = processor.get_totals()
    click.echo(f"[chatstream] Lines: {line_count}", err=True)
    click.echo(f"[chatstream] Requests: {totals.request_count}", err=True)
    click.echo(f"[chatstream] Operations: {len(transcript.operations)}", err=True)
    click.echo(f"[chatstream] Cost: ${totals.total_cost:.4f}", err=True)
    if transcript.errors:
        click.echo(f"[chatstream] Errors: {len(transcript.errors)}", err=True)


@main.command()
@click.argument("command")
@click.option("--json", "as_json", is_flag=True, help="Print the operation as JSON.")
def classify(command: str, as_json: bool):
    """Show how a shell command is classified for undo/redo.

    \b
    Examples:
        chatstream classify 'rm -rf "/tmp/a b"'
        chatstream classify 'mkdir -p foo/bar'
    """
    extracted = analyze_bash_command(command)
    if extracted is None:
        op_type, data = "bash_command", {"command": command}
    else:
        op_type, data = extracted.type.value, extracted.data.to_dict()

    if as_json:
        click.echo(json.dumps({"type": op_type, "data": data}, indent=2))
        return

    click.echo(op_type)
    for key, value in data.items():
        click.echo(f"  {key}: {value}")


if __name__ == "__main__":
    main()
