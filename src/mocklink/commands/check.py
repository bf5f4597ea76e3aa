"""mocklink check — validate a fixture file and list its mocks."""

from __future__ import annotations

import json
from pathlib import Path

import click

from mocklink.document import operation_kind, operation_name, parse_document
from mocklink.fixtures import FixtureError, MockEntry, load_fixtures


def describe_entry(entry: MockEntry) -> str:
    """One-line summary of a fixture entry."""
    document = parse_document(entry.request.query)
    name = operation_name(document) or "<anonymous>"
    variables = json.dumps(entry.request.variables or {}, sort_keys=True)
    outcome = "error" if entry.error is not None else "result"
    line = f"{operation_kind(document)} {name} vars={variables} -> {outcome}"
    if entry.delay:
        line += f" [{entry.delay}ms]"
    if entry.reusable:
        line += " (reusable)"
    return line


@click.command()
@click.option(
    "-f", "--file", "fixture_file", type=click.Path(), help="Fixture file path."
)
def check(fixture_file: str | None) -> None:
    """Validate a fixture file and list the mocks it declares."""
    try:
        fixtures = load_fixtures(Path(fixture_file) if fixture_file else None)
    except FixtureError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    for entry in fixtures.mocks:
        click.echo(f"  {describe_entry(entry)}")

    count = len(fixtures.mocks)
    noun = "mock" if count == 1 else "mocks"
    click.echo(
        click.style(f"{count} {noun} OK", fg="green")
        + f" (add_typename={'on' if fixtures.add_typename else 'off'})"
    )
