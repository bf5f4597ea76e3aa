"""mocklink replay — issue a request against a fixture file's mocks."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

import click
from graphql import GraphQLSyntaxError

from mocklink.fixtures import FixtureError, SimulatedNetworkError, load_fixtures
from mocklink.link import MockLink, MockLinkError
from mocklink.models import GraphQLRequest


@click.command()
@click.option(
    "-f", "--file", "fixture_file", type=click.Path(), help="Fixture file path."
)
@click.option("-q", "--query", type=str, default=None, help="GraphQL operation source.")
@click.option(
    "--query-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Read the operation from a file.",
)
@click.option(
    "--variables", type=str, default=None, help="Operation variables as JSON."
)
@click.option(
    "-n",
    "--repeat",
    type=click.IntRange(min=1),
    default=1,
    help="Send the request this many times.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def replay(
    fixture_file: str | None,
    query: str | None,
    query_file: Path | None,
    variables: str | None,
    repeat: int,
    verbose: bool,
) -> None:
    """Send a request through the mocked link and print what it replays."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    if (query is None) == (query_file is None):
        click.echo("Error: pass exactly one of --query or --query-file", err=True)
        raise SystemExit(1)
    if query_file is not None:
        query = query_file.read_text(encoding="utf-8")

    try:
        fixtures = load_fixtures(Path(fixture_file) if fixture_file else None)
    except FixtureError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    try:
        request = GraphQLRequest(query=query, variables=_parse_variables(variables))
    except (GraphQLSyntaxError, click.BadParameter) as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    link = fixtures.build_link()
    try:
        asyncio.run(_send(link, request, repeat))
    except MockLinkError as exc:
        click.echo(str(exc), err=True)
        raise SystemExit(1) from exc


def _parse_variables(raw: str | None) -> dict[str, Any] | None:
    if raw is None:
        return None
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as exc:
        msg = f"--variables is not valid JSON: {exc}"
        raise click.BadParameter(msg) from exc
    if not isinstance(value, dict):
        msg = "--variables must be a JSON object"
        raise click.BadParameter(msg)
    return value


async def _send(link: MockLink, request: GraphQLRequest, repeat: int) -> None:
    for _ in range(repeat):
        try:
            result = await link.request(request).first()
        except SimulatedNetworkError as exc:
            click.echo(click.style(f"error: {exc}", fg="red"))
            continue
        click.echo(json.dumps(result, indent=2, sort_keys=True))
