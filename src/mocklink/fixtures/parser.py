"""Load and validate mocklink.yaml fixture files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from graphql import GraphQLSyntaxError
from pydantic import ValidationError

from mocklink.constants import DEFAULT_FIXTURE_NAME
from mocklink.document import parse_document
from mocklink.fixtures.models import FixtureFile


class FixtureError(Exception):
    """User-facing fixture file error."""


def load_fixtures(path: Path | None = None) -> FixtureFile:
    """Load and validate a fixture file.

    Args:
        path: Explicit fixture path. If None, looks for
              mocklink.yaml in the current directory.

    Returns:
        A validated FixtureFile instance.

    Raises:
        FixtureError: On missing file, bad YAML, invalid GraphQL, or
            validation failure.
    """
    fixture_path = _resolve_path(path)
    raw = _read_yaml(fixture_path)
    fixtures = _validate(raw)
    _check_queries(fixtures)
    return fixtures


def _resolve_path(path: Path | None) -> Path:
    if path is not None:
        resolved = Path(path)
        if not resolved.is_file():
            msg = f"Fixture file not found: {resolved}"
            raise FixtureError(msg)
        return resolved

    default = Path.cwd() / DEFAULT_FIXTURE_NAME
    if not default.is_file():
        msg = f"No {DEFAULT_FIXTURE_NAME} found in {Path.cwd()}"
        raise FixtureError(msg)
    return default


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read fixture file: {exc}"
        raise FixtureError(msg) from exc

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        detail = ""
        if hasattr(exc, "problem_mark") and exc.problem_mark is not None:
            mark = exc.problem_mark
            detail = f" (line {mark.line + 1}, column {mark.column + 1})"
        msg = f"Invalid YAML in {path.name}{detail}"
        raise FixtureError(msg) from exc

    if not isinstance(data, dict):
        msg = f"Expected a YAML mapping in {path.name}, got {type(data).__name__}"
        raise FixtureError(msg)

    return data


def _validate(raw: dict[str, Any]) -> FixtureFile:
    try:
        return FixtureFile.model_validate(raw)
    except ValidationError as exc:
        parts: list[str] = []
        for err in exc.errors():
            loc = " → ".join(str(s) for s in err["loc"])
            msg = err["msg"]
            if "field required" in msg.lower():
                msg = "This field is required"
            parts.append(f"  {loc}: {msg}")
        joined = "\n".join(parts)
        msg = f"Fixture validation failed:\n{joined}"
        raise FixtureError(msg) from exc


def _check_queries(fixtures: FixtureFile) -> None:
    for index, entry in enumerate(fixtures.mocks):
        try:
            parse_document(entry.request.query)
        except GraphQLSyntaxError as exc:
            msg = f"Invalid GraphQL in mocks → {index} → request → query: {exc.message}"
            raise FixtureError(msg) from exc
