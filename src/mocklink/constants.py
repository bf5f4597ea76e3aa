"""Shared constants and type aliases for mocklink."""

from __future__ import annotations

from typing import Any

#: Field injected into selection sets when ``add_typename`` is on.
TYPENAME_FIELD = "__typename"

#: Directive stripped from mocked documents before fingerprinting.
CONNECTION_DIRECTIVE = "connection"

#: Directive marking client-only selections.
CLIENT_DIRECTIVE = "client"

#: Fixture file looked up in the current directory by default.
DEFAULT_FIXTURE_NAME = "mocklink.yaml"

#: A GraphQL response body, e.g. ``{"data": {...}}``.
FetchResult = dict[str, Any]

#: Directive whose field's selections are never given a typename.
EXPORT_DIRECTIVE = "export"
