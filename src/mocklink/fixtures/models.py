"""Pydantic v2 models for mocklink.yaml fixture files."""

from __future__ import annotations

import copy
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from mocklink.constants import FetchResult
from mocklink.link import MockLink
from mocklink.models import GraphQLRequest, MockedResponse, ResultFunction


class SimulatedNetworkError(Exception):
    """Error replayed for fixture entries that declare ``error``."""


class RequestEntry(BaseModel):
    """The request half of a fixture entry."""

    model_config = ConfigDict(extra="forbid")

    query: str = Field(description="GraphQL operation source")
    variables: dict[str, Any] | None = Field(
        default=None,
        description="Variables the request must carry to match",
    )


class ErrorEntry(BaseModel):
    """A simulated network failure."""

    model_config = ConfigDict(extra="forbid")

    message: str = Field(description="Error message to deliver")


class MockEntry(BaseModel):
    """One mocked interaction."""

    model_config = ConfigDict(extra="forbid")

    request: RequestEntry
    result: FetchResult | None = Field(
        default=None,
        description="Response body to deliver",
    )
    error: ErrorEntry | None = Field(
        default=None,
        description="Failure to deliver instead of a result",
    )
    delay: int = Field(default=0, ge=0, description="Delivery delay in milliseconds")
    reusable: bool = Field(
        default=False,
        description="Re-queue the mock after every match",
    )

    @model_validator(mode="after")
    def _validate_outcome(self) -> MockEntry:
        if (self.result is None) == (self.error is None):
            msg = "Mock must specify exactly one of 'result' or 'error'"
            raise ValueError(msg)
        if self.reusable and self.result is None:
            msg = "Mock with 'reusable: true' requires 'result'"
            raise ValueError(msg)
        return self

    def to_mocked_response(self) -> MockedResponse:
        new_data = _copier(self.result) if self.reusable else None
        return MockedResponse(
            request=GraphQLRequest(
                query=self.request.query,
                variables=self.request.variables,
            ),
            result=self.result,
            error=SimulatedNetworkError(self.error.message) if self.error else None,
            delay=self.delay,
            new_data=new_data,
        )


def _copier(body: FetchResult | None) -> ResultFunction:
    def _copy() -> FetchResult:
        return copy.deepcopy(body or {})

    return _copy


class FixtureFile(BaseModel):
    """Top-level mocklink.yaml document."""

    model_config = ConfigDict(extra="forbid")

    version: str = Field(default="1", description="Fixture schema version")
    add_typename: bool = Field(
        default=True,
        description="Inject __typename before fingerprinting",
    )
    mocks: list[MockEntry] = Field(
        default_factory=list,
        description="Mocked interactions, in registration order",
    )

    def to_mocked_responses(self) -> list[MockedResponse]:
        return [entry.to_mocked_response() for entry in self.mocks]

    def build_link(self) -> MockLink:
        return MockLink(self.to_mocked_responses(), add_typename=self.add_typename)
