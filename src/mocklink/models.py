"""Pydantic v2 models for mocked requests and responses."""

from __future__ import annotations

from collections.abc import Callable
from typing import Annotated, Any, Literal

from graphql import DocumentNode
from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    field_validator,
)

from mocklink.constants import FetchResult
from mocklink.document import parse_document

#: Zero-argument callable producing a fresh response body.
ResultFunction = Callable[[], FetchResult]


class GraphQLRequest(BaseModel):
    """An outgoing GraphQL operation as seen by the link."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    query: DocumentNode = Field(description="Parsed operation document")
    variables: dict[str, Any] | None = Field(
        default=None,
        description="Operation variables",
    )
    operation_name: str | None = Field(
        default=None,
        description="Name of the operation to run",
    )
    extensions: dict[str, Any] | None = Field(
        default=None,
        description="Protocol extensions sent alongside the operation",
    )
    context: dict[str, Any] = Field(
        default_factory=dict,
        description="Link-chain context, never compared when matching",
    )

    @field_validator("query", mode="before")
    @classmethod
    def _parse_query(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_document(value)
        return value


class StaticResult(BaseModel):
    """A literal response body, delivered as-is on every match."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["static"] = "static"
    value: FetchResult

    def resolve(self) -> FetchResult:
        return self.value


class ResultFactory(BaseModel):
    """A response body computed lazily, at delivery time."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["factory"] = "factory"
    produce: ResultFunction

    def resolve(self) -> FetchResult:
        return self.produce()


def _result_discriminator(v: Any) -> str:
    if isinstance(v, dict):
        return str(v.get("kind", ""))
    return str(getattr(v, "kind", ""))


ResultSource = Annotated[
    Annotated[StaticResult, Tag("static")]
    | Annotated[ResultFactory, Tag("factory")],
    Discriminator(_result_discriminator),
]
"""Tagged union of the two ways a mocked result can be supplied."""


class MockedResponse(BaseModel):
    """One expected request and the outcome to replay for it.

    ``result`` accepts a response dict or a zero-argument callable; both
    are wrapped into a :data:`ResultSource`.  ``new_data`` makes the mock
    self-replenishing: after every match its result is replaced with
    ``new_data()`` and it goes back on the end of its queue.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    request: GraphQLRequest
    result: ResultSource | None = None
    error: BaseException | None = None
    delay: int = Field(default=0, ge=0, description="Delivery delay in milliseconds")
    new_data: ResultFunction | None = None

    @field_validator("result", mode="before")
    @classmethod
    def _wrap_result(cls, value: Any) -> Any:
        if value is None or isinstance(value, (StaticResult, ResultFactory)):
            return value
        if callable(value):
            return ResultFactory(produce=value)
        return StaticResult(value=value)
