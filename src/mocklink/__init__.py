"""mocklink — a deterministic mocked link for testing GraphQL clients."""

__version__ = "0.1.0"

from mocklink.link import (  # noqa: E402
    MalformedMockError,
    MockLink,
    MockLinkError,
    NoMatchError,
    mock_single_link,
)
from mocklink.models import (  # noqa: E402
    GraphQLRequest,
    MockedResponse,
    ResultFactory,
    StaticResult,
)
from mocklink.observable import Observable, Subscription  # noqa: E402
from mocklink.registry import ResponseRegistry  # noqa: E402

__all__ = [
    "GraphQLRequest",
    "MalformedMockError",
    "MockLink",
    "MockLinkError",
    "MockedResponse",
    "NoMatchError",
    "Observable",
    "ResponseRegistry",
    "ResultFactory",
    "StaticResult",
    "Subscription",
    "__version__",
    "mock_single_link",
]
