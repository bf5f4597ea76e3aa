"""Tests for the response registry — fingerprints, queues, and consumption."""

from __future__ import annotations

import json
import threading
from typing import Any

from mocklink.document import print_document
from mocklink.models import GraphQLRequest, MockedResponse, StaticResult
from mocklink.registry import (
    ResponseRegistry,
    canonical_variables,
    normalize_mocked_response,
    request_to_key,
)

GET_USER = "query GetUser($id: ID!) { user(id: $id) { id name } }"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _mock(
    variables: dict[str, Any] | None = None,
    query: str = GET_USER,
    **kwargs: Any,
) -> MockedResponse:
    kwargs.setdefault("result", {"data": {"user": None}})
    return MockedResponse(
        request=GraphQLRequest(query=query, variables=variables),
        **kwargs,
    )


# ===================================================================
# Fingerprints
# ===================================================================


class TestRequestToKey:
    def test_variables_excluded(self) -> None:
        a = GraphQLRequest(query=GET_USER, variables={"id": "1"})
        b = GraphQLRequest(query=GET_USER, variables={"id": "2"})
        assert request_to_key(a) == request_to_key(b)

    def test_key_is_query_json(self) -> None:
        req = GraphQLRequest(query=GET_USER)
        key = request_to_key(req, add_typename=False)
        assert json.loads(key) == {"query": print_document(req.query)}

    def test_typename_flag(self) -> None:
        req = GraphQLRequest(query=GET_USER)
        assert "__typename" in request_to_key(req, add_typename=True)
        assert "__typename" not in request_to_key(req, add_typename=False)

    def test_formatting_does_not_matter(self) -> None:
        a = GraphQLRequest(query="{ user { id } }")
        b = GraphQLRequest(query="{\n  user {\n    id\n  }\n}")
        assert request_to_key(a) == request_to_key(b)


class TestCanonicalVariables:
    def test_key_order_independent(self) -> None:
        assert canonical_variables({"a": 1, "b": 2}) == canonical_variables(
            {"b": 2, "a": 1}
        )

    def test_nested_key_order_independent(self) -> None:
        assert canonical_variables({"f": {"x": 1, "y": [1, 2]}}) == canonical_variables(
            {"f": {"y": [1, 2], "x": 1}}
        )

    def test_absent_equals_empty(self) -> None:
        assert canonical_variables(None) == canonical_variables({})

    def test_integral_float_equals_int(self) -> None:
        assert canonical_variables({"n": 1, "xs": [2.0]}) == canonical_variables(
            {"n": 1.0, "xs": [2]}
        )
        assert canonical_variables({"n": 1.5}) != canonical_variables({"n": 1})

    def test_bool_not_treated_as_number(self) -> None:
        assert canonical_variables({"f": True}) != canonical_variables({"f": 1})

    def test_list_order_matters(self) -> None:
        assert canonical_variables({"ids": [1, 2]}) != canonical_variables(
            {"ids": [2, 1]}
        )


# ===================================================================
# Normalization
# ===================================================================


class TestNormalize:
    def test_strips_connection_and_client(self) -> None:
        mock = _mock(
            query='{ feed @connection(key: "f") { id seen @client } }',
        )
        normalized = normalize_mocked_response(mock)
        text = print_document(normalized.request.query)
        assert "@connection" not in text
        assert "seen" not in text

    def test_original_untouched(self) -> None:
        mock = _mock(query='{ feed @connection(key: "f") { id } }')
        normalize_mocked_response(mock)
        assert "@connection" in print_document(mock.request.query)

    def test_client_only_document_kept_as_is(self) -> None:
        mock = _mock(query="{ local @client }")
        normalized = normalize_mocked_response(mock)
        assert "local" in print_document(normalized.request.query)

    def test_static_result_copied(self) -> None:
        mock = _mock(result={"data": {"n": 1}})
        normalized = normalize_mocked_response(mock)
        assert isinstance(normalized.result, StaticResult)
        assert normalized.result.value == {"data": {"n": 1}}
        assert normalized.result.value is not mock.result.value  # type: ignore[union-attr]


# ===================================================================
# Queues
# ===================================================================


class TestRegisterAndLookup:
    def test_same_operation_shares_queue(self) -> None:
        registry = ResponseRegistry()
        registry.register(_mock({"id": "1"}))
        registry.register(_mock({"id": "2"}))
        key = registry.fingerprint(GraphQLRequest(query=GET_USER))
        assert len(registry.lookup(key)) == 2
        assert registry.keys() == [key]
        assert len(registry) == 2

    def test_lookup_unknown_is_empty(self) -> None:
        assert ResponseRegistry().lookup("nope") == []

    def test_lookup_is_live(self) -> None:
        registry = ResponseRegistry()
        registry.register(_mock({"id": "1"}))
        key = registry.fingerprint(GraphQLRequest(query=GET_USER))
        queue = registry.lookup(key)
        registry.take(key, {"id": "1"})
        assert queue == []
        assert registry.lookup(key) == []

    def test_all_responses_spans_queues(self) -> None:
        registry = ResponseRegistry()
        registry.register(_mock())
        registry.register(_mock(query="{ other }"))
        assert len(list(registry.all_responses())) == 2


class TestTake:
    def test_first_matching_in_order(self) -> None:
        registry = ResponseRegistry()
        registry.register(_mock({"id": "1"}, result={"data": "first"}))
        registry.register(_mock({"id": "2"}, result={"data": "other"}))
        registry.register(_mock({"id": "1"}, result={"data": "second"}))
        key = registry.fingerprint(GraphQLRequest(query=GET_USER))

        taken = registry.take(key, {"id": "1"})
        assert taken is not None
        assert taken.result.resolve() == {"data": "first"}  # type: ignore[union-attr]
        queue = registry.lookup(key)
        assert [m.request.variables for m in queue] == [{"id": "2"}, {"id": "1"}]

    def test_no_match_returns_none_and_keeps_queue(self) -> None:
        registry = ResponseRegistry()
        registry.register(_mock({"id": "1"}))
        key = registry.fingerprint(GraphQLRequest(query=GET_USER))
        assert registry.take(key, {"id": "3"}) is None
        assert len(registry.lookup(key)) == 1

    def test_absent_variables_match_empty(self) -> None:
        registry = ResponseRegistry()
        registry.register(_mock({}))
        key = registry.fingerprint(GraphQLRequest(query=GET_USER))
        assert registry.take(key, None) is not None

    def test_new_data_regenerates_and_requeues(self) -> None:
        counter = iter(range(100))
        registry = ResponseRegistry()
        registry.register(
            _mock({"id": "1"}, new_data=lambda: {"data": next(counter)})
        )
        registry.register(_mock({"id": "2"}))
        key = registry.fingerprint(GraphQLRequest(query=GET_USER))

        first = registry.take(key, {"id": "1"})
        assert first is not None
        assert first.result.resolve() == {"data": 0}  # type: ignore[union-attr]
        queue = registry.lookup(key)
        assert len(queue) == 2
        assert queue[-1] is first

        second = registry.take(key, {"id": "1"})
        assert second is not None
        assert second.result.resolve() == {"data": 1}  # type: ignore[union-attr]
        assert len(registry.lookup(key)) == 2

    def test_taken_response_not_changed_by_later_regeneration(self) -> None:
        counter = iter(range(100))
        registry = ResponseRegistry()
        registry.register(_mock({}, new_data=lambda: {"data": next(counter)}))
        key = registry.fingerprint(GraphQLRequest(query=GET_USER))

        first = registry.take(key, {})
        second = registry.take(key, {})
        assert first is not None
        assert second is not None
        assert first is not second
        assert first.result.resolve() == {"data": 0}  # type: ignore[union-attr]
        assert second.result.resolve() == {"data": 1}  # type: ignore[union-attr]
        assert registry.lookup(key) == [second]

    def test_concurrent_takes_never_share_a_mock(self) -> None:
        registry = ResponseRegistry()
        for i in range(50):
            registry.register(_mock({}, result={"data": i}))
        key = registry.fingerprint(GraphQLRequest(query=GET_USER))
        taken: list[MockedResponse] = []
        lock = threading.Lock()

        def worker() -> None:
            while (mock := registry.take(key, {})) is not None:
                with lock:
                    taken.append(mock)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(taken) == 50
        assert len({id(m) for m in taken}) == 50
