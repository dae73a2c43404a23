"""Tests for specscope.request -- drafts, validation and preparation."""

from __future__ import annotations

import json

import pytest

from specscope.models import (
    ApiKeyAuth,
    AuthConfig,
    AuthType,
    BearerAuth,
    Endpoint,
    HTTPMethod,
    Parameter,
    ParameterLocation,
    ParsedSpec,
    RequestBody,
    RequestDraft,
)
from specscope.request import (
    build_path,
    draft_from_endpoint,
    is_valid,
    missing_required,
    prepare,
)


def _endpoint(spec: ParsedSpec, endpoint_id: str) -> Endpoint:
    return next(e for e in spec.endpoints if e.id == endpoint_id)


def _search_endpoint() -> Endpoint:
    return Endpoint(
        id="GET-/items/{id}",
        method=HTTPMethod.GET,
        path="/items/{id}",
        parameters=[
            Parameter(name="id", location=ParameterLocation.PATH, required=True),
            Parameter(name="q", location=ParameterLocation.QUERY, required=True),
            Parameter(name="flag", location=ParameterLocation.QUERY, default=True),
            Parameter(name="ids", location=ParameterLocation.QUERY, example=[1, 2]),
            Parameter(name="X-Trace", location=ParameterLocation.HEADER, default="t"),
        ],
    )


class TestDraftFromEndpoint:
    def test_defaults_and_blank_values(self, petstore_spec: ParsedSpec) -> None:
        draft = draft_from_endpoint(_endpoint(petstore_spec, "GET-/pets"))

        assert draft.query_params == {"limit": "20", "status": ""}
        assert draft.path_params == {}
        assert draft.headers == {}
        assert draft.body == ""
        assert draft.content_type == "application/json"

    def test_header_parameters_not_prefilled(self) -> None:
        draft = draft_from_endpoint(_search_endpoint())
        assert draft.headers == {}

    def test_values_are_stringified(self) -> None:
        draft = draft_from_endpoint(_search_endpoint())

        assert draft.path_params == {"id": ""}
        assert draft.query_params == {"q": "", "flag": "true", "ids": "[1, 2]"}

    def test_body_from_synthesized_example(self, petstore_spec: ParsedSpec) -> None:
        draft = draft_from_endpoint(_endpoint(petstore_spec, "POST-/pets"))

        assert json.loads(draft.body) == {
            "name": "string",
            "tag": "string",
            "birthday": "2024-01-01",
            "vaccinated": False,
        }
        assert draft.body.startswith("{\n  ")

    def test_body_content_type(self) -> None:
        endpoint = Endpoint(
            id="PUT-/x",
            method=HTTPMethod.PUT,
            path="/x",
            request_body=RequestBody(content_type="application/xml", example="<x/>"),
        )

        draft = draft_from_endpoint(endpoint)

        assert draft.content_type == "application/xml"
        assert draft.body == '"<x/>"'


class TestValidation:
    def test_missing_required(self) -> None:
        draft = draft_from_endpoint(_search_endpoint())

        assert missing_required(draft) == ["id", "q"]
        assert not is_valid(draft)

    def test_filled(self) -> None:
        draft = draft_from_endpoint(_search_endpoint())
        draft = draft.model_copy(
            update={"path_params": {"id": "1"}, "query_params": {**draft.query_params, "q": "x"}}
        )

        assert missing_required(draft) == []
        assert is_valid(draft)

    def test_required_body(self, petstore_spec: ParsedSpec) -> None:
        draft = draft_from_endpoint(_endpoint(petstore_spec, "POST-/pets"))
        blank = draft.model_copy(update={"body": "  \n"})

        assert missing_required(draft) == []
        assert missing_required(blank) == ["body"]

    def test_no_endpoint(self) -> None:
        assert not is_valid(RequestDraft())
        assert missing_required(RequestDraft()) == []


class TestBuildPath:
    def test_substitutes_and_encodes(self) -> None:
        draft = RequestDraft(
            endpoint=_search_endpoint(),
            path_params={"id": "a b/c"},
            query_params={"q": "x&y", "flag": "", "ids": "it's"},
        )

        assert build_path(draft) == "/items/a%20b%2Fc?q=x%26y&ids=it's"

    def test_no_query(self) -> None:
        draft = RequestDraft(endpoint=_search_endpoint(), path_params={"id": "42"})
        assert build_path(draft) == "/items/42"

    def test_no_endpoint(self) -> None:
        assert build_path(RequestDraft()) == ""


class TestPrepare:
    def test_interpolation_and_auth(self) -> None:
        draft = RequestDraft(
            endpoint=_search_endpoint(),
            path_params={"id": "{{item}}"},
            query_params={"q": "{{term}}", "flag": ""},
            headers={"X-User": "{{user}}"},
        )
        auth = AuthConfig(
            type=AuthType.API_KEY,
            api_key=ApiKeyAuth(name="api_key", value="k1", location="query"),
        )
        variables = {"item": "a/b", "term": "cats", "user": "ann", "host": "https://api.dev"}

        prepared = prepare(draft, "{{host}}/", variables, auth)

        assert prepared.method == HTTPMethod.GET
        assert prepared.url == "https://api.dev/items/a%2Fb"
        assert prepared.params == {"q": "cats", "api_key": "k1"}
        assert prepared.path == "/items/a%2Fb?q=cats&api_key=k1"
        assert prepared.headers == {"X-User": "ann"}
        assert prepared.body is None

    def test_body_and_header_layering(self) -> None:
        endpoint = Endpoint(id="POST-/x", method=HTTPMethod.POST, path="/x")
        draft = RequestDraft(
            endpoint=endpoint,
            body='{"id": "{{id}}"}',
            content_type="application/vnd.api+json",
            headers={"Authorization": "Bearer mine"},
        )
        auth = AuthConfig(type=AuthType.BEARER, bearer=BearerAuth(token="stored"))

        prepared = prepare(draft, "https://api.dev", {"id": "9"}, auth)

        assert prepared.body == '{"id": "9"}'
        assert prepared.headers == {
            "Content-Type": "application/vnd.api+json",
            "Authorization": "Bearer mine",
        }

    def test_blank_body_is_none_and_no_content_type(self) -> None:
        endpoint = Endpoint(id="POST-/x", method=HTTPMethod.POST, path="/x")
        prepared = prepare(RequestDraft(endpoint=endpoint, body="  "), "https://a", {}, AuthConfig())

        assert prepared.body is None
        assert "Content-Type" not in prepared.headers

    def test_unresolved_variables_kept(self) -> None:
        endpoint = Endpoint(id="GET-/x", method=HTTPMethod.GET, path="/x")
        draft = RequestDraft(endpoint=endpoint, headers={"X-Token": "{{token}}"})

        prepared = prepare(draft, "https://a", {}, AuthConfig())

        assert prepared.headers == {"X-Token": "{{token}}"}

    def test_requires_endpoint(self) -> None:
        with pytest.raises(ValueError, match="without an endpoint"):
            prepare(RequestDraft(), "https://a", {}, AuthConfig())
