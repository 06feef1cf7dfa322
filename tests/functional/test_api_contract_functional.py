"""Functional tests for the HTTP contract.

Exercises the FastAPI app in-process against the SQLite test database:
survey CRUD, response submission and read-back, problem+json error bodies
and response headers. Successful bodies are checked against the component
schemas the app publishes in its own OpenAPI document.
"""

from __future__ import annotations

import typing as t

import pytest
from jsonschema import Draft202012Validator

from survey_tool.logic import errors


PROBLEM_JSON = "application/problem+json"


def _survey_payload() -> dict:
    return {
        "title": "Tooling pulse",
        "description": "Branching example",
        "questions": [
            {
                "ref": "q1",
                "text": "Which editor?",
                "type": 0,
                "order": 1,
                "options": [
                    {"ref": "a", "text": "A", "weight": 3},
                    {"ref": "b", "text": "B", "weight": 1},
                ],
            },
            {
                "ref": "q2",
                "text": "Which plugins?",
                "type": 1,
                "order": 2,
                "parent_question_ref": "q1",
                "visible_when_selected_option_refs": ["a"],
                "options": [
                    {"ref": "x", "text": "X", "weight": 2},
                    {"ref": "y", "text": "Y", "weight": 4},
                ],
            },
            {
                "ref": "q3",
                "text": "Why not A?",
                "type": 2,
                "order": 3,
                "parent_question_ref": "q1",
                "visible_when_selected_option_refs": ["b"],
            },
        ],
    }


def _validate_component(client, name: str, instance: t.Any) -> None:
    openapi = client.app.openapi()
    schema = {"$ref": f"#/components/schemas/{name}", "components": openapi["components"]}
    Draft202012Validator(schema).validate(instance)


def _create(client) -> dict:
    created = client.post("/api/v1/surveys", json=_survey_payload())
    assert created.status_code == 201, created.text
    survey_id = created.json()["id"]
    assert created.headers["Location"] == f"/api/v1/surveys/{survey_id}"
    view = client.get(f"/api/v1/surveys/{survey_id}").json()
    q1, q2, q3 = view["questions"]
    return {
        "survey": survey_id,
        "q1": q1["id"],
        "a": q1["options"][0]["id"],
        "b": q1["options"][1]["id"],
        "q2": q2["id"],
        "x": q2["options"][0]["id"],
        "y": q2["options"][1]["id"],
        "q3": q3["id"],
    }


def _assert_problem(resp, status: int, code: str, message: t.Optional[str] = None) -> dict:
    assert resp.status_code == status, resp.text
    assert resp.headers["content-type"].startswith(PROBLEM_JSON)
    body = resp.json()
    assert body["status"] == status
    assert body["code"] == code
    if message is not None:
        assert body["message"] == message
        assert body["detail"] == message
    return body


def test_create_get_and_list_survey(client) -> None:
    ids = _create(client)

    view = client.get(f"/api/v1/surveys/{ids['survey']}")
    assert view.status_code == 200
    body = view.json()
    _validate_component(client, "SurveyView", body)
    assert body["title"] == "Tooling pulse"
    assert [q["order"] for q in body["questions"]] == [1, 2, 3]
    assert body["questions"][1]["parent_question_id"] == ids["q1"]
    assert body["questions"][1]["visible_when_selected_option_ids"] == [ids["a"]]
    assert body["questions"][0]["visible_when_selected_option_ids"] is None

    listing = client.get("/api/v1/surveys")
    assert listing.status_code == 200
    assert listing.json() == [{"id": ids["survey"], "title": "Tooling pulse"}]


def test_submit_branching_response_returns_score_and_location(client) -> None:
    ids = _create(client)
    resp = client.post(
        f"/api/v1/surveys/{ids['survey']}/responses",
        json={
            "answers": [
                {"question_id": ids["q1"], "selected_option_ids": [ids["a"]]},
                {"question_id": ids["q2"], "selected_option_ids": [ids["x"], ids["y"]]},
            ]
        },
    )
    assert resp.status_code == 201, resp.text
    result = resp.json()
    _validate_component(client, "SubmitResponseResult", result)
    assert result["total_score"] == 9
    location = resp.headers["Location"]
    assert location == f"/api/v1/surveys/{ids['survey']}/responses/{result['response_id']}"

    stored = client.get(location)
    assert stored.status_code == 200
    stored_body = stored.json()
    _validate_component(client, "SurveyResponse", stored_body)
    assert stored_body["total_score"] == 9
    assert [i["question_id"] for i in stored_body["items"]] == [ids["q1"], ids["q2"]]
    assert [i["item_score"] for i in stored_body["items"]] == [3, 6]
    assert stored_body["items"][1]["selected_option_ids"] == [ids["x"], ids["y"]]


def test_submit_free_text_branch(client) -> None:
    ids = _create(client)
    resp = client.post(
        f"/api/v1/surveys/{ids['survey']}/responses",
        json={
            "answers": [
                {"question_id": ids["q1"], "selected_option_ids": [ids["b"]]},
                {"question_id": ids["q3"], "free_text": "Too slow"},
            ]
        },
    )
    assert resp.status_code == 201, resp.text
    assert resp.json()["total_score"] == 1


def test_submit_empty_answers_scores_zero(client) -> None:
    ids = _create(client)
    resp = client.post(f"/api/v1/surveys/{ids['survey']}/responses", json={"answers": []})
    assert resp.status_code == 201
    assert resp.json()["total_score"] == 0


@pytest.mark.parametrize(
    "build_answers, message",
    [
        (
            lambda ids: [
                {"question_id": ids["q1"], "selected_option_ids": [ids["b"]]},
                {"question_id": ids["q2"], "selected_option_ids": [ids["x"]]},
            ],
            errors.HIDDEN_QUESTION,
        ),
        (lambda ids: [{"question_id": "nope", "selected_option_ids": []}], errors.UNKNOWN_QUESTION),
        (lambda ids: [{"question_id": ids["q1"], "selected_option_ids": [ids["a"], ids["b"]]}], errors.SINGLE_CHOICE_COUNT),
        (lambda ids: [{"question_id": ids["q1"], "selected_option_ids": ["bogus"]}], errors.UNKNOWN_OPTION),
        (lambda ids: [{"question_id": ids["q1"]}], errors.CHOICE_WITHOUT_OPTIONS),
        (
            lambda ids: [
                {"question_id": ids["q1"], "selected_option_ids": [ids["b"]]},
                {"question_id": ids["q3"], "free_text": "t", "selected_option_ids": [ids["b"]]},
            ],
            errors.FREE_TEXT_WITH_OPTIONS,
        ),
    ],
)
def test_invalid_submission_returns_400_problem(client, build_answers, message) -> None:
    ids = _create(client)
    resp = client.post(f"/api/v1/surveys/{ids['survey']}/responses", json={"answers": build_answers(ids)})
    _assert_problem(resp, 400, "SUBMISSION_INVALID", message)


def test_empty_question_id_is_reported_as_unknown_question(client) -> None:
    ids = _create(client)
    resp = client.post(
        f"/api/v1/surveys/{ids['survey']}/responses",
        json={"answers": [{"question_id": "", "selected_option_ids": [ids["a"]]}]},
    )
    _assert_problem(resp, 400, "SUBMISSION_INVALID", errors.UNKNOWN_QUESTION)


def test_submit_to_unknown_survey_returns_404(client) -> None:
    resp = client.post("/api/v1/surveys/does-not-exist/responses", json={"answers": []})
    _assert_problem(resp, 404, "RESOURCE_NOT_FOUND", errors.SURVEY_NOT_FOUND)


def test_get_response_under_other_survey_returns_404(client) -> None:
    ids = _create(client)
    created = client.post(f"/api/v1/surveys/{ids['survey']}/responses", json={"answers": []}).json()
    resp = client.get(f"/api/v1/surveys/other/responses/{created['response_id']}")
    _assert_problem(resp, 404, "RESOURCE_NOT_FOUND", errors.RESPONSE_NOT_FOUND)


def test_malformed_body_returns_422_problem(client) -> None:
    ids = _create(client)
    resp = client.post(
        f"/api/v1/surveys/{ids['survey']}/responses",
        json={"answers": [{"selected_option_ids": "not-a-list"}]},
    )
    body = _assert_problem(resp, 422, "REQUEST_SCHEMA_INVALID")
    assert body["errors"]


def test_create_survey_with_bad_refs_returns_400(client) -> None:
    payload = _survey_payload()
    payload["questions"][1]["parent_question_ref"] = "ghost"
    resp = client.post("/api/v1/surveys", json=payload)
    _assert_problem(resp, 400, "SURVEY_DEFINITION_INVALID", errors.UNKNOWN_PARENT_REF)


def test_update_survey_with_bad_trigger_ref_uses_definition_code(client) -> None:
    ids = _create(client)
    payload = _survey_payload()
    payload["questions"][1]["visible_when_selected_option_refs"] = ["missing"]
    resp = client.put(f"/api/v1/surveys/{ids['survey']}", json=payload)
    body = _assert_problem(resp, 400, "SURVEY_DEFINITION_INVALID", errors.UNKNOWN_TRIGGER_OPTION_REF)
    assert body["code"] != "SUBMISSION_INVALID"


def test_create_choice_question_without_options_returns_422(client) -> None:
    payload = _survey_payload()
    payload["questions"][0]["options"] = []
    resp = client.post("/api/v1/surveys", json=payload)
    _assert_problem(resp, 422, "REQUEST_SCHEMA_INVALID")


def test_update_regenerates_ids_and_keeps_old_responses(client) -> None:
    ids = _create(client)
    submitted = client.post(
        f"/api/v1/surveys/{ids['survey']}/responses",
        json={"answers": [{"question_id": ids["q1"], "selected_option_ids": [ids["a"]]}]},
    ).json()

    payload = _survey_payload()
    payload["title"] = "Tooling pulse v2"
    resp = client.put(f"/api/v1/surveys/{ids['survey']}", json=payload)
    assert resp.status_code == 204

    view = client.get(f"/api/v1/surveys/{ids['survey']}").json()
    assert view["title"] == "Tooling pulse v2"
    assert view["questions"][0]["id"] != ids["q1"]
    assert view["questions"][1]["parent_question_id"] == view["questions"][0]["id"]

    old = client.get(f"/api/v1/surveys/{ids['survey']}/responses/{submitted['response_id']}")
    assert old.status_code == 200
    assert old.json()["total_score"] == 3


def test_delete_survey_then_get_returns_404(client) -> None:
    ids = _create(client)
    assert client.delete(f"/api/v1/surveys/{ids['survey']}").status_code == 204
    _assert_problem(client.get(f"/api/v1/surveys/{ids['survey']}"), 404, "RESOURCE_NOT_FOUND", errors.SURVEY_NOT_FOUND)
    _assert_problem(client.delete(f"/api/v1/surveys/{ids['survey']}"), 404, "RESOURCE_NOT_FOUND")
    _assert_problem(client.put(f"/api/v1/surveys/{ids['survey']}", json=_survey_payload()), 404, "RESOURCE_NOT_FOUND")


def test_unexpected_failure_returns_500_problem(mocker) -> None:
    from fastapi.testclient import TestClient

    from survey_tool.main import create_app

    mocker.patch(
        "survey_tool.logic.repository_surveys.get_survey_by_id",
        side_effect=RuntimeError("database exploded"),
    )
    with TestClient(create_app(), raise_server_exceptions=False) as c:
        resp = c.post("/api/v1/surveys/any/responses", json={"answers": []})
    body = _assert_problem(resp, 500, "INTERNAL_ERROR")
    assert "database exploded" not in resp.text
    assert body["title"]


def test_request_id_is_echoed_or_generated(client) -> None:
    echoed = client.get("/api/v1/surveys", headers={"X-Request-Id": "req-123"})
    assert echoed.headers["X-Request-Id"] == "req-123"
    generated = client.get("/api/v1/surveys")
    assert generated.headers.get("X-Request-Id")


def test_cors_exposes_location_header(client) -> None:
    resp = client.get("/api/v1/surveys", headers={"Origin": "http://example.test"})
    exposed = resp.headers.get("access-control-expose-headers", "")
    assert "Location" in exposed


def test_unknown_route_returns_problem_json(client) -> None:
    resp = client.get("/api/v1/nowhere")
    assert resp.status_code == 404
    assert resp.headers["content-type"].startswith(PROBLEM_JSON)


def test_openapi_operation_ids_are_unique(client) -> None:
    document = client.app.openapi()
    op_ids = [
        op["operationId"]
        for path_item in document["paths"].values()
        for op in path_item.values()
        if isinstance(op, dict) and "operationId" in op
    ]
    assert len(op_ids) == len(set(op_ids))
    assert {"listSurveys", "getSurvey", "createSurvey", "updateSurvey", "deleteSurvey", "submitResponse", "getResponse"} <= set(op_ids)
