import json

from conftest import ADMIN_TOKEN, API_KEY, answer_text
from fastapi.testclient import TestClient

from main import app

client = TestClient(app)

ADMIN = {"x-admin-token": ADMIN_TOKEN}

NEW_EXAM = {
    "examName": "Academic Reading 1",
    "examType": "reading",
    "items": [
        {
            "kind": "reading",
            "content": "Paris is the capital of France.",
            "questionMarkup": "[!num]\nCapital of France?\n[*]Paris\n[ ]Lyon\n[!num] River: [T*Seine]",
            "displayOrder": 1,
        },
        {"kind": "listening", "questionMarkup": "[!num] [D][*]Cat[ ]Dog[/D]", "displayOrder": 0},
    ],
}


def test_admin_routes_require_token():
    r = client.post("/admin/exams", json=NEW_EXAM)
    assert r.status_code == 401
    r = client.post("/admin/exams", json=NEW_EXAM, headers={"x-admin-token": "nope"})
    assert r.status_code == 401


def test_admin_token_not_configured(monkeypatch):
    monkeypatch.delenv("ADMIN_TOKEN")
    r = client.post("/admin/exams", json=NEW_EXAM, headers=ADMIN)
    assert r.status_code == 500


def test_create_and_read_exam():
    r = client.post("/admin/exams", json=NEW_EXAM, headers=ADMIN)
    assert r.status_code == 201
    created = r.json()
    assert created["examName"] == "Academic Reading 1"
    assert len(created["readings"]) == 1 and len(created["listenings"]) == 1

    reading = created["readings"][0]
    assert json.loads(reading["correctAnswer"]) == ["Paris", "Seine"]
    assert "Q1." in reading["questionHtml"] and "Q2." in reading["questionHtml"]
    assert json.loads(created["listenings"][0]["correctAnswer"]) == ["Cat"]

    r = client.get(f"/exams/{created['examId']}")
    assert r.status_code == 200
    assert r.json()["readings"][0]["questionMarkup"] == NEW_EXAM["items"][0]["questionMarkup"]

    listed = client.get("/exams").json()
    assert [e["examId"] for e in listed] == [created["examId"]]


def test_get_missing_exam():
    r = client.get("/exams/31337")
    assert r.status_code == 404


def test_invalid_item_kind_is_rejected():
    bad = {**NEW_EXAM, "items": [{"kind": "maths", "questionMarkup": ""}]}
    r = client.post("/admin/exams", json=bad, headers=ADMIN)
    assert r.status_code == 422


def test_update_and_delete_exam():
    exam_id = client.post("/admin/exams", json=NEW_EXAM, headers=ADMIN).json()["examId"]

    r = client.put(f"/admin/exams/{exam_id}", json={"examName": "Renamed"}, headers=ADMIN)
    assert r.status_code == 200
    assert r.json()["examName"] == "Renamed"
    assert r.json()["examType"] == "reading"

    assert client.delete(f"/admin/exams/{exam_id}", headers=ADMIN).status_code == 204
    assert client.get(f"/exams/{exam_id}").status_code == 404
    assert client.delete(f"/admin/exams/{exam_id}", headers=ADMIN).status_code == 404


def test_item_authoring_and_lock():
    exam_id = client.post("/admin/exams", json=NEW_EXAM, headers=ADMIN).json()["examId"]

    r = client.post(
        f"/admin/exams/{exam_id}/items",
        json={"kind": "reading", "questionMarkup": "[!num] Year: [T*1889]"},
        headers=ADMIN,
    )
    assert r.status_code == 201
    item = r.json()
    assert item["correctAnswer"] == '["1889"]'

    r = client.put(
        f"/admin/items/{item['id']}",
        json={"questionMarkup": "[!num] Year: [T*1900]"},
        headers=ADMIN,
    )
    assert r.status_code == 200
    assert r.json()["correctAnswer"] == '["1900"]'

    # once someone has sat the exam its items are frozen
    client.post(
        "/exams/submit",
        json={"examId": exam_id, "answerText": answer_text((item["id"], ["1900"]))},
        headers={"x-api-key": API_KEY, "x-user-id": "2"},
    )
    r = client.put(f"/admin/items/{item['id']}", json={"content": "x"}, headers=ADMIN)
    assert r.status_code == 409
    assert client.delete(f"/admin/items/{item['id']}", headers=ADMIN).status_code == 409


def test_missing_item():
    r = client.put("/admin/items/777", json={"content": "x"}, headers=ADMIN)
    assert r.status_code == 404


def test_attempted_exam_cannot_be_deleted_or_retyped():
    created = client.post("/admin/exams", json=NEW_EXAM, headers=ADMIN).json()
    exam_id = created["examId"]
    reading_id = created["readings"][0]["id"]
    client.post(
        "/exams/submit",
        json={"examId": exam_id, "answerText": answer_text((reading_id, ["Paris"]))},
        headers={"x-api-key": API_KEY, "x-user-id": "3"},
    )

    r = client.delete(f"/admin/exams/{exam_id}", headers=ADMIN)
    assert r.status_code == 409
    r = client.put(f"/admin/exams/{exam_id}", json={"examType": "listening"}, headers=ADMIN)
    assert r.status_code == 409
    assert client.get(f"/exams/{exam_id}").json()["examType"] == "reading"
    assert len(client.get("/attempts/user/3").json()) == 1
