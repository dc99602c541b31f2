"""
HTTP API tests using the FastAPI test client.
"""

import pytest
from fastapi.testclient import TestClient

from wikicontest.api.main import app
from wikicontest.core.screening import bootstrap


@pytest.fixture
def client():
    bootstrap()
    return TestClient(app)


@pytest.fixture
def submitted(client, contest_form, contest_entry):
    response = client.post("/submissions", json={"form": contest_form, "entry": contest_entry})
    assert response.status_code == 200
    return response.json()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["db_health"] is True
    assert data["submission_count"] == 0


def test_submit_entry_returns_automated_flags(submitted):
    assert submitted["success"] is True
    assert submitted["id"] > 0
    assert len(submitted["unique_code"]) == 32
    assert submitted["flags"] == ["sound_too_short"]


def test_submit_entry_accepts_numeric_ids(client):
    form = {"id": 3, "fields": [{"id": 2, "label": "Email", "adminLabel": "submitter_email"}]}
    response = client.post("/submissions", json={"form": form, "entry": {"2": "a@b.c"}})

    assert response.status_code == 200
    submission = client.get(f"/submissions/{response.json()['id']}").json()
    assert submission["submitter_email"] == "a@b.c"
    assert submission["audio_file_meta"] == {}


def test_get_submission(client, submitted):
    response = client.get(f"/submissions/{submitted['id']}")
    assert response.status_code == 200

    data = response.json()
    assert data["unique_code"] == submitted["unique_code"]
    assert data["title"] == f"Submission {submitted['unique_code']}"
    assert data["contributing_authors"] == ["Bob", "Amy"]
    assert data["audio_file_meta"]["sampleRate"] == 44100
    assert data["creation_process"]["all_original_sounds"] == "Yes"


def test_get_missing_submission(client):
    assert client.get("/submissions/999").status_code == 404


def test_screening_flow(client, submitted):
    submission_id = submitted["id"]

    response = client.post(
        f"/submissions/{submission_id}/screening",
        json={"decision": "eligible", "flags": ["bitrate_too_low", "not_a_real_flag"], "author": "Screener 1"}
    )
    assert response.status_code == 200
    assert response.json()["flags"] == ["bitrate_too_low"]

    client.post(f"/submissions/{submission_id}/screening", json={"decision": "ineligible"})
    client.post(f"/submissions/{submission_id}/screening", json={"flags": ["sound_too_long"]})

    results = client.get(f"/submissions/{submission_id}/screening").json()
    assert results["decision"] == ["eligible", "ineligible"]
    assert results["flags"] == ["bitrate_too_low", "sound_too_long", "sound_too_short"]

    events = client.get(f"/submissions/{submission_id}/screening/events").json()["events"]
    assert [event["decision"] for event in events] == ["none", "eligible", "ineligible", "none"]
    assert events[1]["author"] == "Screener 1"


def test_invalid_decision_is_rejected(client, submitted):
    response = client.post(f"/submissions/{submitted['id']}/screening", json={"decision": "maybe"})
    assert response.status_code == 422


def test_screening_missing_submission(client):
    response = client.post("/submissions/999/screening", json={"decision": "eligible"})
    assert response.status_code == 404
    assert client.get("/submissions/999/screening").status_code == 404


def test_flag_registry(client):
    flags = client.get("/screening/flags").json()["flags"]
    assert flags == {
        "sound_too_short": "< 1s duration",
        "sound_too_long": "> 4s duration",
        "bitrate_too_low": "Bitrate too low",
    }


def test_audio_meta_field(client, contest_form):
    response = client.post("/forms/audio-meta-field", json=contest_form)
    assert response.status_code == 200
    assert response.json() == {"field_id": "input_3_21"}


def test_audio_meta_field_absent(client):
    response = client.post("/forms/audio-meta-field", json={"id": "3", "fields": []})
    assert response.json() == {"field_id": None}
