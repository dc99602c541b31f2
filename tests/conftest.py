"""
Shared fixtures: every test gets its own SQLite database and an empty listener registry.
"""
import os
import tempfile

import pytest

# Importing the API initializes a database; keep it out of the working tree
os.environ.setdefault('DB_PATH', tempfile.mkstemp(suffix='.db')[1])

from wikicontest.core import hooks
from wikicontest.core.db import init_db


@pytest.fixture(autouse=True)
def temp_db(tmp_path, monkeypatch):
    """Point DB_PATH at a fresh database for each test."""
    db_path = tmp_path / "contest.db"
    monkeypatch.setenv("DB_PATH", str(db_path))
    init_db()
    hooks.clear_listeners()
    yield db_path
    hooks.clear_listeners()


@pytest.fixture
def contest_form():
    """Form definition shaped like the contest entry form."""
    return {
        "id": "3",
        "fields": [
            {
                "id": "1",
                "label": "Your name",
                "adminLabel": "submitter_name",
            },
            {"id": "2", "label": "Email", "adminLabel": "submitter_email"},
            {"id": "4", "label": "Wiki username", "adminLabel": "submitter_wiki_user"},
            {"id": "5", "label": "How did you make this sound?", "adminLabel": "explanation_creation"},
            {"id": "6", "label": "All sounds are original", "adminLabel": "all_original_sounds"},
            {
                "id": "7",
                "label": "Contributors",
                "inputs": [
                    {"key": "7.1", "label": "contributor_1"},
                    {"key": "7.2", "label": "contributor_2"},
                    {"key": "7.3", "label": "contributor_3"},
                    {"key": "", "label": "unused"},
                ],
            },
            {"id": "8", "label": "Audio file", "adminLabel": "audio_file"},
            {"id": "21", "label": "audio_file_meta"},
        ],
    }


@pytest.fixture
def contest_entry():
    return {
        "1": "Ada Lovelace",
        "2": "ada@example.org",
        "4": "Ada_L",
        "5": "Recorded a <b>kettle</b> whistle",
        "6": "Yes",
        "7.1": "",
        "7.2": "Bob",
        "7.3": "Amy",
        "8": "https://uploads.example.org/kettle.wav",
        "21": '{"name": "kettle.wav", "type": "audio/wav", "size": 48000, '
              '"sampleRate": 44100, "numberOfChannels": 2, "duration": 0.5}',
    }
