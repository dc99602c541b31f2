"""
Tests for resolving raw form entries into label-keyed records.
"""

import pytest

from wikicontest.core.field_mapper import build_key_table, resolve, find_audio_meta_field
from wikicontest.core.schema import FormSchema


@pytest.fixture
def name_form():
    return FormSchema.from_dict({
        "id": "3",
        "fields": [
            {
                "id": "1",
                "label": "Your name",
                "inputs": [
                    {"key": "1.3", "label": "first"},
                    {"key": "1.6", "label": "last"},
                    {"key": "", "label": "prefix"},
                ],
            },
            {"id": "2", "label": "Email", "adminLabel": "submitter_email"},
            {"id": "21", "label": "audio_file_meta"},
        ],
    })


class TestKeyTable:

    def test_admin_label_preferred_over_label(self, name_form):
        table = build_key_table(name_form)
        assert table["2"] == "submitter_email"
        assert table["21"] == "audio_file_meta"

    def test_sub_inputs_use_their_own_labels(self, name_form):
        table = build_key_table(name_form)
        assert table["1.3"] == "first"
        assert table["1.6"] == "last"

    def test_sub_inputs_without_key_are_skipped(self, name_form):
        table = build_key_table(name_form)
        assert "prefix" not in table.values()
        assert "" not in table

    def test_composite_keys_stay_distinct_from_parent(self):
        schema = FormSchema.from_dict({
            "fields": [
                {"id": 21, "label": "Parent", "inputs": [{"key": "21.3", "label": "child"}]},
            ]
        })
        table = build_key_table(schema)
        assert table == {"21": "Parent", "21.3": "child"}


class TestResolve:

    def test_resolves_entry_by_label(self, name_form):
        record = resolve(name_form, {"1.3": "Ada", "1.6": "Lovelace", "2": "ada@example.org"})
        assert record == {"first": "Ada", "last": "Lovelace", "submitter_email": "ada@example.org"}

    def test_keys_missing_from_entry_are_omitted(self, name_form):
        record = resolve(name_form, {"2": "ada@example.org"})
        assert record == {"submitter_email": "ada@example.org"}
        assert "audio_file_meta" not in record

    def test_unknown_entry_keys_are_ignored(self, name_form):
        record = resolve(name_form, {"2": "a@b.c", "99": "stray", "form_id": "3"})
        assert record == {"submitter_email": "a@b.c"}

    def test_null_values_are_kept(self, name_form):
        record = resolve(name_form, {"2": None})
        assert record == {"submitter_email": None}

    def test_non_string_entry_keys_are_matched_as_text(self, name_form):
        record = resolve(name_form, {2: "a@b.c"})
        assert record == {"submitter_email": "a@b.c"}

    def test_label_collision_last_field_wins(self):
        schema = FormSchema.from_dict({
            "fields": [
                {"id": "4", "label": "A", "adminLabel": "dup"},
                {"id": "5", "label": "B", "adminLabel": "dup"},
            ]
        })
        assert resolve(schema, {"4": "first", "5": "second"}) == {"dup": "second"}
        assert resolve(schema, {"4": "first"}) == {"dup": "first"}

    def test_every_output_label_comes_from_a_shared_key(self, name_form):
        entry = {"1.3": "Ada", "2": "a@b.c", "404": "nope"}
        table = build_key_table(name_form)
        record = resolve(name_form, entry)

        shared_labels = {table[key] for key in table if key in entry}
        assert set(record) == shared_labels

    def test_empty_schema_yields_empty_record(self):
        assert resolve(FormSchema(fields=()), {"1": "x"}) == {}


class TestAudioMetaField:

    def test_finds_input_id(self, name_form):
        assert find_audio_meta_field(name_form) == "input_3_21"

    def test_missing_field_returns_none(self):
        schema = FormSchema.from_dict({"id": "3", "fields": [{"id": "1", "label": "Email"}]})
        assert find_audio_meta_field(schema) is None
