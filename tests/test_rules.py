"""
Tests for the automatic screening rules.
"""

import pytest

from wikicontest.core.rules import evaluate
from wikicontest.core.schema import AudioFileMeta


class TestDurationRules:

    @pytest.mark.parametrize("duration", [1.0, 2.5, 4.0])
    def test_within_bounds_produces_no_flags(self, duration):
        assert evaluate(AudioFileMeta(duration=duration)) == set()

    def test_just_below_minimum_is_too_short(self):
        assert evaluate(AudioFileMeta(duration=0.999)) == {"sound_too_short"}

    def test_just_above_maximum_is_too_long(self):
        assert evaluate(AudioFileMeta(duration=4.001)) == {"sound_too_long"}

    def test_zero_duration_is_too_short(self):
        assert evaluate(AudioFileMeta(duration=0.0)) == {"sound_too_short"}


class TestBitrateRule:

    def test_below_threshold_flags_bitrate(self):
        # 6000 * 32 = 192000 < 196608
        assert evaluate(AudioFileMeta(sample_rate=6000)) == {"bitrate_too_low"}

    def test_exact_threshold_is_allowed(self):
        # 6144 * 32 = 196608
        assert evaluate(AudioFileMeta(sample_rate=6144)) == set()

    def test_common_sample_rate_is_allowed(self):
        assert evaluate(AudioFileMeta(sample_rate=44100)) == set()


def test_rules_co_fire():
    # 4000 * 32 = 128000 < 196608
    flags = evaluate(AudioFileMeta(duration=0.5, sample_rate=4000))
    assert flags == {"sound_too_short", "bitrate_too_low"}


@pytest.mark.parametrize("meta", [None, {}, AudioFileMeta(), "not metadata"])
def test_absent_meta_produces_no_flags(meta):
    assert evaluate(meta) == set()


def test_meta_passing_every_rule_produces_no_flags():
    assert evaluate(AudioFileMeta(duration=2.0, sample_rate=48000, name="ok.wav")) == set()


def test_accepts_stored_dict_shape():
    assert evaluate({"duration": 5, "sampleRate": 44100}) == {"sound_too_long"}


def test_fields_without_rules_alone_produce_no_flags():
    assert evaluate(AudioFileMeta(name="x.wav", size=10)) == set()


def test_string_valued_dict_is_coerced():
    assert evaluate({"duration": "0.5", "sampleRate": "4000"}) == {"sound_too_short", "bitrate_too_low"}


def test_unparseable_dict_values_do_not_raise():
    assert evaluate({"duration": "2.0", "sampleRate": "not a number"}) == {"bitrate_too_low"}
