import pytest

from src.core.errors import InvalidParameter
from src.core.presets import PRESET_GROUPS, VOICE_PRESETS, VOICES, get_preset, list_presets, match_preset


def test_preset_ids_are_unique_and_voices_known():
    ids = [p.id for p in VOICE_PRESETS]
    assert len(ids) == len(set(ids))
    assert all(p.voice in VOICES for p in VOICE_PRESETS)
    assert all(p.group in PRESET_GROUPS for p in VOICE_PRESETS)


def test_preset_speeds_follow_age_group():
    assert all(p.speed > 1.0 for p in list_presets("child"))
    assert all(p.speed == 1.0 for p in list_presets("adult"))
    assert all(p.speed < 1.0 for p in list_presets("elderly"))
    assert len(list_presets()) == len(VOICE_PRESETS)


def test_get_preset():
    preset = get_preset("girl_1")
    assert preset.voice == "Kore"
    assert preset.speed == 1.25
    assert preset.to_dict()["group"] == "child"


def test_unknown_preset_and_group_raise_value_errors():
    with pytest.raises(InvalidParameter):
        get_preset("robot")
    with pytest.raises(ValueError):
        list_presets("teen")


def test_match_preset_uses_speed_tolerance():
    assert match_preset("Kore", 1.249).id == "girl_1"
    assert match_preset("Fenrir", 0.85).id == "old_man_2"
    assert match_preset("Kore", 1.5) is None
