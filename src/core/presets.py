"""Voice presets.

A preset pairs one of the speech service's base voices with a playback speed.
Speeds above 1.0 shorten and raise the voice (children), speeds below 1.0
lengthen and lower it (elderly speakers).
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional

from src.core.errors import InvalidParameter

__all__ = [
    "VOICES",
    "PRESET_GROUPS",
    "VoicePreset",
    "VOICE_PRESETS",
    "get_preset",
    "list_presets",
    "match_preset",
]

VOICES = ("Puck", "Charon", "Kore", "Fenrir", "Zephyr")
PRESET_GROUPS = ("child", "adult", "elderly")

_SPEED_TOLERANCE = 0.01


@dataclass(frozen=True)
class VoicePreset:
    id: str
    label: str
    voice: str
    speed: float
    group: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


VOICE_PRESETS: List[VoicePreset] = [
    # 儿童 / 青少年 (更快、更高)
    VoicePreset("boy_1", "Little Boy", "Puck", 1.2, "child"),
    VoicePreset("girl_1", "Little Girl", "Kore", 1.25, "child"),
    VoicePreset("boy_teen", "Teen Boy", "Fenrir", 1.1, "child"),
    VoicePreset("girl_teen", "Teen Girl", "Zephyr", 1.15, "child"),
    # 成人 (原速)
    VoicePreset("man_1", "Man (Neutral)", "Puck", 1.0, "adult"),
    VoicePreset("man_2", "Man (Deep)", "Charon", 1.0, "adult"),
    VoicePreset("man_3", "Man (Bass)", "Fenrir", 1.0, "adult"),
    VoicePreset("woman_1", "Woman (Calm)", "Kore", 1.0, "adult"),
    VoicePreset("woman_2", "Woman (Bright)", "Zephyr", 1.0, "adult"),
    # 老人 (更慢、更低)
    VoicePreset("old_man_1", "Old Man (Wise)", "Charon", 0.9, "elderly"),
    VoicePreset("old_man_2", "Grandpa (Slow)", "Fenrir", 0.85, "elderly"),
    VoicePreset("old_woman_1", "Grandma", "Kore", 0.9, "elderly"),
    VoicePreset("old_woman_2", "Old Woman (Slow)", "Zephyr", 0.85, "elderly"),
]

_PRESETS_BY_ID = {p.id: p for p in VOICE_PRESETS}


def get_preset(preset_id: str) -> VoicePreset:
    try:
        return _PRESETS_BY_ID[preset_id]
    except KeyError:
        raise InvalidParameter(f"Unknown voice preset: {preset_id!r}") from None


def list_presets(group: Optional[str] = None) -> List[VoicePreset]:
    if group is None:
        return list(VOICE_PRESETS)
    if group not in PRESET_GROUPS:
        raise InvalidParameter(f"Unknown preset group {group!r}, expected one of {PRESET_GROUPS}")
    return [p for p in VOICE_PRESETS if p.group == group]


def match_preset(voice: str, speed: float) -> Optional[VoicePreset]:
    """Find the preset a (voice, speed) pair corresponds to, if any."""
    for preset in VOICE_PRESETS:
        if preset.voice == voice and abs(preset.speed - speed) < _SPEED_TOLERANCE:
            return preset
    return None
