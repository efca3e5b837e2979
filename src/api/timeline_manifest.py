"""Timeline manifest (`manifest`) parsing + validation.

A manifest is a JSON list describing the ordered fragments of a timeline:

    [
      {"type": "generated", "pcm_base64": "...", "preset": "girl_1", "delay": 1.0},
      {"type": "uploaded", "file_index": 0, "trim_start": 0.5, "trim_end": 3.0}
    ]

The HTTP API sends it as a multipart form field next to the uploaded files.
The CLI reads it from disk, where fragments reference files by path
(`pcm_path` / `path`) instead of inline data or upload indexes.
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from src.core.audio.buffer import SampleBuffer
from src.core.fragments import DEFAULT_DELAY, Fragment, GeneratedFragment, UploadedFragment, resolve_speed
from src.core.presets import get_preset

__all__ = ["parse_timeline_manifest", "build_fragments"]

_MAX_MANIFEST_CHARS = 50_000_000
_FRAGMENT_TYPES = ("generated", "uploaded")

_GENERATED_KEYS = {"type", "pcm_base64", "pcm_path", "speed", "preset", "delay"}
_UPLOADED_KEYS = {"type", "file_index", "path", "trim_start", "trim_end", "delay"}


def parse_timeline_manifest(manifest_str: Optional[str], *, allow_paths: bool = False) -> List[Dict[str, Any]]:
    """Parse and validate a timeline manifest.

    Args:
        manifest_str: JSON string.
        allow_paths: accept `pcm_path` / `path` file references (CLI only).

    Returns:
        List of validated fragment entries, in timeline order.

    Raises:
        ValueError: on invalid JSON or schema violations.
    """
    if manifest_str is None:
        raise ValueError("manifest is required")

    s = str(manifest_str).strip()
    if not s:
        raise ValueError("manifest is required")

    # Basic payload size guard (inline base64 PCM can be large, but not unbounded).
    if len(s) > _MAX_MANIFEST_CHARS:
        raise ValueError("manifest is too large")

    try:
        obj = json.loads(s)
    except json.JSONDecodeError as e:
        raise ValueError(f"manifest is not valid JSON: {e.msg} (pos={e.pos})") from e

    if isinstance(obj, dict) and "fragments" in obj:
        obj = obj["fragments"]
    if not isinstance(obj, list):
        raise ValueError("manifest must be a JSON list of fragments")

    return [_validate_entry(i, entry, allow_paths=allow_paths) for i, entry in enumerate(obj)]


def _validate_entry(index: int, entry: Any, *, allow_paths: bool) -> Dict[str, Any]:
    where = f"manifest[{index}]"
    if not isinstance(entry, dict):
        raise ValueError(f"{where} must be an object")

    kind = entry.get("type")
    if kind not in _FRAGMENT_TYPES:
        raise ValueError(f"{where}.type must be one of: {', '.join(_FRAGMENT_TYPES)}")

    allowed = _GENERATED_KEYS if kind == "generated" else _UPLOADED_KEYS
    unknown = [k for k in entry.keys() if k not in allowed]
    if unknown:
        raise ValueError(f"Unknown {where} keys: {unknown}")

    _check_optional_number(entry, "delay", where, minimum=0.0)

    if kind == "generated":
        sources = [k for k in ("pcm_base64", "pcm_path") if k in entry]
        if len(sources) != 1:
            raise ValueError(f"{where} needs exactly one of pcm_base64, pcm_path")
        if "pcm_path" in entry and not allow_paths:
            raise ValueError(f"{where}.pcm_path is not allowed here")
        if not isinstance(entry[sources[0]], str):
            raise ValueError(f"{where}.{sources[0]} must be a string")
        _check_optional_number(entry, "speed", where, minimum=0.0, exclusive=True)
        if "preset" in entry and entry["preset"] is not None:
            if not isinstance(entry["preset"], str):
                raise ValueError(f"{where}.preset must be a string")
            get_preset(entry["preset"])
    else:
        sources = [k for k in ("file_index", "path") if k in entry]
        if len(sources) != 1:
            raise ValueError(f"{where} needs exactly one of file_index, path")
        if "path" in entry:
            if not allow_paths:
                raise ValueError(f"{where}.path is not allowed here")
            if not isinstance(entry["path"], str):
                raise ValueError(f"{where}.path must be a string")
        elif not _is_int(entry["file_index"]) or entry["file_index"] < 0:
            raise ValueError(f"{where}.file_index must be a non-negative integer")
        _check_optional_number(entry, "trim_start", where)
        _check_optional_number(entry, "trim_end", where)

    return dict(entry)


def _check_optional_number(
    entry: Dict[str, Any],
    key: str,
    where: str,
    *,
    minimum: Optional[float] = None,
    exclusive: bool = False,
) -> None:
    if entry.get(key) is None:
        return
    v = entry[key]
    if not _is_number(v):
        raise ValueError(f"{where}.{key} must be a number")
    if not math.isfinite(v):
        raise ValueError(f"{where}.{key} must be a finite number")
    if minimum is not None:
        if exclusive and not float(v) > minimum:
            raise ValueError(f"{where}.{key} must be > {minimum}")
        if not exclusive and float(v) < minimum:
            raise ValueError(f"{where}.{key} must be >= {minimum}")


def _is_int(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def build_fragments(
    entries: Sequence[Dict[str, Any]],
    *,
    uploads: Sequence[SampleBuffer] = (),
    base_dir: Optional[Path] = None,
    load_audio_file: Optional[Callable[[Path], SampleBuffer]] = None,
    default_delay: float = DEFAULT_DELAY,
    default_speed: float = 1.0,
) -> List[Fragment]:
    """Turn validated manifest entries into engine fragments.

    `uploads` resolves `file_index`; `base_dir` resolves relative `pcm_path` /
    `path`, and `load_audio_file` decodes the latter. `default_delay` and
    `default_speed` fill in entries that set neither a value nor a preset.
    """
    fragments: List[Fragment] = []
    for index, entry in enumerate(entries):
        delay = entry.get("delay")
        delay = default_delay if delay is None else float(delay)

        if entry["type"] == "generated":
            if "pcm_base64" in entry:
                fragments.append(
                    GeneratedFragment.from_base64(
                        entry["pcm_base64"],
                        speed=entry.get("speed"),
                        preset=entry.get("preset"),
                        delay=delay,
                        default_speed=default_speed,
                    )
                )
                continue
            speed = resolve_speed(entry.get("speed"), entry.get("preset"), default_speed)
            data = _resolve(entry["pcm_path"], base_dir).read_bytes()
            fragments.append(GeneratedFragment(pcm=data, speed=float(speed), delay=delay))
            continue

        if "file_index" in entry:
            file_index = entry["file_index"]
            if file_index >= len(uploads):
                raise ValueError(
                    f"manifest[{index}].file_index={file_index} but only {len(uploads)} files were uploaded"
                )
            buffer = uploads[file_index]
        else:
            if load_audio_file is None:
                raise ValueError(f"manifest[{index}].path cannot be loaded here")
            buffer = load_audio_file(_resolve(entry["path"], base_dir))

        fragments.append(
            UploadedFragment(
                buffer=buffer,
                trim_start=entry.get("trim_start"),
                trim_end=entry.get("trim_end"),
                delay=delay,
            )
        )
    return fragments


def _resolve(path_str: str, base_dir: Optional[Path]) -> Path:
    path = Path(path_str)
    if not path.is_absolute() and base_dir is not None:
        path = base_dir / path
    return path
