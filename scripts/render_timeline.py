#!/usr/bin/env python3
"""Render a timeline manifest to a WAV file without running the HTTP service.

Manifest entries reference files relative to the manifest's directory:

    [
      {"type": "generated", "pcm_path": "line1.pcm", "preset": "girl_1", "delay": 1.0},
      {"type": "uploaded", "path": "intro.mp3", "trim_start": 0.5, "trim_end": 4.0}
    ]
"""
from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Sequence


def _repo_root() -> Path:
    # scripts/render_timeline.py lives under <repo>/scripts/.
    return Path(__file__).resolve().parents[1]


def _format_seconds(seconds: float) -> str:
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    return f"{seconds:.2f}s"


def main(argv: Sequence[str]) -> int:
    parser = argparse.ArgumentParser(description="Render a fragment timeline manifest to WAV.")
    parser.add_argument("manifest", help="Timeline manifest JSON file.")
    parser.add_argument("--output", "-o", required=True, help="Output WAV path.")
    parser.add_argument("--sample-rate", type=int, default=None, help="Working sample rate (default: settings).")
    parser.add_argument(
        "--mix",
        choices=("first", "average"),
        default=None,
        help="Multi-channel handling for uploaded audio (default: settings).",
    )
    parser.add_argument("--workers", type=int, default=None, help="Parallel fragment renders (default: settings).")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(list(argv))

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    root = _repo_root()
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))

    from src.api.timeline_manifest import build_fragments, parse_timeline_manifest
    from src.config import settings
    from src.core.audio.decode import decode_audio_file
    from src.core.audio.wav import write_wav
    from src.core.engine import AssemblyEngine

    manifest_path = Path(args.manifest)
    try:
        manifest_str = manifest_path.read_text(encoding="utf-8")
    except OSError as e:
        print(f"Cannot read manifest: {e}", file=sys.stderr)
        return 2

    engine = AssemblyEngine(
        working_sample_rate=args.sample_rate or settings.working_sample_rate,
        max_workers=args.workers or settings.render_max_workers,
        mix=args.mix or settings.assemble_mix_mode,
    )

    started = time.time()
    try:
        entries = parse_timeline_manifest(manifest_str, allow_paths=True)
        if not entries:
            print("Manifest has no fragments.", file=sys.stderr)
            return 1
        fragments = build_fragments(
            entries,
            base_dir=manifest_path.resolve().parent,
            load_audio_file=decode_audio_file,
            default_delay=settings.default_delay_s,
            default_speed=settings.default_speed,
        )
        merged = engine.assemble(fragments)
    except (ValueError, OSError) as e:
        print(f"Render failed: {e}", file=sys.stderr)
        return 1

    out_path = Path(args.output)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(write_wav(merged))

    print(
        f"Wrote {out_path} ({len(fragments)} fragments, {merged.duration:.2f}s audio, "
        f"rendered in {_format_seconds(time.time() - started)})"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
