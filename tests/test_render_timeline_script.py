import json
import struct

from scripts import render_timeline
from src.core.audio.buffer import SampleBuffer
from src.core.audio.wav import read_wav, write_wav


def test_renders_manifest_to_wav(tmp_path, capsys):
    (tmp_path / "line.pcm").write_bytes(struct.pack("<2400h", *([1000] * 2400)))
    (tmp_path / "intro.wav").write_bytes(write_wav(SampleBuffer.silence(1, 4800, 48000)))
    manifest = tmp_path / "timeline.json"
    manifest.write_text(json.dumps([
        {"type": "generated", "pcm_path": "line.pcm", "speed": 2.0, "delay": 0.1},
        {"type": "uploaded", "path": "intro.wav", "delay": 0},
    ]))
    out = tmp_path / "out" / "timeline.wav"

    rc = render_timeline.main([str(manifest), "-o", str(out), "--sample-rate", "24000"])

    assert rc == 0
    merged = read_wav(out.read_bytes())
    # 1200 speech frames + 2400 silence + 2400 upload frames
    assert merged.frame_count == 6000
    assert "2 fragments" in capsys.readouterr().out


def test_missing_manifest_returns_2(tmp_path, capsys):
    rc = render_timeline.main([str(tmp_path / "nope.json"), "-o", str(tmp_path / "o.wav")])
    assert rc == 2
    assert "Cannot read manifest" in capsys.readouterr().err


def test_empty_manifest_returns_1(tmp_path, capsys):
    manifest = tmp_path / "timeline.json"
    manifest.write_text("[]")
    rc = render_timeline.main([str(manifest), "-o", str(tmp_path / "o.wav")])
    assert rc == 1
    assert "no fragments" in capsys.readouterr().err


def test_invalid_manifest_returns_1(tmp_path, capsys):
    manifest = tmp_path / "timeline.json"
    manifest.write_text('[{"type": "uploaded", "path": "missing.wav"}]')
    out = tmp_path / "o.wav"
    rc = render_timeline.main([str(manifest), "-o", str(out)])
    assert rc == 1
    assert "Render failed" in capsys.readouterr().err
    assert not out.exists()
