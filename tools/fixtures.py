#!/usr/bin/env python3
"""Write small audio fixtures for the smoke runner.

The WAV files are real (a short sine tone); mp3/ogg are header-only
placeholders since the server never decodes audio. `bad name!.wav` exercises
filename sanitization.
"""
from __future__ import annotations

import io
import math
import struct
import wave
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
FX = ROOT / "fixtures"

_RATE = 8000


def tone_wav(freq_hz: float = 440.0, seconds: float = 0.25) -> bytes:
    frames = int(_RATE * seconds)
    samples = (int(12000 * math.sin(2 * math.pi * freq_hz * i / _RATE)) for i in range(frames))
    buf = io.BytesIO()
    with wave.open(buf, "wb") as w:
        w.setnchannels(1)
        w.setsampwidth(2)
        w.setframerate(_RATE)
        w.writeframes(b"".join(struct.pack("<h", s) for s in samples))
    return buf.getvalue()


FILES = [
    (FX / "beep.wav", tone_wav(880.0)),
    (FX / "low tone.wav", tone_wav(220.0)),
    (FX / "bad name!.wav", tone_wav(440.0, 0.1)),
    (FX / "airhorn.mp3", b"ID3\x04\x00\x00\x00\x00\x00\x00" + b"\xff\xfb\x90\x00" * 64),
    (FX / "applause.ogg", b"OggS\x00\x02" + b"\x00" * 58),
]


def main() -> None:
    FX.mkdir(parents=True, exist_ok=True)
    for path, data in FILES:
        path.write_bytes(data)
    created = sorted(p.name for p, _ in FILES if p.exists())
    print("Created fixtures:")
    for c in created:
        print(" -", c)
    if len(created) != len(FILES):
        raise SystemExit(f"Expected {len(FILES)} fixtures, found {len(created)}")


if __name__ == "__main__":
    main()
