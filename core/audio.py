"""
core/audio.py — Synthesized sound effects for Math Ninja.

Every effect is generated at start-up from pure Python math and packed
into 16-bit stereo PCM for pygame.mixer.Sound. No audio files, no numpy,
so the build runs unchanged under pygbag.

Sound design:
    slice      — 2.4→0.6 kHz noisy sweep       — blade whoosh
    bomb       — 90→40 Hz rumble with noise     — dull boom
    correct    — C5 E5 G5 arpeggio              — bright, short
    wrong      — G4→D4 square descent           — buzz
    timeout    — A4 triple beep                 — clock ran out
    reward     — C5 G5 C6 held fanfare          — weapon unlocked
    start      — 300→900 Hz sine rise           — session begins

Usage:
    audio = Audio()
    audio.init()
    audio.play("slice")
"""

from __future__ import annotations

import logging
import math
import random
import struct

import pygame

logger = logging.getLogger(__name__)

_SAMPLE_RATE = 22050
_MAX_AMP     = 32767
_NOTE = {"D4": 294, "G4": 392, "A4": 440, "C5": 523, "E5": 659, "G5": 784, "C6": 1047}


def _pack(samples: list[float]) -> bytes:
    """Pack mono float samples in [-1, 1] as interleaved int16 stereo."""
    out = bytearray()
    for s in samples:
        v = int(max(-1.0, min(1.0, s)) * _MAX_AMP)
        out += struct.pack("<hh", v, v)
    return bytes(out)


def _tone(f_start: float, duration: float, volume: float = 0.3,
          wave: str = "square", f_end: float | None = None, noise: float = 0.0) -> list[float]:
    """Generate a tone, optionally gliding to f_end and mixed with noise.

    Args:
        f_start:  Start frequency in Hz.
        duration: Seconds.
        volume:   Peak amplitude in [0.0, 1.0].
        wave:     "square" or "sine".
        f_end:    End frequency for a glide; None holds f_start.
        noise:    Share of white noise mixed in, 0.0–1.0.

    Returns:
        Float samples with a short linear fade-out to avoid clicks.
    """
    n = int(_SAMPLE_RATE * duration)
    f_end = f_start if f_end is None else f_end
    rnd = random.Random(int(f_start * 1000 + duration * 100))
    fade_n = min(n, int(_SAMPLE_RATE * 0.04))
    samples = []
    phase = 0.0
    for i in range(n):
        phase += 2 * math.pi * (f_start + (f_end - f_start) * i / max(1, n)) / _SAMPLE_RATE
        s = math.sin(phase)
        if wave == "square":
            s = 1.0 if s >= 0 else -1.0
        s = (1.0 - noise) * s + noise * rnd.uniform(-1.0, 1.0)
        if i >= n - fade_n:
            s *= (n - i) / fade_n
        samples.append(volume * s)
    return samples


def _seq(*notes: tuple[str, float], volume: float = 0.3, gap: float = 0.0) -> list[float]:
    """Play named notes back to back, each (name, seconds)."""
    samples: list[float] = []
    for name, dur in notes:
        samples += _tone(_NOTE[name], dur, volume)
        samples += [0.0] * int(_SAMPLE_RATE * gap)
    return samples


class Audio:
    """Owns pygame.mixer and the synthesized effect bank.

    Attributes:
        _sounds:    Effect name → pygame.mixer.Sound.
        _available: False when the mixer could not start (no audio device).
    """

    def __init__(self) -> None:
        self._sounds:    dict[str, pygame.mixer.Sound] = {}
        self._available: bool = False

    def init(self) -> None:
        """Start the mixer and build every effect. Silent if no device."""
        try:
            pygame.mixer.pre_init(_SAMPLE_RATE, -16, 2, 512)
            pygame.mixer.init()
        except pygame.error as exc:
            logger.warning("Audio unavailable: %s", exc)
            self._available = False
            return
        self._available = True
        self._build()

    def _build(self) -> None:
        bank = {
            "slice":   _tone(2400, 0.12, 0.22, "sine", f_end=600, noise=0.6),
            "bomb":    _tone(90, 0.35, 0.40, "sine", f_end=40, noise=0.5),
            "correct": _seq(("C5", 0.06), ("E5", 0.06), ("G5", 0.12), volume=0.28),
            "wrong":   _seq(("G4", 0.10), ("D4", 0.18), volume=0.25),
            "timeout": _seq(("A4", 0.07), ("A4", 0.07), ("A4", 0.07), volume=0.25, gap=0.04),
            "reward":  _seq(("C5", 0.08), ("G5", 0.08), ("C6", 0.30), volume=0.30),
            "start":   _tone(300, 0.25, 0.28, "sine", f_end=900),
        }
        self._sounds = {name: pygame.mixer.Sound(buffer=_pack(s)) for name, s in bank.items()}

    def play(self, name: str) -> None:
        """Play an effect by name. No-op if audio is off or the name is unknown."""
        if not self._available:
            return
        sound = self._sounds.get(name)
        if sound:
            sound.play()

    def quit(self) -> None:
        if self._available:
            pygame.mixer.quit()
            self._available = False
