"""
Audible step feedback.

One short tone per step, pitched by the value that was just moved:
the value's position inside [lo, hi] of the sequence maps linearly onto
[freq_low, freq_high].

WAVEFORM — sine plus a faint 2nd harmonic:
    wave[t] = sin(2pi*f*t) + HARMONIC_BLEND * sin(4pi*f*t)

ENVELOPE — raised-cosine attack and release so notes start and stop without clicks:
    attack:  env[t] = 0.5 * (1 - cos(pi * t / A))
    release: env[t] = 0.5 * (1 + cos(pi * (t - start) / R))
"""

import logging
import math
import time

import numpy as np
import pygame

logger = logging.getLogger(__name__)

SAMPLE_RATE    = 44100
TONE_SECONDS   = 0.08
ATTACK_SECONDS = 0.008
RELEASE_SECONDS = 0.040
HARMONIC_BLEND = 0.08
VOLUME         = 0.35
TRIGGER_MIN_INTERVAL = 0.035


def value_to_freq(value, lo, hi, freq_low, freq_high) -> float:
    if hi <= lo:
        return freq_low
    r = min(1.0, max(0.0, (value - lo) / (hi - lo)))
    return freq_low + r * (freq_high - freq_low)


def render_tone(freq: float, seconds=TONE_SECONDS, sample_rate=SAMPLE_RATE) -> np.ndarray:
    """Synthesise one stereo int16 tone as an (n, 2) array."""
    n = max(1, int(seconds * sample_rate))
    t = np.arange(n, dtype=np.float64)
    phases = t * (freq / sample_rate)
    wave = np.sin(2.0 * math.pi * phases)
    if HARMONIC_BLEND > 0.0:
        wave += HARMONIC_BLEND * np.sin(4.0 * math.pi * phases)

    env = np.ones(n, dtype=np.float64)
    attack  = max(1, min(n, int(ATTACK_SECONDS * sample_rate)))
    release = max(1, min(n, int(RELEASE_SECONDS * sample_rate)))
    env[:attack] = 0.5 * (1.0 - np.cos(math.pi * t[:attack] / attack))
    rel_start = n - release
    env[rel_start:] *= 0.5 * (1.0 + np.cos(math.pi * (t[rel_start:] - rel_start) / release))

    mono = wave * env / (1.0 + HARMONIC_BLEND)
    pcm  = (np.clip(mono, -1.0, 1.0) * 32767 * VOLUME).astype(np.int16)
    return np.column_stack((pcm, pcm))


class ToneEngine:
    def __init__(self, freq_low, freq_high):
        self.freq_low  = freq_low
        self.freq_high = freq_high
        self._channel  = None
        self._last     = 0.0

    @property
    def running(self) -> bool:
        return self._channel is not None

    def start(self):
        try:
            pygame.mixer.pre_init(SAMPLE_RATE, -16, 2, 512)
            pygame.mixer.init()
        except pygame.error as e:
            logger.warning("sound disabled: %s", e)
            return
        self._channel = pygame.mixer.Channel(1)

    def stop(self):
        if self._channel:
            self._channel.stop()
            self._channel = None
            pygame.mixer.quit()

    def trigger(self, value, lo, hi):
        if not self._channel:
            return
        now = time.monotonic()
        if now - self._last < TRIGGER_MIN_INTERVAL:
            return
        self._last = now
        freq = value_to_freq(value, lo, hi, self.freq_low, self.freq_high)
        snd = pygame.mixer.Sound(buffer=render_tone(freq).tobytes())
        self._channel.play(snd)
