import math

import numpy as np
import pytest

from yin_dsp.analysis.loudness import calculate_decibel_level, is_below_threshold

SR = 44100


def _sine(freq: float, amp: float, dur: float = 0.5) -> np.ndarray:
    t = np.arange(int(SR * dur), dtype=np.float32) / SR
    return (amp * np.sin(2 * np.pi * freq * t)).astype(np.float32)

def _square(amp: float, n: int = 4410, period: int = 100) -> np.ndarray:
    idx = np.arange(n)
    return np.where((idx // (period // 2)) % 2 == 0, amp, -amp).astype(np.float32)


def test_missing_or_empty_block_is_minus_inf():
    assert calculate_decibel_level(None) == float("-inf")
    assert calculate_decibel_level(np.array([], dtype=np.float32)) == float("-inf")

def test_all_zero_block_is_minus_inf_without_warning():
    with np.errstate(all="raise"):
        assert calculate_decibel_level(np.zeros(1024, dtype=np.float32)) == float("-inf")

@pytest.mark.parametrize(
    "amp, expected_db",
    [(0.1, -20.0), (0.3, -10.46), (0.5, -6.02), (0.7, -3.10), (1.0, 0.0)],
)
def test_constant_magnitude_levels(amp, expected_db):
    db = calculate_decibel_level(_square(amp))
    assert abs(db - expected_db) <= 1.0, f"amp={amp}: {db:.2f} dBFS"

@pytest.mark.parametrize(
    "amp, lo, hi",
    [(0.1, -25, -15), (0.3, -15, -5), (0.5, -11, -1), (0.7, -8, 2), (1.0, -5, 5)],
)
def test_sine_levels_in_expected_windows(amp, lo, hi):
    db = calculate_decibel_level(_sine(440.0, amp))
    assert lo <= db <= hi, f"amp={amp}: {db:.2f} dBFS"
    # sinus : RMS = A/√2 → -3.01 dB sous l'amplitude crête
    assert abs(db - 20 * math.log10(amp / math.sqrt(2))) < 0.05

@pytest.mark.parametrize("k", [1.5, 2.0, 3.5, 10.0])
def test_scaling_adds_20log10_k(k):
    y = _sine(300.0, 0.05)
    delta = calculate_decibel_level(y * k) - calculate_decibel_level(y)
    assert abs(delta - 20 * math.log10(k)) < 1e-4

def test_level_is_monotonic_in_amplitude():
    levels = [calculate_decibel_level(_sine(200.0, a)) for a in (0.01, 0.1, 0.3, 0.9)]
    assert levels == sorted(levels)

def test_silence_gate():
    quiet = calculate_decibel_level(_sine(200.0, 0.001))   # ~ -63 dBFS
    loud = calculate_decibel_level(_sine(200.0, 0.5))      # ~ -9 dBFS
    assert is_below_threshold(quiet, -40.0)
    assert not is_below_threshold(loud, -40.0)
    assert not is_below_threshold(quiet, None)
    assert is_below_threshold(calculate_decibel_level(None), -120.0)
