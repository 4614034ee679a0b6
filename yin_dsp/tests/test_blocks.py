import numpy as np
import pytest

from yin_dsp.analysis.blocks import iter_block_starts, read_block, reading_to_model, track_blocks
from yin_dsp.types.dataclasses import BlockReading, SampleBlock
from yin_dsp.types.schemas import PitchSearchParams

SR = 44100
PARAMS = PitchSearchParams(min_pitch=60.0, max_pitch=500.0, silence_threshold_db=-40.0)


def _tone_then_silence(freq: float = 220.0, n_each: int = 4 * 4096) -> np.ndarray:
    t = np.arange(n_each, dtype=np.float64) / SR
    tone = 0.5 * np.sin(2 * np.pi * freq * t)
    return np.concatenate([tone, np.zeros(n_each)]).astype(np.float32)


def test_iter_block_starts():
    assert list(iter_block_starts(10, 4)) == [0, 4]
    assert list(iter_block_starts(10, 4, hop_size=2)) == [0, 2, 4, 6]
    assert list(iter_block_starts(3, 4)) == []
    with pytest.raises(ValueError):
        list(iter_block_starts(10, 0))
    with pytest.raises(ValueError):
        list(iter_block_starts(10, 4, hop_size=0))

def test_read_block_reports_pitch_and_level():
    block = SampleBlock(samples=_tone_then_silence()[:4096], sr=SR)
    r = read_block(block, PARAMS, start=0)
    assert r.f0 is not None and abs(r.f0 - 220.0) <= 2.2
    assert -10.0 < r.level_db < -8.0

def test_track_blocks_tone_then_silence():
    block = SampleBlock(samples=_tone_then_silence(), sr=SR)
    readings = track_blocks(block, PARAMS, block_size=4096)
    assert len(readings) == 8
    assert [r.start for r in readings] == [i * 4096 for i in range(8)]
    assert readings[1].time_s == pytest.approx(4096 / SR)

    for r in readings[:4]:
        assert r.f0 is not None and abs(r.f0 - 220.0) <= 2.2
    for r in readings[4:]:
        assert r.f0 is None and r.level_db == float("-inf")

def test_track_blocks_threaded_matches_sequential():
    block = SampleBlock(samples=_tone_then_silence(330.0), sr=SR)
    seq = track_blocks(block, PARAMS, block_size=2048, hop_size=1024, max_workers=1)
    par = track_blocks(block, PARAMS, block_size=2048, hop_size=1024, max_workers=4)
    assert seq == par

def test_track_blocks_on_short_signal():
    block = SampleBlock(samples=np.zeros(100, dtype=np.float32), sr=SR)
    assert track_blocks(block, PARAMS, block_size=4096) == []

def test_reading_to_model():
    m = reading_to_model(BlockReading(start=0, time_s=0.0, f0=440.0, level_db=-12.0))
    assert m.note == "A4" and abs(m.cents) < 1e-6 and m.status == "pitched"

    silent = reading_to_model(BlockReading())
    assert silent.f0 is None and silent.note is None and silent.level_db is None
    assert silent.status == "no_pitch"
    assert silent.model_dump()["cents"] is None
