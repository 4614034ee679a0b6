# yin_dsp/analysis/blocks.py
"""
Lecture bloc par bloc.

Chaque bloc est une estimation indépendante (aucun état d'un bloc à l'autre,
aucun lissage) : le consommateur applique son propre lissage temporel s'il
en veut un.
"""
from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor
from typing import Iterator, List, Optional

from yin_dsp.analysis.yin_pitch import analyze_pitch
from yin_dsp.types.dataclasses import BlockReading, PitchAnalysis, SampleBlock
from yin_dsp.types.schemas import DEFAULT_BLOCK_SIZE, PitchReadingModel, PitchSearchParams
from yin_dsp.utils.note_utils import tuner_readout

BLOCKS_PREFIX = "[BLOCKS]"
def _blocks_log(debug: bool, msg: str):
    if debug:
        print(f"{BLOCKS_PREFIX} {msg}")


def analyze_block(block: SampleBlock, params: PitchSearchParams) -> PitchAnalysis:
    return analyze_pitch(
        block.samples, block.sr,
        params.min_pitch, params.max_pitch,
        params.silence_threshold_db,
    )


def read_block(block: SampleBlock, params: PitchSearchParams, start: int = 0) -> BlockReading:
    """Pitch + niveau dBFS d'un bloc (ce qu'affiche un tuner)."""
    a = analyze_block(block, params)
    return BlockReading(start=start, time_s=start / float(block.sr), f0=a.f0, level_db=a.level_db)


def iter_block_starts(n_samples: int, block_size: int, hop_size: Optional[int] = None) -> Iterator[int]:
    """Débuts des blocs complets de taille block_size (le reste incomplet est ignoré)."""
    if block_size <= 0:
        raise ValueError(f"block_size must be > 0, got {block_size}")
    hop = block_size if hop_size is None else hop_size
    if hop <= 0:
        raise ValueError(f"hop_size must be > 0, got {hop}")
    start = 0
    while start + block_size <= n_samples:
        yield start
        start += hop


def track_blocks(
    block: SampleBlock,
    params: PitchSearchParams,
    block_size: int = DEFAULT_BLOCK_SIZE,
    hop_size: Optional[int] = None,
    max_workers: Optional[int] = 4,
    debug: bool = False,
) -> List[BlockReading]:
    """
    Découpe un signal long en blocs fixes et estime chacun indépendamment.

    Les blocs sont des vues en lecture seule du signal source; l'ordre du
    résultat suit l'ordre des blocs quel que soit max_workers.
    """
    starts = list(iter_block_starts(len(block), block_size, hop_size))
    _blocks_log(debug, f"{len(starts)} blocks of {block_size} @ {block.sr:.0f} Hz "
                       f"| search [{params.min_pitch:.1f}, {params.max_pitch:.1f}] Hz")
    if not starts:
        return []

    def _one(start: int) -> BlockReading:
        sub = SampleBlock(samples=block.samples[start:start + block_size], sr=block.sr)
        return read_block(sub, params, start=start)

    if max_workers is None or max_workers <= 1:
        readings = [_one(s) for s in starts]
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as ex:
            readings = list(ex.map(_one, starts))

    voiced = sum(1 for r in readings if r.f0 is not None)
    _blocks_log(debug, f"voiced={voiced}/{len(readings)}")
    return readings


def reading_to_model(reading: BlockReading, a4: float = 440.0) -> PitchReadingModel:
    """BlockReading → modèle pydantic sérialisable (note + cents pour l'UI)."""
    note, cents = tuner_readout(reading.f0, a4=a4)
    level = reading.level_db if math.isfinite(reading.level_db) else None
    return PitchReadingModel(
        f0=reading.f0,
        level_db=level,
        note=note,
        cents=cents,
        status="pitched" if reading.f0 is not None else "no_pitch",
    )
