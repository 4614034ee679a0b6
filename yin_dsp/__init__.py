"""
YIN DSP — Pitch & Loudness
--------------------------

Estimation de la fréquence fondamentale d'un bloc audio mono (algorithme YIN)
et mesure de son niveau en dBFS, pour tuners et entraîneurs vocaux.

Structure :
    analysis/loudness.py   → niveau RMS en dBFS + gate de silence
    analysis/yin_pitch.py  → d(τ), CMNDF, seuil absolu, interpolation, f0
    analysis/blocks.py     → lecture bloc par bloc (estimations indépendantes)
    core/buffer.py         → conversion canal → float32 mono
    utils/audio_io.py      → chargement fichier (librosa)
    utils/note_utils.py    → note la plus proche + écart en cents
"""

from .analysis.loudness import calculate_decibel_level
from .analysis.yin_pitch import (
    analyze_pitch,
    cumulative_mean_normalized_difference,
    difference_function,
    find_fundamental_period,
    get_pitch_yin,
    parabolic_interpolation,
)
from .types.dataclasses import PitchAnalysis, SampleBlock
from .types.schemas import PitchSearchParams

__all__ = [
    "calculate_decibel_level",
    "analyze_pitch",
    "get_pitch_yin",
    "difference_function",
    "cumulative_mean_normalized_difference",
    "find_fundamental_period",
    "parabolic_interpolation",
    "PitchAnalysis",
    "SampleBlock",
    "PitchSearchParams",
]
