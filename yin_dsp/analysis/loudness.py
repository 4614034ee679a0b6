# yin_dsp/analysis/loudness.py
import numpy as np
from typing import Optional


def calculate_decibel_level(samples: Optional[np.ndarray]) -> float:
    """
    Niveau RMS du bloc en dBFS : 20·log10(sqrt(Σx² / N)).

    - bloc absent (None) ou vide → -inf
    - bloc entièrement nul → -inf (pas de warning numpy sur log10(0))

    Ne lève jamais d'exception sur le contenu du signal : -inf est le
    sentinel « silence » pour l'appelant.
    """
    if samples is None:
        return float("-inf")

    x = np.asarray(samples, dtype=np.float64).ravel()
    if x.size == 0:
        return float("-inf")

    rms = float(np.sqrt(np.dot(x, x) / x.size))
    if rms <= 0.0:
        return float("-inf")
    return 20.0 * float(np.log10(rms))


def is_below_threshold(level_db: float, threshold_db: Optional[float]) -> bool:
    """Gate de silence sur un niveau déjà mesuré. threshold_db=None → pas de gate."""
    if threshold_db is None:
        return False
    return level_db < threshold_db
