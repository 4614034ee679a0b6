import numpy as np
from typing import Optional

from yin_dsp.types.dataclasses import SampleBlock


def to_mono_f32(y: Optional[np.ndarray], channel: int = 0) -> np.ndarray:
    """
    Extrait un canal et le rend sous forme de vecteur float32 contigu.

    Args:
        y: np.ndarray | None
            Signal brut : 1D (mono) ou 2D (nb_canaux x nb_samples, convention librosa).
            None équivaut à « pas de données canal ».
        channel: int
            Canal conservé pour un signal multi-canaux (0 par défaut, comme le
            premier canal d'un buffer PCM).

    Returns:
        np.ndarray: vecteur 1D float32 (éventuellement vide).
    """
    if y is None:
        return np.zeros(0, dtype=np.float32)

    y = np.asarray(y)
    if y.ndim == 0:
        raise ValueError("Scalar is not an audio signal")
    if y.ndim == 1:
        return np.ascontiguousarray(y, dtype=np.float32)
    if y.ndim == 2:
        if y.shape[0] == 0:
            return np.zeros(0, dtype=np.float32)
        if not 0 <= channel < y.shape[0]:
            raise ValueError(f"Channel {channel} out of range (channels={y.shape[0]})")
        return np.ascontiguousarray(y[channel], dtype=np.float32)

    raise ValueError(f"Unsupported signal shape {y.shape}")


def make_block(y: Optional[np.ndarray], sr: float, channel: int = 0) -> SampleBlock:
    """Construit un SampleBlock mono à partir d'un signal brut."""
    return SampleBlock(samples=to_mono_f32(y, channel=channel), sr=float(sr))
