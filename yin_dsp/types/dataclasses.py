from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from yin_dsp.types.enums import PitchStatus


@dataclass(frozen=True)
class SampleBlock:
    """
    Un bloc mono de taille fixe + sa fréquence d'échantillonnage.

    Le tableau est converti en float32 contigu; le pipeline ne fait que le lire.
    """
    samples: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.float32))
    sr: float = 44100.0

    def __post_init__(self):
        y = np.ascontiguousarray(self.samples, dtype=np.float32)
        if y.ndim != 1:
            raise ValueError(f"SampleBlock attend un signal 1D, reçu ndim={y.ndim}")
        if not (self.sr > 0):
            raise ValueError(f"Sample rate invalide: {self.sr}")
        object.__setattr__(self, "samples", y)

    def __len__(self) -> int:
        return int(self.samples.shape[0])

    @property
    def duration(self) -> float:
        return len(self) / float(self.sr)


@dataclass
class PitchAnalysis:
    f0: Optional[float] = None
    level_db: float = float("-inf")
    status: PitchStatus = PitchStatus.NONE
    tau_min: int = 0
    tau_max: int = 0
    period: Optional[int] = None              # lag entier retenu
    refined_period: Optional[float] = None    # lag après interpolation parabolique
    cmndf_min: Optional[float] = None

    @property
    def voiced(self) -> bool:
        return self.f0 is not None


@dataclass
class BlockReading:
    start: int = 0          # index du premier échantillon dans le signal source
    time_s: float = 0.0
    f0: Optional[float] = None
    level_db: float = float("-inf")
