# yin_dsp/types/schemas.py
from __future__ import annotations
import math
import sys
from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, Tuple


# ────────────────────────────────────────────────────────────────────────────
# Defaults (tuner live, cf. demo d'origine)
# ────────────────────────────────────────────────────────────────────────────
DEFAULT_MIN_PITCH = 60.0
DEFAULT_MAX_PITCH = 250.0
DEFAULT_SILENCE_THRESHOLD_DB = -40.0
DEFAULT_BLOCK_SIZE = 1024


def _lag(ratio: float) -> int:
    # ratio infini (min_pitch sous-normal) → lag plus long que tout bloc
    return int(ratio) if math.isfinite(ratio) else sys.maxsize


def lag_window(sr: float, min_pitch: float, max_pitch: float) -> Tuple[int, int]:
    """(tau_min, tau_max) = (int(sr / max_pitch), int(sr / min_pitch))."""
    if not (sr > 0) or not math.isfinite(sr):
        raise ValueError(f"Invalid sample rate: {sr}")
    if not (min_pitch > 0) or not (max_pitch > 0):
        raise ValueError(f"Pitch bounds must be positive: [{min_pitch}, {max_pitch}]")
    return _lag(sr / max_pitch), _lag(sr / min_pitch)


# ────────────────────────────────────────────────────────────────────────────
# Per-call search configuration
# ────────────────────────────────────────────────────────────────────────────
class PitchSearchParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_pitch: float = Field(DEFAULT_MIN_PITCH, gt=0, description="Lowest pitch searched (Hz)")
    max_pitch: float = Field(DEFAULT_MAX_PITCH, gt=0, description="Highest pitch searched (Hz)")
    silence_threshold_db: Optional[float] = Field(
        default=None, description="dBFS gate; None disables gating"
    )

    @model_validator(mode="after")
    def _check_order(self) -> "PitchSearchParams":
        if self.min_pitch >= self.max_pitch:
            raise ValueError(
                f"min_pitch ({self.min_pitch}) must be < max_pitch ({self.max_pitch})"
            )
        return self

    def lag_window(self, sr: float) -> Tuple[int, int]:
        """(tau_min, tau_max) en échantillons pour ce sample rate."""
        return lag_window(sr, self.min_pitch, self.max_pitch)

    def min_block_size(self, sr: float) -> int:
        """Nombre minimal d'échantillons pour couvrir tau_max."""
        return self.lag_window(sr)[1]


# ────────────────────────────────────────────────────────────────────────────
# Serializable reading (UI / JSON)
# ────────────────────────────────────────────────────────────────────────────
class PitchReadingModel(BaseModel):
    f0: Optional[float] = None
    level_db: Optional[float] = None      # None quand le niveau vaut -inf
    note: Optional[str] = None
    cents: Optional[float] = None
    status: str = "none"
