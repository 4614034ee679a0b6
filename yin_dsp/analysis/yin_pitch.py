# yin_dsp/analysis/yin_pitch.py
"""
yin_pitch.py
============
Estimation de f0 sur UN bloc mono (YIN, de Cheveigné & Kawahara 2002).

Étapes, chacune pure et sans état :
    difference_function                    → d(τ)
    cumulative_mean_normalized_difference  → d'(τ)
    find_fundamental_period                → τ* (seuil absolu adaptatif)
    parabolic_interpolation                → τ* raffiné (sub-sample)
    estimate_pitch                         → f0 = sr / τ*

Les noyaux numba sont compilés avec nogil=True : plusieurs blocs indépendants
peuvent être analysés en parallèle dans des threads.
"""

from __future__ import annotations

import os
from typing import Optional

import numba
import numpy as np

from yin_dsp.analysis.loudness import calculate_decibel_level, is_below_threshold
from yin_dsp.types.dataclasses import PitchAnalysis
from yin_dsp.types.enums import PitchStatus
from yin_dsp.types.schemas import PitchSearchParams, lag_window

# ==== Debug switch (0/1 via env) ==============================================
YIN_DEBUG = bool(int(os.getenv("YIN_DSP_DEBUG", "0")))
def _yin_log(msg: str):
    if YIN_DEBUG:
        print(f"[YIN] {msg}")

# ==== Constantes empiriques ===================================================
THRESHOLD_FACTOR = 1.1     # seuil = min(cmndf) * facteur + offset
THRESHOLD_OFFSET = 0.001   # évite un seuil nul sur un profil uniforme
CMNDF_SENTINEL = 5.0       # valeur forcée pour τ < tau_min
PARABOLA_EPS = 1e-12


# ==== Noyaux Numba ============================================================
@numba.jit(nopython=True, nogil=True)
def _difference_kernel(x, tau_min, tau_max):
    n = x.shape[0]
    diff = np.zeros(tau_max, dtype=np.float64)
    for tau in range(tau_min, tau_max):
        delta = x[: n - tau] - x[tau:]
        diff[tau] = np.sum(delta * delta)
    return diff

@numba.jit(nopython=True, nogil=True)
def _cmndf_kernel(diff, tau_min, sentinel):
    length = diff.shape[0]
    cmndf = np.ones(length, dtype=np.float64)
    running = 0.0
    for tau in range(tau_min, length):
        running += diff[tau]
        if running == 0.0:
            cmndf[tau] = 1.0
        else:
            cmndf[tau] = diff[tau] * tau / running
    for tau in range(min(tau_min, length)):
        cmndf[tau] = sentinel
    return cmndf


# ==== Fenêtre de lags =========================================================
def is_valid_lag_window(tau_min: int, tau_max: int, n_samples: int) -> bool:
    """0 < tau_min < tau_max <= n_samples."""
    return 0 < tau_min < tau_max <= n_samples


# ==== Étapes ==================================================================
def difference_function(
    samples: np.ndarray,
    sr: float,
    min_pitch: float,
    max_pitch: float,
) -> np.ndarray:
    """
    d(τ) = Σ_{i=0}^{N-τ-1} (x_i − x_{i+τ})², pour τ ∈ [tau_min, tau_max).

    Le profil a une longueur tau_max; les entrées hors fenêtre restent à 0.

    Raises:
        ValueError: fenêtre dégénérée (tau_max <= tau_min, tau_min < 1) ou
            tau_max > len(samples). Vérifié AVANT tout accès décalé au buffer.
    """
    x = np.ascontiguousarray(samples, dtype=np.float64).ravel()
    tau_min, tau_max = lag_window(sr, min_pitch, max_pitch)
    if not is_valid_lag_window(tau_min, tau_max, x.size):
        raise ValueError(
            f"Invalid lag window [{tau_min}, {tau_max}) for a block of {x.size} samples"
        )
    return _difference_kernel(x, tau_min, tau_max)


def cumulative_mean_normalized_difference(
    difference: np.ndarray,
    sr: float,
    max_pitch: float,
) -> np.ndarray:
    """
    d'(τ) = d(τ)·τ / Σ_{k=tau_min}^{τ} d(k)  (1.0 si la somme est nulle).

    Pour τ < tau_min : CMNDF_SENTINEL, jamais sous le seuil de sélection.
    """
    if sr <= 0 or max_pitch <= 0:
        raise ValueError(f"Invalid sr/max_pitch: {sr}, {max_pitch}")
    d = np.ascontiguousarray(difference, dtype=np.float64).ravel()
    tau_min = int(sr / max_pitch)
    return _cmndf_kernel(d, tau_min, CMNDF_SENTINEL)


def find_fundamental_period(cmndf: np.ndarray) -> Optional[int]:
    """
    Premier τ >= 1 tel que cmndf[τ] < min(cmndf) * 1.1 + 0.001.

    τ = 0 est exclu (auto-correspondance triviale). None → signal apériodique.
    """
    c = np.asarray(cmndf, dtype=np.float64).ravel()
    min_value = float(np.min(c)) if c.size else 1.0
    threshold = min_value * THRESHOLD_FACTOR + THRESHOLD_OFFSET

    hits = np.flatnonzero(c[1:] < threshold)
    if hits.size == 0:
        return None
    return int(hits[0]) + 1


def parabolic_interpolation(cmndf: np.ndarray, tau_estimate: int) -> float:
    """
    Raffinement sub-sample autour de τ à partir de (τ-1, τ, τ+1) :

        τ' = τ + (s2 − s0) / (2·(2·s1 − s2 − s0))

    Aux bords du profil, on compare τ au seul voisin disponible et on garde
    le lag entier de plus faible valeur. Dénominateur quasi nul ou résultat
    non fini → τ non raffiné; décalage borné à ±1 lag.
    """
    c = np.asarray(cmndf, dtype=np.float64).ravel()
    tau = int(tau_estimate)
    n = c.size
    if not 0 <= tau < n:
        raise ValueError(f"tau_estimate {tau} outside profile of length {n}")

    x0 = tau if tau < 1 else tau - 1
    x2 = tau + 1 if tau + 1 < n else tau

    if x0 == tau:
        return float(tau) if c[tau] <= c[x2] else float(x2)
    if x2 == tau:
        return float(tau) if c[tau] <= c[x0] else float(x0)

    s0, s1, s2 = c[x0], c[tau], c[x2]
    denom = 2.0 * (2.0 * s1 - s2 - s0)
    if not np.isfinite(denom) or abs(denom) < PARABOLA_EPS:
        return float(tau)

    delta = (s2 - s0) / denom
    if not np.isfinite(delta):
        return float(tau)
    # profil quasi linéaire : le sommet ne quitte pas [τ-1, τ+1]
    return float(tau + np.clip(delta, -1.0, 1.0))


def estimate_pitch(refined_period: float, sr: float) -> Optional[float]:
    """f0 = sr / période; None si la période n'est pas strictement positive."""
    if refined_period > 0:
        return float(sr / refined_period)
    return None


# ==== Orchestration ===========================================================
def analyze_pitch(
    samples: Optional[np.ndarray],
    sr: float,
    min_pitch: float,
    max_pitch: float,
    silence_threshold_db: Optional[float] = None,
) -> PitchAnalysis:
    """
    Pipeline YIN complet sur un bloc, avec le détail de chaque étape.

    Args:
        samples: bloc mono (1D). None = pas de données canal.
        sr: sample rate (Hz), > 0.
        min_pitch, max_pitch: bornes de recherche (Hz), 0 < min_pitch < max_pitch.
        silence_threshold_db: gate dBFS optionnel; sous ce niveau → pas de pitch.

    Returns:
        PitchAnalysis (f0=None pour toute issue « pas de pitch »).

    Raises:
        ValueError: violation du contrat d'appel (sr, bornes, bloc non 1D).
    """
    if sr is None or not sr > 0 or not np.isfinite(sr):
        raise ValueError(f"Invalid sample rate: {sr}")
    params = PitchSearchParams(
        min_pitch=min_pitch,
        max_pitch=max_pitch,
        silence_threshold_db=silence_threshold_db,
    )

    if samples is None:
        x = np.zeros(0, dtype=np.float32)
    else:
        x = np.asarray(samples, dtype=np.float32)
        if x.ndim != 1:
            raise ValueError(f"Expected a mono 1D block, got shape {x.shape}")

    tau_min, tau_max = params.lag_window(sr)
    result = PitchAnalysis(
        level_db=calculate_decibel_level(x),
        tau_min=tau_min,
        tau_max=tau_max,
    )

    # (a) gate de silence
    if is_below_threshold(result.level_db, params.silence_threshold_db):
        _yin_log(f"silent: {result.level_db:.1f} dBFS < {params.silence_threshold_db:.1f} dBFS")
        result.status = PitchStatus.SILENT
        return result

    # (b) bloc vide
    if x.size == 0:
        _yin_log("empty block")
        result.status = PitchStatus.EMPTY
        return result

    # (c) fenêtre de lags
    if not is_valid_lag_window(tau_min, tau_max, x.size):
        _yin_log(f"invalid lag window [{tau_min}, {tau_max}) for N={x.size}")
        result.status = PitchStatus.INVALID_RANGE
        return result

    diff = difference_function(x, sr, params.min_pitch, params.max_pitch)
    cmndf = cumulative_mean_normalized_difference(diff, sr, params.max_pitch)
    result.cmndf_min = float(np.min(cmndf))

    # (d) seuil absolu
    period = find_fundamental_period(cmndf)
    if period is None:
        _yin_log(f"aperiodic: min(cmndf)={result.cmndf_min:.4f}")
        result.status = PitchStatus.APERIODIC
        return result
    result.period = period

    # (e) interpolation parabolique
    refined = parabolic_interpolation(cmndf, period)
    result.refined_period = refined

    # (f) f0
    f0 = estimate_pitch(refined, sr)
    if f0 is None:
        result.status = PitchStatus.NON_POSITIVE_LAG
        return result

    result.f0 = f0
    result.status = PitchStatus.PITCHED
    _yin_log(f"tau={period} → refined={refined:.3f} → f0={f0:.2f} Hz "
             f"| level={result.level_db:.1f} dBFS")
    return result


def get_pitch_yin(
    samples: Optional[np.ndarray],
    sr: float,
    min_pitch: float,
    max_pitch: float,
    silence_threshold_db: Optional[float] = None,
) -> Optional[float]:
    """f0 (Hz) du bloc, ou None. Voir analyze_pitch."""
    return analyze_pitch(samples, sr, min_pitch, max_pitch, silence_threshold_db).f0
