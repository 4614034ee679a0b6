from enum import Enum


class PitchStatus(Enum):
    PITCHED = 0
    SILENT = 1             # sous le seuil de silence (gate dBFS)
    EMPTY = 2              # bloc vide
    INVALID_RANGE = 3      # fenêtre de lags dégénérée ou plus longue que le bloc
    APERIODIC = 4          # aucun lag sous le seuil CMNDF
    NON_POSITIVE_LAG = 5   # interpolation → lag <= 0
    NONE = 99
