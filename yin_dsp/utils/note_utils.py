import numpy as np
from typing import Optional, Tuple

NOTE_NAMES = {
    0: "C", 1: "C♯", 2: "D", 3: "E♭", 4: "E",
    5: "F", 6: "F♯", 7: "G", 8: "G♯", 9: "A",
    10: "B♭", 11: "B",
}
NOTE_NAMES_SOLFEGE = {
    0: "Do", 1: "Do♯", 2: "Ré", 3: "Mi♭", 4: "Mi",
    5: "Fa", 6: "Fa♯", 7: "Sol", 8: "Sol♯", 9: "La",
    10: "Si♭", 11: "Si",
}


def midi_to_freq(midi: float, a4: float = 440.0) -> float:
    """Convertit un numéro MIDI en fréquence (Hz)."""
    return a4 * 2 ** ((midi - 69) / 12)

def freq_to_midi(freq: float, a4: float = 440.0) -> int:
    """Convertit une fréquence (Hz) en numéro MIDI arrondi."""
    if freq <= 0:
        raise ValueError(f"Fréquence invalide: {freq}")
    return int(round(69 + 12 * np.log2(freq / a4)))

def cents_off(freq: float, a4: float = 440.0) -> float:
    """Écart en cents entre freq et la note tempérée la plus proche."""
    return float(1200 * np.log2(freq / midi_to_freq(freq_to_midi(freq, a4), a4)))

def midi_to_note(midi: int, use_solfège: bool = False) -> str:
    """
    Convertit un numéro MIDI en nom de note :
      - 60 → C4 ou Do4
      - 69 → A4 ou La4
    """
    if not (0 <= midi <= 127):
        raise ValueError(f"MIDI invalide: {midi}")
    mapping = NOTE_NAMES_SOLFEGE if use_solfège else NOTE_NAMES
    return f"{mapping[midi % 12]}{midi // 12 - 1}"

def freq_to_note(freq: float, a4: float = 440.0, use_solfège: bool = False) -> str:
    """
    Nom de la note tempérée la plus proche.

        freq_to_note(440)         # "A4"
        freq_to_note(445)         # "A4" (écart ~20 cents)
        freq_to_note(277, use_solfège=True)   # "Do♯4"
    """
    return midi_to_note(freq_to_midi(freq, a4), use_solfège=use_solfège)

# Lecture tuner : (note, cents) ou (None, None) si pas de pitch
def tuner_readout(
    f0: Optional[float], a4: float = 440.0, use_solfège: bool = False
) -> Tuple[Optional[str], Optional[float]]:
    if f0 is None or f0 <= 0:
        return None, None
    midi = freq_to_midi(f0, a4)
    if not (0 <= midi <= 127):
        return None, None
    return midi_to_note(midi, use_solfège=use_solfège), cents_off(f0, a4)
