# yin_dsp/utils/audio_io.py
import os
from typing import Optional

import librosa

from yin_dsp.core.buffer import make_block
from yin_dsp.types.dataclasses import SampleBlock

# ==== Debug switch (0/1 via env) ==============================================
IO_DEBUG = bool(int(os.getenv("YIN_DSP_IO_DEBUG", "0")))
def _io_log(msg: str):
    if IO_DEBUG:
        print(f"[IO] {msg}")


def load_audio_block(path: str, channel: int = 0) -> Optional[SampleBlock]:
    """
    Charge un fichier audio entier dans un SampleBlock.

    - sample rate natif conservé (sr=None)
    - canal `channel` uniquement (0 par défaut)
    - en cas d'erreur de lecture/décodage : message + None
    """
    try:
        y, sr = librosa.load(path, sr=None, mono=False)
    except Exception as e:
        print(f"Error loading audio file: {e}")
        return None

    try:
        block = make_block(y, sr, channel=channel)
    except ValueError as e:
        print(f"Failed to create audio buffer: {e}")
        return None

    _io_log(f"{os.path.basename(str(path))}: {len(block)} samples @ {block.sr:.0f} Hz "
            f"(shape={getattr(y, 'shape', None)})")
    return block
