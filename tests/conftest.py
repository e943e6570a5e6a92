from __future__ import annotations

import sys
from pathlib import Path

import numpy as np

ROOT = Path(__file__).resolve().parents[1]
for path in (ROOT, ROOT / "backend"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))


def bin_centred_sine(fft_size: int, bin_index: int, amplitude: float = 1.0) -> np.ndarray:
    n = np.arange(fft_size)
    return amplitude * np.sin(2 * np.pi * bin_index * n / fft_size)
