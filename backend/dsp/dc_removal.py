"""
DC offset removal using a single-pole IIR high-pass filter.

Strips the constant offset a microphone or ADC adds to an audio frame
before it is tapered, so the DC bin does not leak into low bins.

Transfer function: H(z) = (1 - z^-1) / (1 - alpha * z^-1)
With alpha = 0.9999, the -3dB point is ~0.7 Hz at 44.1 kHz.
"""

import numpy as np
from scipy.signal import lfilter


class DCRemover:
    """IIR high-pass filter for DC removal using scipy lfilter."""

    def __init__(self, alpha=0.9999):
        if not 0.0 < alpha < 1.0:
            raise ValueError("alpha must be in (0, 1).")
        self._alpha = alpha
        # Filter coefficients: b = [1, -1], a = [1, -alpha]
        self._b = np.array([1.0, -1.0], dtype=np.float64)
        self._a = np.array([1.0, -self._alpha], dtype=np.float64)
        # Filter state for continuity between frames, starts from zero
        self._zi = np.zeros(1, dtype=np.float64)

    def remove(self, samples):
        """
        Apply DC removal to a frame of real samples.

        Args:
            samples: 1-D numpy array of audio samples

        Returns:
            DC-removed float32 array
        """
        out, self._zi = lfilter(
            self._b, self._a,
            np.asarray(samples, dtype=np.float64),
            zi=self._zi,
        )
        return out.astype(np.float32)

    def reset(self):
        """Reset filter state."""
        self._zi = np.zeros(1, dtype=np.float64)

    @property
    def alpha(self):
        return self._alpha
