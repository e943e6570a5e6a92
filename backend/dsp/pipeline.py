"""
Spectrum pipeline.

Turns frames of real audio samples into a one-sided power spectrum.
This is the consumer of dsp.windows: the taper is generated once per
(window, fft_size) and multiplied into every frame before the FFT.

Pipeline stages:
1. DC offset removal (IIR high-pass)
2. Taper
3. Real FFT (NumPy)
4. Power spectrum, scaled so a full-scale sine at a bin centre reads 0 dBFS
5. Averaging (none / linear / exponential)
6. dBFS conversion and peak search
"""

import logging
import threading
from collections import deque
from dataclasses import dataclass

import numpy as np

from dsp.dc_removal import DCRemover
from dsp.windows import WindowKind, generate, window_correction_factor

logger = logging.getLogger(__name__)

POWER_FLOOR = 1e-20
AVERAGING_MODES = ("none", "linear", "exponential")


@dataclass
class SpectrumResult:
    """One analysed frame."""
    spectrum: np.ndarray        # float32 dBFS, fft_size // 2 + 1 bins
    freqs: np.ndarray           # float64 bin centres in Hz
    peak_bin: int
    peak_freq: float            # Hz
    peak_power: float           # dBFS


def check_averaging_mode(value):
    if not isinstance(value, str) or value not in AVERAGING_MODES:
        raise ValueError(f"Unknown averaging mode: {value}")
    return value


def check_averaging_count(value):
    count = int(value)
    if count < 1:
        raise ValueError("averaging_count must be at least 1.")
    return count


def check_averaging_alpha(value):
    alpha = float(value)
    if not 0.0 < alpha <= 1.0:
        raise ValueError("averaging_alpha must be in (0, 1].")
    return alpha


class PowerAverager:
    """Running average of linear power spectra."""

    def __init__(self, mode="none", count=8, alpha=0.3):
        self.mode = check_averaging_mode(mode)
        self._alpha = check_averaging_alpha(alpha)
        self._history = deque(maxlen=check_averaging_count(count))
        self._ema = None

    @property
    def count(self):
        return self._history.maxlen

    @count.setter
    def count(self, value):
        self._history = deque(self._history, maxlen=check_averaging_count(value))

    @property
    def alpha(self):
        return self._alpha

    @alpha.setter
    def alpha(self, value):
        self._alpha = check_averaging_alpha(value)

    def update(self, power):
        """Fold one spectrum in and return the current average."""
        if self.mode == "linear":
            self._history.append(power)
            return np.mean(self._history, axis=0)
        if self.mode == "exponential":
            if self._ema is None:
                self._ema = power
            else:
                self._ema = self.alpha * power + (1 - self.alpha) * self._ema
            return self._ema.copy()
        return power

    def clear(self):
        self._history.clear()
        self._ema = None


class SpectrumPipeline:
    """
    Frame-by-frame spectrum analysis with a selectable taper.

    process() and set_param() may be called from different threads.
    """

    def __init__(self, config):
        """
        Args:
            config: DSPConfig dataclass
        """
        self._fft_size = config.fft_size
        self._sample_rate = config.sample_rate
        self._use_window(WindowKind.from_name(config.window_type))
        self._dc_remover = DCRemover() if config.dc_removal else None
        self._averager = PowerAverager(
            config.averaging_mode, config.averaging_count, config.averaging_alpha
        )

        # Bins other than DC (and Nyquist for even sizes) carry both halves of a tone
        self._freqs = np.fft.rfftfreq(self._fft_size, d=1.0 / self._sample_rate)
        self._bin_gain = np.full(self._freqs.size, 4.0)
        self._bin_gain[0] = 1.0
        if self._fft_size % 2 == 0:
            self._bin_gain[-1] = 1.0

        # key -> (validator, setter); validators raise ValueError/TypeError
        self._params = {
            'window_type': (WindowKind.from_name, self._set_window_type),
            'averaging_mode': (check_averaging_mode, self._set_averaging_mode),
            'averaging_count': (check_averaging_count, self._set_averaging_count),
            'averaging_alpha': (check_averaging_alpha, self._set_averaging_alpha),
            'dc_removal': (bool, self._set_dc_removal),
        }
        self._lock = threading.Lock()

        logger.info(
            "Spectrum pipeline: fft=%d, fs=%.1f, window=%s, avg=%s, dc_removal=%s",
            self._fft_size,
            self._sample_rate,
            self._window_kind.value,
            self._averager.mode,
            config.dc_removal,
        )

    def _use_window(self, kind):
        self._window_kind = kind
        self._window = generate(kind, self._fft_size)
        self._window_correction = window_correction_factor(self._window)

    def process(self, frame):
        """
        Analyse one frame.

        Args:
            frame: 1-D sequence of real samples, length fft_size

        Returns:
            SpectrumResult, or None if the frame has the wrong shape
        """
        frame = np.asarray(frame, dtype=np.float32)
        if frame.shape != (self._fft_size,):
            logger.warning("Frame shape %s does not match FFT size %d",
                           frame.shape, self._fft_size)
            return None

        with self._lock:
            if self._dc_remover is not None:
                frame = self._dc_remover.remove(frame)
            power = self._power_spectrum(frame)
            power = self._averager.update(power)

        spectrum = (10.0 * np.log10(np.maximum(power, POWER_FLOOR))).astype(np.float32)
        peak_bin = int(np.argmax(spectrum))
        return SpectrumResult(
            spectrum=spectrum,
            freqs=self._freqs.copy(),
            peak_bin=peak_bin,
            peak_freq=float(self._freqs[peak_bin]),
            peak_power=float(spectrum[peak_bin]),
        )

    def _power_spectrum(self, samples):
        """One-sided linear power, (2|X|)^2 / sum(w)^2 away from DC."""
        tapered = samples.astype(np.float64) * self._window
        power = np.abs(np.fft.rfft(tapered)) ** 2 * self._bin_gain
        if self._window_correction > 0:
            power /= self._window_correction
        return np.maximum(power, POWER_FLOOR)

    def set_param(self, key, value):
        """Change one pipeline parameter (thread-safe). Unknown keys are ignored."""
        self.set_params({key: value})

    def set_params(self, params):
        """
        Change several parameters at once (thread-safe).

        Every value is validated before any is applied, so a rejected
        request leaves the pipeline unchanged. Unknown keys are ignored.

        Raises:
            ValueError, TypeError: if any value is invalid
        """
        updates = []
        for key, value in params.items():
            entry = self._params.get(key)
            if entry is None:
                logger.warning("Ignoring unknown pipeline parameter %r", key)
                continue
            validate, setter = entry
            updates.append((setter, validate(value)))

        with self._lock:
            for setter, value in updates:
                setter(value)

    def _set_window_type(self, kind):
        if kind is self._window_kind:
            return
        self._use_window(kind)
        # Averages taken with the old taper are on a different scale
        self._averager.clear()
        logger.info("Window changed to %s", kind.value)

    def _set_averaging_mode(self, value):
        self._averager.mode = value
        self._averager.clear()
        logger.info("Averaging mode changed to %s", value)

    def _set_averaging_count(self, value):
        self._averager.count = value

    def _set_averaging_alpha(self, value):
        self._averager.alpha = value

    def _set_dc_removal(self, value):
        if not value:
            self._dc_remover = None
        elif self._dc_remover is None:
            self._dc_remover = DCRemover()

    def get_params(self):
        """Current parameter values, keyed like set_param()."""
        return {
            'window_type': self._window_kind.value,
            'averaging_mode': self._averager.mode,
            'averaging_count': self._averager.count,
            'averaging_alpha': self._averager.alpha,
            'dc_removal': self._dc_remover is not None,
        }

    def reset(self):
        """Drop averages and filter state (thread-safe)."""
        with self._lock:
            self._averager.clear()
            if self._dc_remover is not None:
                self._dc_remover.reset()

    @property
    def fft_size(self):
        return self._fft_size

    @property
    def sample_rate(self):
        return self._sample_rate

    @property
    def window(self):
        return self._window.copy()
