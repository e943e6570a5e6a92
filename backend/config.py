"""
Application configuration with validation.

All magic numbers live here. Dataclass-based for type safety and defaults.
"""

from dataclasses import dataclass, field

from dsp.pipeline import (
    check_averaging_alpha,
    check_averaging_count,
    check_averaging_mode,
)
from dsp.windows import WindowKind


@dataclass
class DSPConfig:
    """Spectrum pipeline configuration."""
    fft_size: int = 2048
    sample_rate: float = 44100.0
    window_type: str = "blackman-harris"
    averaging_mode: str = "exponential"  # "none", "linear", "exponential"
    averaging_count: int = 8              # For linear mode
    averaging_alpha: float = 0.3          # For exponential mode
    dc_removal: bool = True

    def __post_init__(self):
        if self.fft_size < 1:
            raise ValueError("fft_size must be positive.")
        if self.sample_rate <= 0:
            raise ValueError("sample_rate must be positive.")
        # Same checks SpectrumPipeline.set_params applies at runtime
        self.averaging_mode = check_averaging_mode(self.averaging_mode)
        self.averaging_count = check_averaging_count(self.averaging_count)
        self.averaging_alpha = check_averaging_alpha(self.averaging_alpha)
        # Normalize to the canonical menu name, rejects unknown windows
        self.window_type = WindowKind.from_name(self.window_type).value


@dataclass
class APIConfig:
    """HTTP API limits."""
    max_window_size: int = 1 << 20    # Largest window served per request


@dataclass
class Config:
    """Top-level application configuration."""
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 5000
    dsp: DSPConfig = field(default_factory=DSPConfig)
    api: APIConfig = field(default_factory=APIConfig)
