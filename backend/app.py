"""
FastAPI application factory.

Serves window coefficients and frame spectra over HTTP. A single
SpectrumPipeline is shared by all requests; its own lock serializes
frame processing and parameter changes.
"""

import logging

from fastapi import FastAPI

from api.routes import create_router
from config import Config
from dsp.pipeline import SpectrumPipeline

logger = logging.getLogger(__name__)


def create_app(config=None):
    """
    Build the application.

    Args:
        config: Config dataclass (defaults used when None)

    Returns:
        FastAPI app with config and pipeline on app.state
    """
    config = config or Config()

    app = FastAPI(title="Spectrum Taper", debug=config.debug)
    app.state.config = config
    app.state.pipeline = SpectrumPipeline(config.dsp)
    app.include_router(create_router(), prefix="/api")

    logger.info(
        "App created: window=%s, fft_size=%d",
        config.dsp.window_type,
        config.dsp.fft_size,
    )
    return app
