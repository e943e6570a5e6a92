"""
REST API routes for window generation and frame analysis.
"""

import logging
from typing import List

import numpy as np
from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel

from dsp.windows import (
    WindowKind,
    apply_window,
    available_windows,
    generate,
    window_correction_factor,
)

logger = logging.getLogger(__name__)


class TaperRequest(BaseModel):
    window: str
    samples: List[float]


class SpectrumRequest(BaseModel):
    samples: List[float]


def _lookup_kind(name):
    try:
        return WindowKind.from_name(name)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


def create_router():
    router = APIRouter()

    @router.get("/status")
    async def get_status(request: Request):
        pipeline = request.app.state.pipeline
        return {
            'windows': available_windows(),
            'fft_size': pipeline.fft_size,
            'sample_rate': pipeline.sample_rate,
            'dsp': pipeline.get_params(),
        }

    @router.get("/windows")
    async def list_windows():
        return {'windows': available_windows()}

    @router.get("/windows/{name}")
    async def get_window_coefficients(name: str, request: Request, size: int = Query(...)):
        kind = _lookup_kind(name)
        limit = request.app.state.config.api.max_window_size
        if size > limit:
            raise HTTPException(status_code=400, detail=f"size exceeds limit of {limit}")
        try:
            window = generate(kind, size)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        logger.debug("Served %s window of size %d", kind.value, size)
        return {
            'window': kind.value,
            'size': size,
            'coefficients': window.tolist(),
            'correction_factor': window_correction_factor(window),
        }

    @router.post("/taper")
    def taper_frame(body: TaperRequest, request: Request):
        kind = _lookup_kind(body.window)
        limit = request.app.state.config.api.max_window_size
        if len(body.samples) > limit:
            raise HTTPException(status_code=400, detail=f"frame exceeds limit of {limit} samples")
        try:
            tapered = apply_window(np.asarray(body.samples, dtype=np.float64), kind)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return {'window': kind.value, 'samples': tapered.tolist()}

    # Plain def: FastAPI runs it in the threadpool, off the event loop
    @router.post("/spectrum")
    def analyze_frame(body: SpectrumRequest, request: Request):
        pipeline = request.app.state.pipeline
        result = pipeline.process(body.samples)
        if result is None:
            raise HTTPException(
                status_code=400,
                detail=f"frame must contain exactly {pipeline.fft_size} samples",
            )
        return {
            'spectrum': result.spectrum.tolist(),
            'freqs': result.freqs.tolist(),
            'peak_bin': result.peak_bin,
            'peak_freq': result.peak_freq,
            'peak_power': result.peak_power,
        }

    @router.post("/params")
    def set_params(params: dict, request: Request):
        pipeline = request.app.state.pipeline
        try:
            pipeline.set_params(params)
        except (ValueError, TypeError) as e:
            raise HTTPException(status_code=400, detail=str(e))
        return pipeline.get_params()

    return router
