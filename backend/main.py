#!/usr/bin/env python3
"""
Spectrum Taper - Main Entry Point

Serves the window/spectrum API with FastAPI + uvicorn, or dumps the
coefficients of one window to stdout.
"""

import argparse
import logging
import sys
import os

# Add backend directory to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import Config, DSPConfig
from dsp.windows import available_windows, get_window
from logging_config import setup_logging


def build_parser():
    parser = argparse.ArgumentParser(description='Spectrum Taper')
    parser.add_argument('--debug', '-d', action='store_true',
                        help='Enable debug logging')
    parser.add_argument('--port', '-p', type=int, default=5000,
                        help='Server port (default: 5000)')
    parser.add_argument('--host', type=str, default='0.0.0.0',
                        help='Server host (default: 0.0.0.0)')
    parser.add_argument('--sample-rate', type=float, default=44100.0,
                        help='Sample rate in Hz (default: 44100)')
    parser.add_argument('--fft-size', type=int, default=2048,
                        help='FFT size (default: 2048)')
    parser.add_argument('--window', '-w', type=str, default='blackman-harris',
                        choices=available_windows(),
                        help='Window function (default: blackman-harris)')
    parser.add_argument('--dump', type=int, metavar='SIZE',
                        help='Print SIZE coefficients of --window and exit')
    return parser


def dump_window(name, size, out=None):
    """Write one coefficient per line."""
    out = out or sys.stdout
    for value in get_window(name, size):
        out.write(f"{value:.9g}\n")


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.dump is not None:
        try:
            dump_window(args.window, args.dump)
        except ValueError as e:
            print(f"error: {e}", file=sys.stderr)
            return 2
        return 0

    # Setup logging
    console_level = logging.DEBUG if args.debug else logging.INFO
    setup_logging(console_level=console_level)

    logger = logging.getLogger(__name__)

    # Build config
    config = Config(
        debug=args.debug,
        host=args.host,
        port=args.port,
        dsp=DSPConfig(
            fft_size=args.fft_size,
            sample_rate=args.sample_rate,
            window_type=args.window,
        ),
    )

    logger.info("Starting Spectrum Taper")
    logger.info("  Host: %s:%d", config.host, config.port)
    logger.info("  Window: %s, FFT size: %d", config.dsp.window_type, config.dsp.fft_size)
    logger.info("  Debug: %s", config.debug)

    # Import uvicorn here to avoid import issues
    import uvicorn

    from app import create_app
    app = create_app(config)

    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level='info' if not config.debug else 'debug',
        timeout_keep_alive=30,
    )
    return 0


if __name__ == '__main__':
    sys.exit(main())
