"""
Application Initialization
==========================
This module builds the window around the drawing store and starts the Qt
event loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Parses the command line (model path, elevation delay, logging).
2. Instantiates the toggle store (DrawingStore).
3. Instantiates the Main Window, passing the store in.
4. Kicks off the asynchronous model load.
"""
from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from elevationprofile import config
from elevationprofile.application import create_app
from elevationprofile.logging_config import parse_level, setup_logging
from elevationprofile.store import DrawingStore
from elevationprofile.view.main_window import MainWindow

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="elevationprofile",
        description="Pick two points on a 3D surface and plot the elevation profile between them.",
    )
    parser.add_argument("model", nargs="?", help="Surface model file (OBJ, STL, PLY, VTK). Demo terrain if omitted.")
    parser.add_argument(
        "--delay-ms",
        type=int,
        default=config.ELEVATION_RESOLVE_DELAY_MS,
        help="Delay before elevations are probed after a line is picked (default: %(default)s).",
    )
    parser.add_argument("--draw", action="store_true", help="Start with line drawing enabled.")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: %(default)s).")
    parser.add_argument("--log-file", default=None, help="Optional path to also write logs to.")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # 1. Setup Logging (Console + Optional File)
    setup_logging(level=parse_level(args.log_level), log_file=args.log_file)

    # 2. Create the Qt Application
    app = create_app()

    # 3. Initialize the toggle store
    store = DrawingStore(enabled=args.draw)

    # 4. Initialize the Main Window, passing the store
    window = MainWindow(store, resolve_delay_ms=args.delay_ms)
    window.show()
    window.load_model(args.model)

    # 5. Start Event Loop
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
