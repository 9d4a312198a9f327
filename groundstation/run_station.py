"""
Ground Station Runner

Usage:
    python -m groundstation.run_station                 # log state changes to the console
    python -m groundstation.run_station --api           # serve the HTTP status API
    python -m groundstation.run_station --host 127.0.0.1 --port 8888 --no-classifier

Run mock_device_streamer first to test without hardware:
    python -m mock_device_streamer.server
"""

import argparse
import logging
import time

import uvicorn

from groundstation.config import settings
from groundstation.state.models import ConnectionStatus
from groundstation.station import GroundStation, load_default_classifier

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = (ConnectionStatus.DISCONNECTED, ConnectionStatus.ERROR)


def log_update(field_name, value):
    if field_name == "video_frame":
        logger.debug("video_frame: %dx%d", value.width, value.height)
    else:
        logger.info("%s: %s", field_name, value)


def run_console(station: GroundStation, reconnect: bool) -> int:
    station.state.add_listener(log_update)
    station.start()

    try:
        while True:
            time.sleep(0.5)

            if station.status in TERMINAL_STATUSES and not station.reader.is_running():
                if not reconnect:
                    break
                logger.info(
                    "Reconnecting in %.1f seconds", settings.network.read_timeout
                )
                time.sleep(settings.network.read_timeout)
                station.start()

    except KeyboardInterrupt:
        logger.info("Interrupted by user")

    finally:
        station.close()

    return 1 if station.status is ConnectionStatus.ERROR else 0


def main():
    parser = argparse.ArgumentParser(description="Run the ground station receiver")
    parser.add_argument("--host", default=settings.network.host, help="Device host")
    parser.add_argument("--port", type=int, default=settings.network.port, help="Device port")
    parser.add_argument(
        "--api",
        action="store_true",
        help="Serve the HTTP status API instead of logging to the console",
    )
    parser.add_argument(
        "--no-classifier",
        action="store_true",
        help="Do not load the YOLO model",
    )
    parser.add_argument(
        "--reconnect",
        action="store_true",
        help="Start a new connection attempt after each disconnect",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
    )

    settings.network.host = args.host
    settings.network.port = args.port

    classifier = None if args.no_classifier else load_default_classifier()
    station = GroundStation(classifier=classifier)

    if args.api:
        from groundstation.api import create_app

        app = create_app(station, autostart=True)
        uvicorn.run(app, host=settings.api.host, port=settings.api.port, log_level="info")
        return 0

    return run_console(station, args.reconnect)


if __name__ == "__main__":
    exit(main())
