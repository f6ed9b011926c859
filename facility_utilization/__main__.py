"""Run the utilization service with uvicorn: ``python -m facility_utilization``."""

import argparse

import uvicorn

from .config import settings


def main() -> int:
    parser = argparse.ArgumentParser(description="Facility utilization web service")
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind (default: localhost only)")
    parser.add_argument("--port", type=int, default=settings.port, help="Port to listen on (default: $PORT or 8080)")
    args = parser.parse_args()

    uvicorn.run("facility_utilization.main:app", host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
