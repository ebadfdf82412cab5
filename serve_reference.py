from __future__ import annotations

"""
Run the reference LL(1) analysis service locally, on the port the dashboard
expects by default.

Usage:
  python serve_reference.py [--host 127.0.0.1] [--port 3002]
"""

import argparse

import uvicorn

from ll1_dashboard.config import configure_logging


def main() -> None:
	ap = argparse.ArgumentParser(description="Serve the reference LL(1) analysis service.")
	ap.add_argument("--host", default="127.0.0.1")
	ap.add_argument("--port", type=int, default=3002)
	ap.add_argument("--log-level", default="INFO")
	args = ap.parse_args()

	configure_logging(args.log_level.upper())
	print("analysis service running on port", args.port)
	uvicorn.run("ll1_dashboard.service:app", host=args.host, port=args.port, log_level=args.log_level.lower())


if __name__ == "__main__":
	main()
