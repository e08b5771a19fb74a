from __future__ import annotations

import argparse

import uvicorn


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the echo API service")
    parser.add_argument("--host", default="0.0.0.0", help="Interface to bind")
    parser.add_argument("--port", type=int, default=8080, help="Port to listen on")
    args = parser.parse_args()

    # Logging is configured by the app; keep uvicorn from installing its own.
    uvicorn.run("echo_service.main:app", host=args.host, port=args.port, log_config=None)


if __name__ == "__main__":
    main()
