"""
Entry point for serving the consensus core API.

Usage:
    python -m core [--port 8100] [--host 127.0.0.1] [--reload]
"""

import argparse
import uvicorn


def main():
    parser = argparse.ArgumentParser(
        description="Serve the audit-consensus core API"
    )
    parser.add_argument(
        "--port", type=int, default=8100,
        help="Port to serve on (default: 8100)"
    )
    parser.add_argument(
        "--host", type=str, default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)"
    )
    parser.add_argument(
        "--reload", action="store_true",
        help="Enable auto-reload for development"
    )

    args = parser.parse_args()

    print("\n  audit-consensus core API")
    print(f"  Listening on http://{args.host}:{args.port}\n")

    uvicorn.run(
        "core.api:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
