#!/usr/bin/env python3
"""
Subir a API localmente com uvicorn.

Uso:
  python scripts/serve.py [--host 0.0.0.0] [--port 3000] [--reload]
"""
from __future__ import annotations

import argparse

import uvicorn

from portfolio_api.core.config import get_settings


def main() -> None:
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Run the portfolio collections API")
    ap.add_argument("--host", default=settings.host, help=f"Bind address (default: {settings.host})")
    ap.add_argument("--port", type=int, default=settings.port, help=f"Port (default: {settings.port})")
    ap.add_argument("--reload", action="store_true", help="Reload on code changes (dev only)")
    args = ap.parse_args()

    print(f"Server running on http://{args.host}:{args.port} ({settings.storage_backend} storage)")
    uvicorn.run(
        "portfolio_api.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
