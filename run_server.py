#!/usr/bin/env python3
"""
Run the dbbasic-web server for the React pages

Usage:
    python run_server.py

Then access:
    http://localhost:8080/           - Home page (server-rendered)
    http://localhost:8080/about      - Any client route (server-rendered)
    http://localhost:8080/hello      - JSON greeting

Settings come from ssr.tsv and SSR_* environment variables
(SSR_MODE=manifest serves the client-rendered shell instead).
"""
from pathlib import Path

from ssr_pages.server import main


if __name__ == "__main__":
    print("=" * 60)
    print("React Pages Server")
    print("=" * 60)
    print()
    print("Available endpoints:")
    print("  GET  / and /{page}  - Page (SSR or manifest mode)")
    print("  GET  /assets/{name} - Built client assets")
    print("  GET  /hello         - JSON greeting")
    print("  PUT  /hello         - JSON greeting")
    print("  GET  /hello/{name}  - JSON greeting for a name")
    print()
    print("Press Ctrl+C to stop")
    print("=" * 60)
    print()

    main(base_dir=Path(__file__).parent)
