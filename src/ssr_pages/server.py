"""
HTTP wiring for the page handlers

Handlers under api/ stay thin: they call into this module for the shared
engine and convert PageResponse objects into dbbasic-web responses.

Routes:
    GET  /               - Page (SSR or manifest mode)
    GET  /{page}         - Page (SSR or manifest mode)
    GET  /assets/{name}  - Built client assets
    GET  /hello          - JSON greeting
    PUT  /hello          - JSON greeting
    GET  /hello/{name}   - JSON greeting for a name
"""

import mimetypes
import os
import threading
from pathlib import Path

import dbbasic_web.settings
import uvicorn
from dbbasic_web.responses import html as html_response

from .assembler import PageResponse, render_page
from .config import get_config
from .engine import PlatformHandle, ScriptEngine
from .pages import render_manifest_page
from .polyfills import build_polyfills
from .render_log import RenderLogger


# Engine shared across requests (contexts are still per request)
_engine = None
_engine_lock = threading.Lock()


def get_engine() -> ScriptEngine:
    """Get or create the ScriptEngine instance"""
    global _engine
    engine = _engine
    if engine is not None:
        return engine

    with _engine_lock:
        if _engine is None:
            config = get_config()
            _engine = ScriptEngine(
                platform=PlatformHandle.get(),
                polyfills=build_polyfills(config.origin),
                logger=RenderLogger('ssr', config.log_dir),
            )
        return _engine


def handle_page(path: str = '/') -> PageResponse:
    """Build the page for a request path in the configured mode"""
    config = get_config()

    if config.mode == 'manifest':
        return render_manifest_page(config, path)

    return render_page(get_engine(), config)


def to_response(page: PageResponse):
    """Convert a PageResponse to a dbbasic-web response"""
    if page.content_type.startswith('text/html'):
        return html_response(page.body, status=page.status)

    headers = [('content-type', page.content_type)]
    return page.status, headers, [page.body.encode('utf-8')]


def serve_asset(name: str):
    """
    Serve a file from the static directory.

    Returns 404 for missing files and names that resolve outside the directory.
    """
    static_dir = get_config().static_dir.resolve()
    path = (static_dir / name).resolve()

    if static_dir not in path.parents or not path.is_file():
        return 404, [('content-type', 'text/plain; charset=utf-8')], [f'Asset not found: {name}'.encode('utf-8')]

    content_type = mimetypes.guess_type(path.name)[0] or 'application/octet-stream'
    return 200, [('content-type', content_type)], [path.read_bytes()]


def main(base_dir: str | Path | None = None):
    """
    Start the server.

    Args:
        base_dir: Directory holding api/ (default: $SSR_BASE_DIR or cwd)
    """
    config = get_config()

    # Bring the engine and its render log up before the first request arrives
    if config.mode == 'ssr':
        engine = get_engine()
        print(f"V8 {engine.platform.v8_version} ready")
        print(f"Render log: {engine.logger.log_file}")

    dbbasic_web.settings.BASE_DIR = Path(base_dir or os.environ.get('SSR_BASE_DIR') or Path.cwd())

    print(f"Server running at http://{config.host}:{config.port}/ ({config.mode} mode)")
    print(f"Serving assets from {config.static_dir}/")

    uvicorn.run(
        "dbbasic_web.asgi:app",
        host=config.host,
        port=config.port,
        log_level="info",
    )
