"""
SSR Response Assembler

Turns a render outcome into a complete HTML document.

- Success: rendered markup inside the shell's #root element, stylesheet
  inlined in a <style> block, client bundle referenced for hydration (200)
- Failure: minimal error document with the failure message (500)

Both paths always return well-formed HTML.
"""

import html
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from .engine import RenderResult, ScriptEngine
from .errors import BundleNotFoundError


STYLESHEET_EXTENSIONS = ('.css',)

BUILD_HINT = 'Make sure to run: cd frontend && bun run build'

SHELL_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <link rel="icon" type="image/svg+xml" href="/logo.svg" />
    <style>{css}</style>
    <title>{title}</title>
  </head>
  <body>
    <div id="root">{html}</div>
    <script type="module" src="{script}"></script>
  </body>
</html>"""

ERROR_TEMPLATE = """<!DOCTYPE html>
<html>
<head><title>Error</title></head>
<body><h1>SSR Error</h1>{paragraphs}</body>
</html>"""


@dataclass
class PageResponse:
    """Status and body of an HTML page"""

    status: int
    body: str
    content_type: str = 'text/html; charset=utf-8'


def find_stylesheet(
    assets_dir: str | Path,
    fallback: Optional[str | Path] = None,
    extensions: Iterable[str] = STYLESHEET_EXTENSIONS,
) -> Optional[str]:
    """
    Locate stylesheet text for the page.

    Scans assets_dir for the first file with a stylesheet extension, then
    tries the fallback path. With several matching files, which one wins
    depends on directory order.

    Returns:
        Stylesheet text, or None when nothing readable was found
    """
    extensions = tuple(ext.lower() for ext in extensions)
    assets_dir = Path(assets_dir)

    if assets_dir.is_dir():
        for path in assets_dir.iterdir():
            if path.is_file() and path.suffix.lower() in extensions:
                try:
                    return path.read_text(encoding='utf-8')
                except (OSError, UnicodeDecodeError):
                    continue

    if fallback is not None:
        try:
            return Path(fallback).read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError):
            return None

    return None


def render_shell(
    rendered: str,
    stylesheet: Optional[str] = None,
    client_script: str = '/assets/client.js',
    title: str = 'Vite + React + Python (SSR)',
) -> str:
    """Embed rendered markup and stylesheet text (both verbatim) in the page shell"""
    return SHELL_TEMPLATE.format(
        css=stylesheet or '',
        title=html.escape(title),
        html=rendered,
        script=html.escape(client_script, quote=True),
    )


def render_error_page(message: str, hint: Optional[str] = None) -> str:
    """Minimal error document; message text is escaped"""
    paragraphs = []
    if hint:
        paragraphs.append(f'<p>{html.escape(hint)}</p>')
    paragraphs.append(f'<p>{html.escape(message)}</p>')
    return ERROR_TEMPLATE.format(paragraphs=''.join(paragraphs))


def assemble(
    result: RenderResult,
    stylesheet: Optional[str] = None,
    client_script: str = '/assets/client.js',
    title: str = 'Vite + React + Python (SSR)',
) -> PageResponse:
    """
    Build the response for a render outcome.

    Args:
        result: Outcome from ScriptEngine
        stylesheet: Stylesheet text to inline (None for an empty style block)
        client_script: Path of the client bundle used for hydration
        title: Document title

    Returns:
        PageResponse (200 on success, 500 on any render failure)
    """
    if not result.ok:
        if isinstance(result.error, BundleNotFoundError):
            body = render_error_page(
                f'Failed to load SSR bundle. {result.error.message}',
                hint=BUILD_HINT,
            )
        else:
            body = render_error_page(f'Failed to render: {result.error}')
        return PageResponse(status=500, body=body)

    return PageResponse(
        status=200,
        body=render_shell(result.html, stylesheet, client_script, title),
    )


def render_page(engine: ScriptEngine, config) -> PageResponse:
    """
    Run the whole SSR pipeline for one request.

    Args:
        engine: Script engine
        config: ServerConfig (bundle path, assets dir, client script, title)

    Returns:
        PageResponse
    """
    result = engine.render_file(config.bundle_path)

    if not result.ok:
        return assemble(result)

    stylesheet = find_stylesheet(config.assets_dir, config.stylesheet_fallback)
    return assemble(result, stylesheet, config.client_script, config.app_title)
