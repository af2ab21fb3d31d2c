"""
Page metadata and the client-rendered layout

Used in manifest mode: the server doesn't execute JavaScript, it serves a
shell that loads the hashed client bundle from the build manifest, with a
per-route title and meta description and a small initial-data payload.
"""

import html
import json
import time
from pathlib import Path
from typing import Any, Dict, Optional

from .assembler import PageResponse
from .manifest import ManifestError, load_manifest, resolve_entry


DEFAULT_TITLE = 'React Manifest'

META_DESCRIPTIONS = {
    '/': 'Welcome to the home page',
    '/about': 'Learn more about this project',
}
DEFAULT_META_DESCRIPTION = 'A Vite + React + Python app'

LAYOUT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
{meta}    <title>{title}</title>
{stylesheet}  </head>
  <body>
    <div id="root"></div>
{initial_data}    <script type="module" src="{js}"></script>
  </body>
</html>"""


def load_titles(path: str | Path) -> Dict[str, str]:
    """
    Load route_titles.json (path -> title); missing file means no titles.

    Raises:
        ManifestError: If the file is unreadable or not a JSON object
    """
    path = Path(path)
    if not path.exists():
        return {}

    try:
        text = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(f'failed to read route_titles.json at {path}: {e}')

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ManifestError(f'invalid route_titles.json: {e}')

    if not isinstance(data, dict):
        raise ManifestError('invalid route_titles.json: expected an object')

    return {str(k): str(v) for k, v in data.items()}


def lookup_path(path: str) -> str:
    """Normalize a request path to its route key"""
    path = (path or '').strip()
    if path in ('', '/'):
        return '/'
    return '/' + path.lstrip('/')


def title_for(titles: Dict[str, str], path: str, default: str = DEFAULT_TITLE) -> str:
    return titles.get(lookup_path(path), default)


def meta_description_for(path: str) -> str:
    return META_DESCRIPTIONS.get(lookup_path(path), DEFAULT_META_DESCRIPTION)


def initial_data(message: str = 'Hello from the Python server!') -> Dict[str, Any]:
    """Payload exposed to the client as window.__INITIAL_DATA__"""
    return {
        'msg': message,
        'timestamp': int(time.time()),
    }


def render_layout(
    title: str,
    js: str,
    css: Optional[str] = None,
    meta_description: Optional[str] = None,
    data: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Render the client-rendered page shell.

    Initial data is embedded as JSON inside a <script>; '<' is escaped so the
    payload can't close the tag.
    """
    meta = ''
    if meta_description:
        meta = f'    <meta name="description" content="{html.escape(meta_description, quote=True)}" />\n'

    stylesheet = ''
    if css:
        stylesheet = f'    <link rel="stylesheet" href="{html.escape(css, quote=True)}" />\n'

    initial = ''
    if data is not None:
        payload = json.dumps(data).replace('<', '\\u003c')
        initial = f'    <script>window.__INITIAL_DATA__ = {payload};</script>\n'

    return LAYOUT_TEMPLATE.format(
        meta=meta,
        title=html.escape(title),
        stylesheet=stylesheet,
        initial_data=initial,
        js=html.escape(js, quote=True),
    )


def render_manifest_page(config, path: str) -> PageResponse:
    """
    Build the manifest-mode page for a request path.

    Args:
        config: ServerConfig (manifest path/entry, titles path)
        path: Request path

    Returns:
        PageResponse (500 with a plain message when the manifest is unusable)
    """
    try:
        manifest = load_manifest(config.manifest_path)
        assets = resolve_entry(manifest, config.manifest_entry)
        titles = load_titles(config.titles_path)
    except ManifestError as e:
        return PageResponse(status=500, body=str(e), content_type='text/plain; charset=utf-8')

    body = render_layout(
        title=title_for(titles, path),
        js=assets.js,
        css=assets.css,
        meta_description=meta_description_for(path),
        data=initial_data(),
    )
    return PageResponse(status=200, body=body)
