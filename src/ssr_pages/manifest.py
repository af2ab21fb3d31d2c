"""
Build manifest lookup

Vite writes dist/.vite/manifest.json mapping each entry module to its hashed
output files:

    {"src/main.jsx": {"file": "assets/main-3f2a.js", "css": ["assets/main-9c1b.css"]}}
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional


DEFAULT_ENTRY = 'src/main.jsx'
DEFAULT_SCRIPT = '/assets/main.js'


class ManifestError(Exception):
    """Raised when the manifest is missing, invalid, or lacks the entry"""
    pass


@dataclass
class EntryAssets:
    """Public paths of an entry's script and first stylesheet"""

    js: str
    css: Optional[str] = None


def load_manifest(path: str | Path) -> Dict[str, Any]:
    """
    Load manifest.json.

    Raises:
        ManifestError: If the file is missing, unreadable or not a JSON object
    """
    path = Path(path)

    if not path.exists():
        raise ManifestError(
            f"manifest.json not found at {path} - did you run 'cd client && npm run build'?"
        )

    try:
        text = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(f"failed to read manifest.json at {path}: {e}")

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ManifestError(f"invalid manifest.json: {e}")

    if not isinstance(data, dict):
        raise ManifestError('invalid manifest.json: expected an object')

    return data


def resolve_entry(manifest: Dict[str, Any], entry: str = DEFAULT_ENTRY) -> EntryAssets:
    """
    Resolve an entry's output files.

    Raises:
        ManifestError: If the entry isn't in the manifest
    """
    chunk = manifest.get(entry)
    if not isinstance(chunk, dict):
        raise ManifestError(
            f"Manifest missing '{entry}' entry. Check vite.config.js input path."
        )

    file = chunk.get('file')
    js = f'/{file}' if isinstance(file, str) and file else DEFAULT_SCRIPT

    css = None
    stylesheets = chunk.get('css')
    if isinstance(stylesheets, list) and stylesheets and isinstance(stylesheets[0], str):
        css = f'/{stylesheets[0]}'

    return EntryAssets(js=js, css=css)
