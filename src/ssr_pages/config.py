"""
Server configuration loader

Reads ssr.tsv (key<TAB>value) for server settings.
Environment variables (SSR_<KEY>) override file values; built-in defaults
apply when neither is set.
"""

import csv
import os
from pathlib import Path
from typing import Dict, Optional


DEFAULTS: Dict[str, str] = {
    'host': '0.0.0.0',
    'port': '8080',
    'mode': 'ssr',
    'bundle_path': 'dist/ssr/server.js',
    'assets_dir': 'dist/client/assets',
    'stylesheet_fallback': 'dist/client/assets/index.css',
    'client_script': '/assets/client.js',
    'manifest_path': 'dist/.vite/manifest.json',
    'manifest_entry': 'src/main.jsx',
    'titles_path': 'client/src/route_titles.json',
    'static_dir': 'dist/client/assets',
    'log_dir': './data',
    'app_title': 'Vite + React + Python (SSR)',
    'origin': '',
}

MODES = ('ssr', 'manifest')


class ConfigError(Exception):
    """Raised when a setting has an invalid value"""
    pass


class ServerConfig:
    """Load and expose server settings"""

    def __init__(self, settings_file: str | Path = "ssr.tsv", environ: Optional[Dict[str, str]] = None):
        self.settings_file = Path(settings_file)
        self.environ = os.environ if environ is None else environ
        self.values: Dict[str, str] = dict(DEFAULTS)
        self._load()

    def _load(self):
        """Load file settings, then environment overrides"""
        if self.settings_file.exists():
            with open(self.settings_file, 'r', encoding='utf-8') as f:
                reader = csv.reader(
                    (line for line in f if line.strip() and not line.startswith('#')),
                    delimiter='\t'
                )
                for row in reader:
                    if len(row) < 2 or not row[0].strip():
                        continue
                    self.values[row[0].strip()] = row[1].strip()

        for key in DEFAULTS:
            env_key = f'SSR_{key.upper()}'
            if env_key in self.environ:
                self.values[key] = self.environ[env_key]

        if self.mode not in MODES:
            raise ConfigError(f"Unknown render mode: {self.mode!r} (expected one of {', '.join(MODES)})")

        try:
            int(self.values['port'])
        except ValueError:
            raise ConfigError(f"Port must be an integer: {self.values['port']!r}")

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get a raw setting value"""
        return self.values.get(key, default)

    @property
    def host(self) -> str:
        return self.values['host']

    @property
    def port(self) -> int:
        return int(self.values['port'])

    @property
    def mode(self) -> str:
        return self.values['mode'].lower()

    @property
    def bundle_path(self) -> Path:
        return Path(self.values['bundle_path'])

    @property
    def assets_dir(self) -> Path:
        return Path(self.values['assets_dir'])

    @property
    def stylesheet_fallback(self) -> Path:
        return Path(self.values['stylesheet_fallback'])

    @property
    def client_script(self) -> str:
        return self.values['client_script']

    @property
    def manifest_path(self) -> Path:
        return Path(self.values['manifest_path'])

    @property
    def manifest_entry(self) -> str:
        return self.values['manifest_entry']

    @property
    def titles_path(self) -> Path:
        return Path(self.values['titles_path'])

    @property
    def static_dir(self) -> Path:
        return Path(self.values['static_dir'])

    @property
    def log_dir(self) -> Path:
        return Path(self.values['log_dir'])

    @property
    def app_title(self) -> str:
        return self.values['app_title']

    @property
    def origin(self) -> str:
        """Origin the polyfilled `location` object reports"""
        return self.values['origin'] or f"http://localhost:{self.port}"


# Global instance (lazy loaded)
_config = None


def get_config() -> ServerConfig:
    """Get the global server configuration"""
    global _config
    if _config is None:
        _config = ServerConfig()
    return _config


def reload_config():
    """Reload configuration from file and environment"""
    global _config
    _config = ServerConfig()
    return _config


if __name__ == "__main__":
    config = get_config()

    print("Server Configuration:")
    for key in sorted(config.values):
        print(f"  {key}: {config.values[key]}")
    print(f"  (origin: {config.origin})")
