"""
ssr-pages: HTML pages for a React front-end

Serves the page shell for a Vite-built client app. In SSR mode the compiled
server bundle runs inside an embedded V8 and its render() output is inlined
into the page; in manifest mode the shell just references the hashed client
assets from the build manifest.
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .assembler import PageResponse, assemble, find_stylesheet, render_page
from .engine import PlatformHandle, RenderResult, ScriptEngine
from .errors import (
    BundleCompileError,
    BundleNotFoundError,
    BundleRuntimeError,
    EntryPointCompileError,
    EntryPointRuntimeError,
    PolyfillCompileError,
    PolyfillRuntimeError,
    RenderError,
    ResultConversionError,
)
from .polyfills import POLYFILL_SOURCE, build_polyfills

__all__ = [
    "PlatformHandle",
    "ScriptEngine",
    "RenderResult",
    "PageResponse",
    "assemble",
    "find_stylesheet",
    "render_page",
    "build_polyfills",
    "POLYFILL_SOURCE",
    "RenderError",
    "BundleNotFoundError",
    "PolyfillCompileError",
    "PolyfillRuntimeError",
    "BundleCompileError",
    "BundleRuntimeError",
    "EntryPointCompileError",
    "EntryPointRuntimeError",
    "ResultConversionError",
]
