"""
Script Execution Engine

Runs the compiled application bundle inside an embedded V8 and returns the
markup produced by its render() entry point.

Every render:
1. Ensures the V8 platform is up (once per process)
2. Creates a fresh isolated context (own isolate, own globals)
3. Evaluates the polyfill source
4. Evaluates the bundle
5. Invokes render()
6. Converts the return value to text

Each step that can fail maps to its own RenderError subclass. Failures come
back inside a RenderResult; engine exceptions never reach the caller.

Nothing is cached or pooled: the bundle is read from disk on every call and
the context is closed before render() returns.
"""

import sys
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Type

from py_mini_racer import JSEvalException, MiniRacer

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
    translate,
)
from .polyfills import POLYFILL_SOURCE
from .render_log import RenderLogger


RESULT_GLOBAL = '__ssr_result__'

# Appended to every evaluated script so its completion value is undefined.
# Only the conversion step hands a value back to Python.
DISCARD_COMPLETION = '\n;void 0;'

# Text crossing into Python must be well-formed UTF-16: unpaired surrogates
# throw here and surface as ResultConversionError.
CONVERSION_SCRIPT = r'''(function() {
    var text = String(globalThis.%s);
    if (/[\uD800-\uDBFF](?![\uDC00-\uDFFF])|(?:^|[^\uD800-\uDBFF])[\uDC00-\uDFFF]/.test(text)) {
        throw new TypeError('render() returned text with an unpaired surrogate');
    }
    return text;
})()''' % RESULT_GLOBAL


class PlatformHandle:
    """
    Process-wide V8 platform.

    Created once (first caller wins) and never torn down. Renders receive the
    handle explicitly instead of reaching for module state.
    """

    _instance: Optional['PlatformHandle'] = None
    _lock = threading.Lock()

    def __init__(self):
        # Bring V8 up with a throwaway isolate
        warmup = MiniRacer()
        try:
            self.v8_version = warmup.v8_version
        finally:
            warmup.close()
        self.initialized_at = time.time()

    @classmethod
    def get(cls) -> 'PlatformHandle':
        """Return the platform, initializing it on first use"""
        instance = cls._instance
        if instance is not None:
            return instance

        with cls._lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    @classmethod
    def is_ready(cls) -> bool:
        return cls._instance is not None

    @contextmanager
    def isolated_context(self) -> Iterator[MiniRacer]:
        """
        Yield a fresh engine context.

        The context belongs to the caller alone and is closed on every exit
        path, including exceptions.
        """
        ctx = MiniRacer()
        try:
            yield ctx
        finally:
            ctx.close()


@dataclass
class RenderResult:
    """Outcome of one render: markup or a typed error"""

    html: Optional[str] = None
    error: Optional[RenderError] = None
    duration_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def tag(self) -> Optional[str]:
        return self.error.tag if self.error else None


class ScriptEngine:
    """
    Executes application bundles.

    Usage::

        engine = ScriptEngine()
        result = engine.render_file('dist/ssr/server.js')
        if result.ok:
            print(result.html)
    """

    def __init__(
        self,
        platform: Optional[PlatformHandle] = None,
        polyfills: str = POLYFILL_SOURCE,
        entry_point: str = 'render',
        logger: Optional[RenderLogger] = None,
    ):
        """
        Initialize engine.

        Args:
            platform: Platform handle (default: process-wide instance)
            polyfills: Source evaluated before the bundle in every context
            entry_point: Name of the zero-argument function the bundle defines
            logger: Render log (default: no logging)
        """
        self.platform = platform
        self.polyfills = polyfills
        self.entry_point = entry_point
        self.logger = logger

    @property
    def invocation(self) -> str:
        """Fixed script that calls the entry point and stashes its return value"""
        return f'(function() {{ globalThis.{RESULT_GLOBAL} = {self.entry_point}(); }})();'

    def render(self, bundle_text: str) -> RenderResult:
        """
        Render a bundle.

        Args:
            bundle_text: Compiled application source

        Returns:
            RenderResult with the entry point's return value as text, or the
            error for the step that failed
        """
        start = time.perf_counter()

        try:
            html = self._execute(bundle_text)
            result = RenderResult(html=html)
        except RenderError as e:
            result = RenderResult(error=e)

        result.duration_ms = (time.perf_counter() - start) * 1000
        self._log(result)
        return result

    def render_file(self, path: str | Path) -> RenderResult:
        """
        Read a bundle from disk and render it.

        The file is read on every call; a rebuilt bundle is picked up by the
        next request.
        """
        path = Path(path)

        try:
            bundle_text = path.read_text(encoding='utf-8')
        except FileNotFoundError:
            return self._failed(BundleNotFoundError(f'SSR bundle not found: {path}'), path)
        except IsADirectoryError:
            return self._failed(BundleNotFoundError(f'SSR bundle path is a directory: {path}'), path)
        except (OSError, UnicodeDecodeError) as e:
            return self._failed(BundleNotFoundError(f'Failed to read SSR bundle {path}: {e}'), path)

        return self.render(bundle_text)

    def _execute(self, bundle_text: str) -> str:
        platform = self.platform or PlatformHandle.get()

        with platform.isolated_context() as ctx:
            self._run(ctx, self.polyfills, PolyfillCompileError, PolyfillRuntimeError)
            self._run(ctx, bundle_text, BundleCompileError, BundleRuntimeError)
            self._run(ctx, self.invocation, EntryPointCompileError, EntryPointRuntimeError)

            try:
                text = ctx.eval(CONVERSION_SCRIPT)
            except JSEvalException as e:
                raise translate(e, ResultConversionError, ResultConversionError)

            if not isinstance(text, str):
                raise ResultConversionError(
                    f'Expected text from render(), got {type(text).__name__}'
                )
            return text

    def _run(
        self,
        ctx: MiniRacer,
        source: str,
        compile_error: Type[RenderError],
        runtime_error: Type[RenderError],
    ) -> None:
        """Evaluate one script, raising the stage's error on failure"""
        try:
            ctx.eval(source + DISCARD_COMPLETION)
        except JSEvalException as e:
            raise translate(e, compile_error, runtime_error)

    def _failed(self, error: RenderError, path: Path) -> RenderResult:
        result = RenderResult(error=error)
        self._log(result, path=str(path))
        return result

    def _log(self, result: RenderResult, **fields) -> None:
        if self.logger is None:
            return

        # A render that finished stays finished when the log can't be written
        try:
            if result.ok:
                self.logger.info(
                    'Render completed',
                    duration_ms=f'{result.duration_ms:.2f}',
                    bytes=len(result.html.encode('utf-8')),
                    **fields,
                )
            else:
                self.logger.error(
                    f'Render failed: {result.error}',
                    tag=result.error.tag,
                    stage=result.error.stage,
                    duration_ms=f'{result.duration_ms:.2f}',
                    **fields,
                )
        except OSError as e:
            print(f'[ssr] Failed to write render log: {e}', file=sys.stderr)
