"""
Render errors

Every failure point of a render maps to one exception class. Each class
carries a tag (stable identifier, logged and shown on error pages), a label
(prefix of the human-readable message) and a fallback message for when the
engine supplies no text of its own.

Engine exceptions never leave the engine: translate() converts them into
these classes, and the engine returns them inside a RenderResult.
"""

from typing import Optional, Type

from py_mini_racer import JSEvalException, JSParseException


class RenderError(Exception):
    """Base exception for render failures"""

    tag = 'RenderError'
    stage = 'render'
    label = 'Render failed'
    fallback = 'Render failed'

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.fallback
        super().__init__(f'{self.label}: {self.message}')


class BundleNotFoundError(RenderError):
    """Raised when the bundle file can't be read"""

    tag = 'BundleNotFound'
    stage = 'load'
    label = 'Bundle error'
    fallback = 'SSR bundle not found'


class PolyfillCompileError(RenderError):
    """Raised when the polyfill source doesn't compile"""

    tag = 'PolyfillCompileError'
    stage = 'polyfills'
    label = 'Polyfill error'
    fallback = 'Failed to compile polyfills'


class PolyfillRuntimeError(RenderError):
    """Raised when the polyfill source throws"""

    tag = 'PolyfillRuntimeError'
    stage = 'polyfills'
    label = 'Polyfill error'
    fallback = 'Failed to run polyfills'


class BundleCompileError(RenderError):
    """Raised when the bundle doesn't compile (stale or malformed build)"""

    tag = 'BundleCompileError'
    stage = 'bundle'
    label = 'Compile error'
    fallback = 'Failed to compile script'


class BundleRuntimeError(RenderError):
    """Raised when the bundle throws while being evaluated"""

    tag = 'BundleRuntimeError'
    stage = 'bundle'
    label = 'Runtime error'
    fallback = 'Failed to run script'


class EntryPointCompileError(RenderError):
    """Raised when the render invocation doesn't compile"""

    tag = 'EntryPointCompileError'
    stage = 'entry'
    label = 'Render compile error'
    fallback = 'Failed to compile render call'


class EntryPointRuntimeError(RenderError):
    """Raised when render() is missing or throws"""

    tag = 'EntryPointRuntimeError'
    stage = 'entry'
    label = 'Render error'
    fallback = 'Failed to execute render()'


class ResultConversionError(RenderError):
    """Raised when render()'s return value can't be converted to text"""

    tag = 'ResultConversionError'
    stage = 'convert'
    label = 'Conversion error'
    fallback = 'Failed to convert result to string'


def engine_message(exc: BaseException) -> Optional[str]:
    """Extract the engine's message text, or None when it has none"""
    text = str(exc).strip()
    return text or None


def translate(
    exc: JSEvalException,
    compile_error: Type[RenderError],
    runtime_error: Type[RenderError],
) -> RenderError:
    """
    Map an engine exception to the typed error for its stage.

    Args:
        exc: Exception raised by the engine
        compile_error: Error class for a parse failure at this stage
        runtime_error: Error class for a throw at this stage

    Returns:
        RenderError instance carrying the engine's message (or the fallback)
    """
    if isinstance(exc, JSParseException):
        return compile_error(engine_message(exc))
    return runtime_error(engine_message(exc))
