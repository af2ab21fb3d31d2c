"""
Polyfill Environment

Host globals injected into every render context before the bundle runs.

The embedded engine is bare V8: no window, no console, no timers, no event
loop. React's server renderer and scheduler touch a handful of these, so
each render context gets a minimal synthetic environment first.

Behavior differences from a real browser/Node host:
- Timers and process.nextTick run their callback immediately, in call order
- MessageChannel delivers messages synchronously
- TextEncoder/TextDecoder are one byte per character (not UTF-8 correct)
- URL stores the raw string, no parsing
"""

from urllib.parse import urlsplit


GLOBAL_ALIASES = """
var globalThis = this;
var global = this;
var self = this;
var window = this;
"""

CONSOLE = """
var console = {
    log: function() {},
    warn: function() {},
    error: function() {},
    info: function() {},
    debug: function() {}
};
"""

PROCESS = """
var process = {
    env: { NODE_ENV: 'production' },
    version: 'v18.0.0',
    nextTick: function(fn) { fn(); }
};
"""

TIMERS = """
var setTimeout = function(fn, ms) { fn(); return 0; };
var clearTimeout = function(id) {};
var setInterval = function(fn, ms) { return 0; };
var clearInterval = function(id) {};
"""

MESSAGE_CHANNEL = """
var MessageChannel = function() {
    var channel = this;
    this.port1 = {
        onmessage: null,
        postMessage: function(msg) {
            if (channel.port2.onmessage) {
                channel.port2.onmessage({ data: msg });
            }
        }
    };
    this.port2 = {
        onmessage: null,
        postMessage: function(msg) {
            if (channel.port1.onmessage) {
                channel.port1.onmessage({ data: msg });
            }
        }
    };
};
"""

TEXT_CODING = """
var TextEncoder = function() {};
TextEncoder.prototype.encode = function(str) {
    var arr = [];
    for (var i = 0; i < str.length; i++) {
        arr.push(str.charCodeAt(i));
    }
    return new Uint8Array(arr);
};

var TextDecoder = function() {};
TextDecoder.prototype.decode = function(arr) {
    return String.fromCharCode.apply(null, arr);
};
"""

URL_STANDIN = """
if (typeof URL === 'undefined') {
    var URL = function(url, base) {
        this.href = url;
        this.pathname = url;
        this.origin = '';
    };
}
"""

LOCATION_TEMPLATE = """
var location = {{
    href: '{origin}/',
    origin: '{origin}',
    protocol: '{protocol}',
    host: '{host}',
    hostname: '{hostname}',
    port: '{port}',
    pathname: '/',
    search: '',
    hash: ''
}};
"""


def location_source(origin: str) -> str:
    """Build the `location` object for the server's own origin"""
    parts = urlsplit(origin)
    scheme = parts.scheme or 'http'
    hostname = parts.hostname or 'localhost'
    port = str(parts.port) if parts.port else ''
    host = f'{hostname}:{port}' if port else hostname

    return LOCATION_TEMPLATE.format(
        origin=_js_quote(f'{scheme}://{host}'),
        protocol=_js_quote(f'{scheme}:'),
        host=_js_quote(host),
        hostname=_js_quote(hostname),
        port=_js_quote(port),
    )


def build_polyfills(origin: str = 'http://localhost:8080') -> str:
    """
    Build the polyfill source text.

    Args:
        origin: Origin reported by the `location` object

    Returns:
        JavaScript source, evaluated once per render context before the bundle
    """
    return ''.join([
        GLOBAL_ALIASES,
        CONSOLE,
        PROCESS,
        TIMERS,
        MESSAGE_CHANNEL,
        TEXT_CODING,
        URL_STANDIN,
        location_source(origin),
    ])


def _js_quote(value: str) -> str:
    return value.replace('\\', '\\\\').replace("'", "\\'")


POLYFILL_SOURCE = build_polyfills()
