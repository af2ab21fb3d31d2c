"""
Unit tests for the polyfill environment
"""


class TestPolyfillSource:
    """Test the generated source text"""

    def test_defines_host_globals(self):
        """Should define every global the server renderer touches"""
        from ssr_pages.polyfills import POLYFILL_SOURCE

        for name in [
            'var globalThis', 'var global', 'var self', 'var window',
            'var console', 'var process', 'var setTimeout', 'var clearTimeout',
            'var setInterval', 'var clearInterval', 'var MessageChannel',
            'var TextEncoder', 'var TextDecoder', 'var URL', 'var location',
        ]:
            assert name in POLYFILL_SOURCE, name

    def test_source_is_constant(self):
        """Should build the same text for the same origin"""
        from ssr_pages.polyfills import POLYFILL_SOURCE, build_polyfills

        assert build_polyfills() == POLYFILL_SOURCE
        assert build_polyfills('http://localhost:8080') == POLYFILL_SOURCE

    def test_location_from_origin(self):
        """Should describe the configured origin"""
        from ssr_pages.polyfills import location_source

        source = location_source('https://example.com:8443')

        assert "href: 'https://example.com:8443/'" in source
        assert "origin: 'https://example.com:8443'" in source
        assert "protocol: 'https:'" in source
        assert "host: 'example.com:8443'" in source
        assert "hostname: 'example.com'" in source
        assert "port: '8443'" in source
        assert "pathname: '/'" in source

    def test_location_without_port(self):
        """Should leave port empty when the origin has none"""
        from ssr_pages.polyfills import location_source

        source = location_source('http://example.com')

        assert "host: 'example.com'" in source
        assert "port: ''" in source


class TestPolyfillBehavior:
    """Test the polyfills inside the engine"""

    def run(self, expression: str, origin: str = 'http://localhost:8080') -> str:
        from ssr_pages.engine import ScriptEngine
        from ssr_pages.polyfills import build_polyfills

        engine = ScriptEngine(polyfills=build_polyfills(origin))
        result = engine.render(f'function render() {{ return {expression}; }}')
        assert result.ok, result.error
        return result.html

    def test_global_aliases_share_root(self):
        """Should alias globalThis/global/self/window to one object"""
        assert self.run('[globalThis === this, global === window, self === window].join()') == 'true,true,true'

    def test_timers_run_immediately_in_order(self):
        """Should invoke timer callbacks synchronously"""
        assert self.run(
            '(function() { var out = []; setTimeout(function() { out.push(1); }, 50);'
            ' out.push(2); setTimeout(function() { out.push(3); }); return out.join(); })()'
        ) == '1,2,3'

    def test_set_interval_never_fires(self):
        """Should register intervals without invoking them"""
        assert self.run(
            '(function() { var n = 0; var id = setInterval(function() { n++; }, 1); clearInterval(id); return n + ":" + id; })()'
        ) == '0:0'

    def test_message_channel_delivers_to_other_port(self):
        """Should hand port1's message to port2's handler"""
        assert self.run(
            '(function() { var got = ""; var ch = new MessageChannel();'
            ' ch.port2.onmessage = function(e) { got = e.data; };'
            ' ch.port1.postMessage("hello"); return got; })()'
        ) == 'hello'

    def test_message_channel_without_handler(self):
        """Should drop messages when the other end has no handler"""
        assert self.run(
            '(function() { var ch = new MessageChannel(); ch.port1.postMessage("x"); return "ok"; })()'
        ) == 'ok'

    def test_text_encoding_single_byte(self):
        """Should encode one byte per character"""
        assert self.run(
            'Array.prototype.join.call(new TextEncoder().encode("Hi!"))'
        ) == '72,105,33'

    def test_url_stores_raw_string(self):
        """Should keep the raw URL without parsing"""
        assert self.run('new URL("/about?x=1").pathname') == '/about?x=1'

    def test_process_info(self):
        """Should report production env and a fixed version"""
        assert self.run('process.env.NODE_ENV + " " + process.version') == 'production v18.0.0'

    def test_console_is_silent(self):
        """Should accept console calls"""
        assert self.run('(console.log("a"), console.error("b"), "quiet")') == 'quiet'

    def test_location_uses_origin(self):
        """Should expose the configured origin"""
        assert self.run('location.host + location.pathname', origin='http://localhost:3000') == 'localhost:3000/'
