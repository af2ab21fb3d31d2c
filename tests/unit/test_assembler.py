"""
Unit tests for the SSR response assembler

Stylesheet discovery, the page shell and error pages.
"""

import html
import re
from pathlib import Path

import pytest


BUNDLES = Path(__file__).parent.parent / 'fixtures' / 'bundles'


def style_block(body: str) -> str:
    match = re.search(r'<style>(.*?)</style>', body, re.S)
    assert match, 'no <style> block'
    return match.group(1)


def root_element(body: str) -> str:
    match = re.search(r'<div id="root">(.*?)</div>\s*<script', body, re.S)
    assert match, 'no #root element'
    return match.group(1)


class FakeConfig:
    """Minimal stand-in for ServerConfig"""

    def __init__(self, root: Path, bundle: Path):
        self.bundle_path = bundle
        self.assets_dir = root / 'dist' / 'client' / 'assets'
        self.stylesheet_fallback = self.assets_dir / 'index.css'
        self.client_script = '/assets/client.js'
        self.app_title = 'Test App'


class TestFindStylesheet:
    """Test stylesheet discovery"""

    def test_single_css_file(self, tmp_path):
        """Should return the text of the only stylesheet"""
        from ssr_pages.assembler import find_stylesheet

        (tmp_path / 'index-a1b2.css').write_text('body{color:red}')
        (tmp_path / 'client.js').write_text('void 0;')

        assert find_stylesheet(tmp_path) == 'body{color:red}'

    def test_empty_directory(self, tmp_path):
        """Should return None when nothing matches"""
        from ssr_pages.assembler import find_stylesheet

        assert find_stylesheet(tmp_path) is None

    def test_missing_directory_uses_fallback(self, tmp_path):
        """Should read the fallback path when the directory doesn't exist"""
        from ssr_pages.assembler import find_stylesheet

        fallback = tmp_path / 'index.css'
        fallback.write_text('h1{margin:0}')

        assert find_stylesheet(tmp_path / 'nope', fallback) == 'h1{margin:0}'

    def test_missing_fallback(self, tmp_path):
        """Should return None when the fallback is missing too"""
        from ssr_pages.assembler import find_stylesheet

        assert find_stylesheet(tmp_path / 'nope', tmp_path / 'index.css') is None

    def test_directories_with_css_suffix_ignored(self, tmp_path):
        """Should only consider regular files"""
        from ssr_pages.assembler import find_stylesheet

        (tmp_path / 'themes.css').mkdir()

        assert find_stylesheet(tmp_path) is None

    def test_extension_case_insensitive(self, tmp_path):
        """Should match .CSS as well as .css"""
        from ssr_pages.assembler import find_stylesheet

        (tmp_path / 'LEGACY.CSS').write_text('p{}')

        assert find_stylesheet(tmp_path) == 'p{}'

    def test_custom_extensions(self, tmp_path):
        """Should accept other recognized extensions"""
        from ssr_pages.assembler import find_stylesheet

        (tmp_path / 'theme.pcss').write_text('a{}')

        assert find_stylesheet(tmp_path) is None
        assert find_stylesheet(tmp_path, extensions=('.pcss',)) == 'a{}'


class TestAssemble:
    """Test building documents from render results"""

    def test_success_embeds_markup_and_stylesheet(self):
        """Should embed markup and stylesheet verbatim with status 200"""
        from ssr_pages.assembler import assemble
        from ssr_pages.engine import RenderResult

        page = assemble(RenderResult(html='<p>hi</p>'), 'body{color:red}')

        assert page.status == 200
        assert page.content_type.startswith('text/html')
        assert root_element(page.body) == '<p>hi</p>'
        assert style_block(page.body) == 'body{color:red}'
        assert '<script type="module" src="/assets/client.js"></script>' in page.body
        assert page.body.startswith('<!DOCTYPE html>')

    def test_success_without_stylesheet(self):
        """Should leave the style block empty"""
        from ssr_pages.assembler import assemble
        from ssr_pages.engine import RenderResult

        page = assemble(RenderResult(html='<p>hi</p>'), None)

        assert page.status == 200
        assert style_block(page.body) == ''

    def test_custom_script_and_title(self):
        """Should reference the given client script and title"""
        from ssr_pages.assembler import assemble
        from ssr_pages.engine import RenderResult

        page = assemble(RenderResult(html=''), None, '/assets/main-3f2a.js', 'Docs & Guides')

        assert 'src="/assets/main-3f2a.js"' in page.body
        assert '<title>Docs &amp; Guides</title>' in page.body

    def test_failure_page(self):
        """Should return a labeled 500 page with the error message"""
        from ssr_pages.assembler import assemble
        from ssr_pages.engine import RenderResult
        from ssr_pages.errors import EntryPointRuntimeError

        page = assemble(RenderResult(error=EntryPointRuntimeError('Error: render exploded')))

        assert page.status == 500
        assert '<h1>SSR Error</h1>' in page.body
        assert 'Failed to render: Render error: Error: render exploded' in page.body
        assert page.body.rstrip().endswith('</html>')

    def test_failure_message_escaped(self):
        """Should escape markup inside engine messages"""
        from ssr_pages.assembler import assemble
        from ssr_pages.engine import RenderResult
        from ssr_pages.errors import BundleCompileError

        page = assemble(RenderResult(error=BundleCompileError('Unexpected token <div>')))

        assert '&lt;div&gt;' in page.body
        assert '<div>' not in page.body

    def test_missing_bundle_page_has_build_hint(self):
        """Should tell the developer how to build the bundle"""
        from ssr_pages.assembler import BUILD_HINT, assemble
        from ssr_pages.engine import RenderResult
        from ssr_pages.errors import BundleNotFoundError

        page = assemble(RenderResult(error=BundleNotFoundError('SSR bundle not found: dist/ssr/server.js')))

        assert page.status == 500
        assert html.escape(BUILD_HINT) in page.body
        assert 'cd frontend &amp;&amp; bun run build' in page.body
        assert 'dist/ssr/server.js' in page.body


class TestRenderPage:
    """Test the whole SSR pipeline"""

    @pytest.fixture
    def engine(self):
        from ssr_pages.engine import ScriptEngine
        return ScriptEngine()

    def test_scenario_hello_bundle(self, engine, tmp_path):
        """Should render the bundle into #root with status 200"""
        from ssr_pages.assembler import render_page

        bundle = tmp_path / 'server.js'
        bundle.write_text('function render(){return "<p>hi</p>";}')

        page = render_page(engine, FakeConfig(tmp_path, bundle))

        assert page.status == 200
        assert root_element(page.body) == '<p>hi</p>'
        assert '<title>Test App</title>' in page.body

    def test_stylesheet_from_assets_dir(self, engine, tmp_path):
        """Should inline the only stylesheet in the assets directory"""
        from ssr_pages.assembler import render_page

        config = FakeConfig(tmp_path, BUNDLES / 'hello.js')
        config.assets_dir.mkdir(parents=True)
        (config.assets_dir / 'client-9c1b.css').write_text('body{color:red}')

        page = render_page(engine, config)

        assert page.status == 200
        assert style_block(page.body) == 'body{color:red}'

    def test_empty_assets_dir(self, engine, tmp_path):
        """Should still return 200 with an empty style block"""
        from ssr_pages.assembler import render_page

        config = FakeConfig(tmp_path, BUNDLES / 'hello.js')
        config.assets_dir.mkdir(parents=True)

        page = render_page(engine, config)

        assert page.status == 200
        assert style_block(page.body) == ''

    def test_scenario_missing_bundle(self, engine, tmp_path):
        """Should return 500 with a message naming the missing bundle"""
        from ssr_pages.assembler import render_page

        config = FakeConfig(tmp_path, tmp_path / 'dist' / 'ssr' / 'server.js')

        page = render_page(engine, config)

        assert page.status == 500
        assert 'Failed to load SSR bundle' in page.body
        assert 'server.js' in page.body

    def test_malformed_bundle(self, engine, tmp_path):
        """Should return a 500 page, never raise"""
        from ssr_pages.assembler import render_page

        page = render_page(engine, FakeConfig(tmp_path, BUNDLES / 'syntax_error.js'))

        assert page.status == 500
        assert 'Compile error' in page.body
