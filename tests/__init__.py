"""
Test suite for ssr-pages.

Test structure:
- unit/ - Unit tests (engine, errors, polyfills, assembler, config, log)
- integration/ - Route handlers, plus smoke tests against a running server
- fixtures/ - Sample bundles and build manifests

Run tests:
    pytest                    # All tests
    pytest tests/unit         # Unit tests only
    pytest tests/integration  # Integration tests only
    pytest -k "isolation"     # Tests matching name

Engine tests execute real bundles, so mini-racer must be installed.
"""
