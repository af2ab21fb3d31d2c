"""
Test fixtures for ssr-pages

- bundles/ - Small compiled-style bundles (working, malformed, throwing)
- manifest/ - Vite manifest and route titles
"""
