"""Unit tests for ssr-pages.

Isolated tests for individual components; filesystem access goes through
tmp_path.
"""
