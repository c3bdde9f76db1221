"""LLM integration layer.

This package is intentionally small:
- No prompt/output logging.
- Configuration is resolved once at startup and injected per request.
- Each call is a single stateless upstream request.
"""
