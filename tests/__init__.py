"""
eventgraph Test Suite.

This package contains:
- unit/: Unit tests (in-memory content, no I/O)
- integration/: Integration tests (directory content, HTTP API, CLI)
"""
