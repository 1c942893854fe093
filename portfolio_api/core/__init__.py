"""
Core utilities shared across the portfolio API.

This package hosts configuration helpers (env vars, paths), logging setup and
the rate limit helper. Routers and services depend on these primitives instead
of reading the environment or tracking clients themselves.
"""
