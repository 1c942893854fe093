"""
High-level use cases for the portfolio API.

Routers (FastAPI endpoints) call these services instead of touching the
collection stores or the JSON files directly.
"""
