"""
FastAPI routers grouped by domain.

Each module exposes an APIRouter that is included by the application factory
(app.py), keeping endpoint definitions close to their use cases.
"""
