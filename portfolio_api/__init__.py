"""Portfolio collections API (projects, testimonies, gallery).

Run with ``uvicorn portfolio_api.app:create_app --factory`` or ``python scripts/serve.py``.
"""
