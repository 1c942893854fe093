from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from portfolio_api.core.rate_limiter import api_rate_limit
from portfolio_api.domain.records import GALLERY, PROJECTS, TESTIMONIES, CollectionSchema, ValidationError
from portfolio_api.repositories.json_storage import PersistenceError
from portfolio_api.services.collection_service import CollectionService

logger = logging.getLogger(__name__)

SAVE_FAILED_MESSAGE = "Failed to save data"
_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

router = APIRouter(prefix="/api", tags=["collections"], dependencies=[Depends(api_rate_limit)])


def _get_collection_service(request: Request) -> CollectionService:
    svc = getattr(getattr(request.app, "state", None), "collection_service", None)
    if not svc:
        raise RuntimeError("CollectionService nao configurado")
    return svc


async def _read_payload(request: Request) -> dict:
    """JSON object or form body as a plain dict; anything else counts as empty."""
    content_type = (request.headers.get("content-type") or "").lower()
    if content_type.startswith(_FORM_TYPES):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}
    try:
        data = await request.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _result(success: bool, message: str, status_code: int = 200) -> JSONResponse:
    return JSONResponse({"success": success, "message": message}, status_code=status_code)


async def _create(request: Request, schema: CollectionSchema) -> JSONResponse:
    svc = _get_collection_service(request)
    payload = await _read_payload(request)
    try:
        message = await run_in_threadpool(svc.append, schema.name, payload)
    except ValidationError as exc:
        logger.debug("Rejected %s record, invalid fields: %s", schema.name, ", ".join(exc.fields))
        return _result(False, str(exc), status_code=400)
    except PersistenceError:
        logger.exception("Could not persist %s record", schema.name)
        return _result(False, SAVE_FAILED_MESSAGE, status_code=500)
    return _result(True, message)


@router.get("/projects")
def list_projects(request: Request):
    return _get_collection_service(request).list(PROJECTS.name)


@router.post("/projects")
async def create_project(request: Request):
    return await _create(request, PROJECTS)


@router.get("/testimonies")
def list_testimonies(request: Request):
    return _get_collection_service(request).list(TESTIMONIES.name)


@router.post("/testimonies")
async def create_testimony(request: Request):
    return await _create(request, TESTIMONIES)


@router.get("/gallery")
def list_gallery(request: Request):
    return _get_collection_service(request).list(GALLERY.name)


@router.post("/gallery")
async def create_gallery_item(request: Request):
    return await _create(request, GALLERY)


# Registered last: unknown /api/* paths still pass through the rate limit and
# never fall through to the static files mount.
@router.api_route("/{rest:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"], include_in_schema=False)
def api_not_found(rest: str):
    return _result(False, "Not found", status_code=404)
