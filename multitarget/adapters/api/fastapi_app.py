# /multitarget/adapters/api/fastapi_app.py
from __future__ import annotations
import logging
import uuid

from fastapi import FastAPI, Header, HTTPException
from pydantic import BaseModel

from multitarget.config import settings
from multitarget.adapters.system.logging_cfg import configure_logger
from multitarget.adapters.system.redis_result_store import RedisResultStore
from multitarget.adapters.system.celery_app import celery_app
from multitarget.adapters.system.target_parser_impl import TargetExpressionParser
from multitarget.domain.errors import ExpansionLimitError
from multitarget.domain.expand_service import ExpandRequestDTO, ExpandService

LOG = logging.getLogger("adapter.api")
app = FastAPI(title="multitarget")
configure_logger(settings.LOG_LEVEL)

_store = RedisResultStore(settings.REDIS_URL, ttl_seconds=settings.RESULT_TTL_SECONDS)
_service = ExpandService(
    TargetExpressionParser(),
    max_targets=settings.MAX_TARGETS,
    max_expressions=settings.MAX_EXPRESSIONS,
)

class ExpandRequestModel(BaseModel):
    expressions: list[str]

def _check_api_key(x_api_key: str | None) -> None:
    if settings.API_KEY and x_api_key != settings.API_KEY:
        raise HTTPException(status_code=401, detail="invalid api key")

def _check_payload(payload: ExpandRequestModel) -> None:
    if not payload.expressions:
        raise HTTPException(status_code=400, detail="expressions required")
    if len(payload.expressions) > settings.MAX_EXPRESSIONS:
        raise HTTPException(status_code=400, detail="request too large (expressions cap)")

@app.get("/health")
def health() -> dict:
    return {"status": "ok"}

@app.post("/expand")
def expand(payload: ExpandRequestModel, x_api_key: str | None = Header(default=None)) -> dict:
    _check_api_key(x_api_key)
    _check_payload(payload)
    try:
        resp = _service.expand(ExpandRequestDTO(expressions=payload.expressions))
    except ExpansionLimitError as e:
        raise HTTPException(status_code=413, detail=str(e)) from e
    return resp.as_dict()

@app.post("/jobs")
async def job_start(payload: ExpandRequestModel, x_api_key: str | None = Header(default=None)) -> dict:
    _check_api_key(x_api_key)
    _check_payload(payload)

    job_id = str(uuid.uuid4())
    _store.set_pending(job_id)

    task = celery_app.send_task("expand_job", args=[job_id, payload.model_dump()], kwargs=None)
    LOG.info("expand.enqueued", extra={"extra": {"job_id": job_id, "task_id": task.id}})
    return {"job_id": job_id, "status": "pending", "task_id": task.id}

@app.get("/jobs/{job_id}")
async def job_result(job_id: str, x_api_key: str | None = Header(default=None)) -> dict:
    _check_api_key(x_api_key)
    entry = _store.get(job_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="job_id not found")
    return entry
