# /multitarget/adapters/system/celery_app.py
from __future__ import annotations
import logging
from typing import Any

from celery import Celery
from redis.exceptions import ConnectionError as RedisConnectionError

from multitarget.config import settings
from multitarget.adapters.system.logging_cfg import configure_logger
from multitarget.adapters.system.redis_result_store import RedisResultStore
from multitarget.adapters.system.target_parser_impl import TargetExpressionParser
from multitarget.domain.expand_service import ExpandRequestDTO, ExpandService

LOG = logging.getLogger("adapter.celery")
configure_logger(settings.LOG_LEVEL)

celery_app = Celery("multitarget", broker=settings.REDIS_URL, backend=settings.REDIS_URL)
celery_app.conf.update(
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    task_time_limit=300,
)

# Redis clients connect lazily, so this is fine at import-time:
_store = RedisResultStore(settings.REDIS_URL, ttl_seconds=settings.RESULT_TTL_SECONDS)

_service: ExpandService | None = None

def _get_service() -> ExpandService:
    """Build the job-sized ExpandService the first time a task runs."""
    global _service
    if _service is None:
        _service = ExpandService(
            TargetExpressionParser(),
            max_targets=settings.MAX_JOB_TARGETS,
            max_expressions=settings.MAX_EXPRESSIONS,
        )
    return _service

@celery_app.task(
    name="expand_job",
    bind=True,
    autoretry_for=(RedisConnectionError,),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def expand_job(self, job_id: str, payload: dict[str, Any]) -> str:
    """Expand the payload's expressions and persist the result or error."""
    try:
        LOG.info("expand.job.accepted", extra={"extra": {"job_id": job_id}})
        svc = _get_service()
        resp = svc.expand(ExpandRequestDTO(expressions=list(payload["expressions"])))
        _store.set_result(job_id, resp.as_dict())
        LOG.info("expand.job.done", extra={"extra": {"job_id": job_id, "total": resp.total}})
        return "ok"

    except Exception as e:
        _store.set_error(job_id, str(e))
        LOG.exception("expand.job.error", extra={"extra": {"job_id": job_id}})
        raise
