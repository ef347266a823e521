# /multitarget/adapters/system/redis_result_store.py
from __future__ import annotations
import json
import logging
from typing import Any

import redis

LOG = logging.getLogger("adapter.result_store.redis")

class RedisResultStore:
    """One hash per expansion job: status, plus result JSON or error text."""

    def __init__(self, redis_url: str, prefix: str = "expand", ttl_seconds: int | None = None) -> None:
        self._r = redis.Redis.from_url(redis_url, decode_responses=True)
        self._prefix = prefix
        self._ttl = ttl_seconds

    def _key(self, job_id: str) -> str:
        return f"{self._prefix}:{job_id}"

    def _write(self, job_id: str, mapping: dict[str, str]) -> None:
        key = self._key(job_id)
        self._r.hset(key, mapping=mapping)
        if self._ttl:
            self._r.expire(key, self._ttl)

    def set_pending(self, job_id: str) -> None:
        self._write(job_id, {"status": "pending"})
        LOG.info("store.set_pending", extra={"extra": {"job_id": job_id}})

    def set_error(self, job_id: str, error: str) -> None:
        self._write(job_id, {"status": "error", "error": error})
        LOG.warning("store.set_error", extra={"extra": {"job_id": job_id, "error": error}})

    def set_result(self, job_id: str, result: dict) -> None:
        self._write(job_id, {"status": "done", "result": json.dumps(result)})
        LOG.info("store.set_result", extra={"extra": {"job_id": job_id, "total": result.get("total")}})

    def get(self, job_id: str) -> dict | None:
        data = self._r.hgetall(self._key(job_id))
        if not data:
            return None
        out: dict[str, Any] = {"status": data.get("status")}
        if "error" in data:
            out["error"] = data["error"]
        if data.get("result") is not None:
            try:
                out["result"] = json.loads(data["result"])
            except json.JSONDecodeError:
                LOG.warning("store.bad_result", extra={"extra": {"job_id": job_id}})
                out["result"] = None
        return out
