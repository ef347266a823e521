# tests/test_celery_job.py
import pytest

from multitarget.adapters.system import celery_app as worker
from multitarget.domain.errors import ExpansionLimitError
from multitarget.domain.expand_service import ExpandService
from tests.fakes import FakeTargetParser, InMemoryResultStore


@pytest.fixture
def store(monkeypatch):
    s = InMemoryResultStore()
    monkeypatch.setattr(worker, "_store", s)
    return s


def test_job_stores_result(store, monkeypatch):
    monkeypatch.setattr(worker, "_service", None)
    assert worker.expand_job("j1", {"expressions": ["10.0.0.1-3", "bad"]}) == "ok"
    entry = store.get("j1")
    assert entry["status"] == "done"
    assert entry["result"]["total"] == 3
    assert entry["result"]["errors"][0]["expression"] == "bad"


def test_job_stores_error_and_reraises(store, monkeypatch):
    svc = ExpandService(FakeTargetParser({"big": ["a", "b", "c"]}), max_targets=2, max_expressions=5)
    monkeypatch.setattr(worker, "_service", svc)
    with pytest.raises(ExpansionLimitError):
        worker.expand_job("j2", {"expressions": ["big"]})
    entry = store.get("j2")
    assert entry["status"] == "error"
    assert "big" in entry["error"]
