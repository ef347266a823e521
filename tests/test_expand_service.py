# /tests/test_expand_service.py
from __future__ import annotations
import pytest
from multitarget.adapters.system.target_parser_impl import TargetExpressionParser
from multitarget.domain.errors import ExpansionLimitError
from multitarget.domain.expand_service import ExpandRequestDTO, ExpandService
from tests.fakes import FakeTargetParser

def test_service_happy_path() -> None:
    parser = FakeTargetParser({"a": ["10.0.0.1", "10.0.0.2"], "b": ["10.0.0.3"]})
    svc = ExpandService(parser, max_targets=10, max_expressions=5)
    resp = svc.expand(ExpandRequestDTO(expressions=["a", "b"]))
    assert [r.expression for r in resp.results] == ["a", "b"]
    assert resp.total == 3
    assert resp.errors == []

def test_budget_shrinks_per_expression() -> None:
    parser = FakeTargetParser({"a": ["x", "y"], "b": ["z"]})
    svc = ExpandService(parser, max_targets=10, max_expressions=5)
    svc.expand(ExpandRequestDTO(expressions=["a", "b"]))
    assert parser.calls == [("a", 10), ("b", 8)]

def test_bad_expression_is_collected() -> None:
    svc = ExpandService(TargetExpressionParser(), max_targets=100, max_expressions=5)
    resp = svc.expand(ExpandRequestDTO(expressions=["10.0.0.5-1", "junk", "10.0.0.0/31"]))
    assert [r.targets for r in resp.results] == [["10.0.0.0", "10.0.0.1"]]
    assert [e["error"] for e in resp.errors] == ["DescendingRangeError", "UnrecognizedExpressionError"]
    assert resp.errors[1]["expression"] == "junk"

def test_budget_exceeded_raises() -> None:
    svc = ExpandService(TargetExpressionParser(), max_targets=5, max_expressions=5)
    with pytest.raises(ExpansionLimitError):
        svc.expand(ExpandRequestDTO(expressions=["10.0.0.1-4", "10.0.1.0/30"]))

def test_expression_cap() -> None:
    svc = ExpandService(TargetExpressionParser(), max_targets=5, max_expressions=1)
    with pytest.raises(ValueError):
        svc.expand(ExpandRequestDTO(expressions=["a,b", "c,d"]))

def test_as_dict() -> None:
    svc = ExpandService(TargetExpressionParser(), max_targets=10, max_expressions=5)
    out = svc.expand(ExpandRequestDTO(expressions=["10.0.0.1-2:80", "?"])).as_dict()
    assert out["results"] == [{"expression": "10.0.0.1-2:80", "targets": ["10.0.0.1:80", "10.0.0.2:80"]}]
    assert out["total"] == 2
    assert out["errors"][0]["expression"] == "?"
