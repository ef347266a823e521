# /multitarget/domain/expand_service.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from multitarget.domain.errors import ExpansionLimitError, ExpressionError
from multitarget.ports.target_parser import TargetParserPort

LOG = logging.getLogger("expand_service")

# ==== DTOs ====


@dataclass(slots=True)
class ExpandRequestDTO:
    expressions: list[str]


@dataclass(slots=True)
class ExpandResultDTO:
    expression: str
    targets: list[str]


@dataclass(slots=True)
class ExpandResponseDTO:
    results: list[ExpandResultDTO] = field(default_factory=list)
    errors: list[dict] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(len(r.targets) for r in self.results)

    def as_dict(self) -> dict[str, Any]:
        return {
            "results": [{"expression": r.expression, "targets": r.targets} for r in self.results],
            "errors": self.errors,
            "total": self.total,
        }


# ==== Service ====


class ExpandService:
    """Expands a batch of target expressions under one shared target budget."""

    def __init__(
        self,
        parser: TargetParserPort,
        *,
        max_targets: int,
        max_expressions: int,
    ) -> None:
        self.parser = parser
        self.max_targets = max_targets
        self.max_expressions = max_expressions

    def _validate_request_size(self, count: int) -> None:
        if count > self.max_expressions:
            raise ValueError(f"request too large: {count} > {self.max_expressions} expressions")

    def expand(self, req: ExpandRequestDTO) -> ExpandResponseDTO:
        self._validate_request_size(len(req.expressions))

        resp = ExpandResponseDTO()
        budget = self.max_targets
        for expression in req.expressions:
            try:
                targets = self.parser.parse(expression, max_targets=budget)
            except ExpansionLimitError:
                LOG.warning(
                    "expand.budget_exceeded",
                    extra={"extra": {"expression": expression, "max": self.max_targets}},
                )
                raise
            except ExpressionError as e:
                resp.errors.append(
                    {"expression": expression, "error": type(e).__name__, "detail": str(e)}
                )
                continue

            budget -= len(targets)
            resp.results.append(ExpandResultDTO(expression=expression, targets=targets))

        LOG.info(
            "expand.done",
            extra={
                "extra": {
                    "expressions": len(req.expressions),
                    "targets": resp.total,
                    "errors": len(resp.errors),
                }
            },
        )
        return resp
