# /multitarget/ports/target_parser.py
from __future__ import annotations

from typing import Protocol


class TargetParserPort(Protocol):
    def parse(self, expression: str, max_targets: int | None = None) -> list[str]:
        """Expand one target expression (list/range/CIDR) into ordered targets."""
