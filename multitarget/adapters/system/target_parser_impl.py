# /multitarget/adapters/system/target_parser_impl.py
from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from ipaddress import ip_network
from typing import Literal

from multitarget.domain.errors import (
    DescendingRangeError,
    ExpansionLimitError,
    UnrecognizedExpressionError,
)

LOG = logging.getLogger("adapter.target_parser")

# 192.168.1.1-10 or 192.168.1.1-10:port
IPV4_RANGE_RE = re.compile(r"(\d+)\.(\d+)\.(\d+)\.(\d+)-(\d+)(?::(\d+))?", re.ASCII)
MAX_OCTET = 255


@dataclass(frozen=True, slots=True)
class Expansion:
    """
    Result of a matched expression. Iterating generates the targets afresh each
    time, so a large CIDR block is never held in memory unless the caller asks.
    """

    mode: Literal["comma", "range", "cidr"]
    count: int
    generate: Callable[[], Iterator[str]] = field(repr=False, compare=False)

    def __iter__(self) -> Iterator[str]:
        return self.generate()


Matcher = Callable[[str], "Expansion | None"]


def match_comma_list(expression: str) -> Expansion | None:
    if "," not in expression:
        return None
    pieces = [p.strip() for p in expression.split(",")]
    targets = tuple(p for p in pieces if p)
    return Expansion("comma", len(targets), lambda: iter(targets))


def match_ipv4_range(expression: str) -> Expansion | None:
    m = IPV4_RANGE_RE.fullmatch(expression)
    if m is None:
        return None

    a, b, c, start, stop = (int(g) for g in m.groups()[:5])
    if any(v > MAX_OCTET for v in (a, b, c, start, stop)):
        LOG.debug("octet out of range", extra={"extra": {"expression": expression}})
        return None
    if stop < start:
        raise DescendingRangeError(expression, start, stop)

    port = m.group(6)
    port_part = f":{port}" if port is not None else ""

    def generate() -> Iterator[str]:
        for d in range(start, stop + 1):
            yield f"{a}.{b}.{c}.{d}{port_part}"

    return Expansion("range", stop - start + 1, generate)


def split_port_suffix(expression: str) -> tuple[str, str]:
    """Split `cidr:[port]` into the CIDR text and the suffix appended to each address."""
    if ":[" in expression and expression.endswith("]"):
        cidr, port = expression.split(":[", 1)
        if ":" in cidr:
            # ipv6 keeps the brackets
            return cidr, f":[{port}"
        return cidr, f":{port.rstrip(']')}"
    return expression, ""


def match_cidr(expression: str) -> Expansion | None:
    cidr_part, port_part = split_port_suffix(expression)
    try:
        net = ip_network(cidr_part, strict=False)
    except ValueError:
        return None

    def generate() -> Iterator[str]:
        for addr in net:
            yield f"{addr}{port_part}"

    return Expansion("cidr", net.num_addresses, generate)


# First match wins, even when a later grammar would also apply.
MATCHERS: tuple[Matcher, ...] = (match_comma_list, match_ipv4_range, match_cidr)


class TargetExpressionParser:
    def __init__(self, max_targets: int | None = None) -> None:
        self.max_targets = max_targets

    def expand(self, expression: str, max_targets: int | None = None) -> Expansion:
        limit = self.max_targets if max_targets is None else max_targets
        for matcher in MATCHERS:
            expansion = matcher(expression)
            if expansion is None:
                continue
            if limit is not None and expansion.count > limit:
                LOG.warning(
                    "expression exceeds max targets",
                    extra={"extra": {"mode": expansion.mode, "count": expansion.count, "max": limit}},
                )
                raise ExpansionLimitError(expression, expansion.count, limit)
            LOG.debug(
                "expression matched",
                extra={"extra": {"mode": expansion.mode, "count": expansion.count}},
            )
            return expansion

        raise UnrecognizedExpressionError(expression)

    def parse(self, expression: str, max_targets: int | None = None) -> list[str]:
        # count may exceed sys.maxsize for wide ipv6 blocks, so no length hint
        return list(self.expand(expression, max_targets).generate())


_default_parser = TargetExpressionParser()


def parse_targets(expression: str) -> list[str]:
    """Expand a comma list, ipv4 shorthand range or CIDR block into targets."""
    return _default_parser.parse(expression)
