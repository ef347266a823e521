# /multitarget/domain/errors.py
from __future__ import annotations


class ExpressionError(ValueError):
    """Base class for target expressions that cannot be expanded."""

    def __init__(self, expression: str, message: str) -> None:
        super().__init__(message)
        self.expression = expression


class DescendingRangeError(ExpressionError):
    def __init__(self, expression: str, start: int, stop: int) -> None:
        super().__init__(
            expression, f"invalid ip range {expression}, {start} is greater than {stop}"
        )
        self.start = start
        self.stop = stop


class UnrecognizedExpressionError(ExpressionError):
    def __init__(self, expression: str) -> None:
        super().__init__(
            expression,
            f"could not parse '{expression}' as a comma separated list of targets, "
            "an ipv4 range or as CIDR",
        )


class ExpansionLimitError(ExpressionError):
    def __init__(self, expression: str, count: int, limit: int) -> None:
        super().__init__(
            expression, f"'{expression}' expands to {count} targets, limit is {limit}"
        )
        self.count = count
        self.limit = limit
