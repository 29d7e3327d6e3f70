"""Error taxonomy for batch CSR generation.

Every error is terminal for the batch. ``str(err)`` is the message a host
shows to the operator; ``generate_csr_batch`` turns it into a failed
``GenerateResult``.
"""
from __future__ import annotations


class CSRBatchError(Exception):
    """Base class for every failure surfaced by the batch core."""


class InvalidRequest(CSRBatchError, ValueError):
    """Raised by host-side request validation (blank fields, inverted validity window)."""


class RangeError(CSRBatchError, ValueError):
    """Common-name range expression could not be turned into names."""


class MalformedRangeExpression(RangeError):
    def __init__(self, expression: str):
        self.expression = expression
        super().__init__(
            f"cannot parse common name range {expression!r}; expected a form like YDL0001-YDL0010"
        )


class NumericOverflowInRange(RangeError):
    def __init__(self, expression: str, value: str):
        self.expression = expression
        self.value = value
        super().__init__(f"number {value} in common name range {expression!r} is out of range")


class EmptyExpandedRange(RangeError):
    def __init__(self, expression: str):
        self.expression = expression
        super().__init__(f"common name range {expression!r} produced no names")


class UnsupportedKeyType(CSRBatchError, ValueError):
    def __init__(self, token: str):
        self.token = token
        super().__init__(f"unsupported key type: {token}")


class CryptographicFailure(CSRBatchError):
    """Key generation, CSR signing or PEM encoding failed for one identity."""

    def __init__(self, common_name: str, reason: str):
        self.common_name = common_name
        super().__init__(f"failed to generate CSR for {common_name}: {reason}")


class FileIoFailure(CSRBatchError):
    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"I/O error on {path}: {reason}")


__all__ = [
    "CSRBatchError",
    "InvalidRequest",
    "RangeError",
    "MalformedRangeExpression",
    "NumericOverflowInRange",
    "EmptyExpandedRange",
    "UnsupportedKeyType",
    "CryptographicFailure",
    "FileIoFailure",
]
