"""
Functional Module

Result monad used for optional lookups and degraded-but-continuing code paths.
"""

from .result_monad import (
    Result,
    Success,
    Failure,
    from_callable
)

__all__ = [
    "Result",
    "Success",
    "Failure",
    "from_callable"
]
