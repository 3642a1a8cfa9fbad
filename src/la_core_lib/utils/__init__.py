"""Utility Functions"""

from la_core_lib.utils.resilience import (
    call_with_retry,
    create_custom_retry,
)

__all__ = [
    "call_with_retry",
    "create_custom_retry",
]
