"""
Domain models and value objects.

Contains the fundamental entities threaded through a chain: Value, Stack,
OperationInvocation.
"""

from src.core.domain.invocation import OperationInvocation
from src.core.domain.stack import Stack, StackUnderflow
from src.core.domain.value import (
    CLOSE_DELIMITER,
    OPEN_DELIMITER,
    PLACEHOLDER,
    Token,
    Value,
)

__all__ = [
    # Value module
    "CLOSE_DELIMITER",
    "OPEN_DELIMITER",
    "PLACEHOLDER",
    "Token",
    "Value",
    # Stack model
    "Stack",
    "StackUnderflow",
    # Invocation model
    "OperationInvocation",
]
