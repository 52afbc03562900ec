"""Chain — стековая машина для вычисления цепочек операций в порядке записи.

- protocol: Push / Pop(1/2/3), заполнение placeholder
- operations: дескрипторы операций (direct + chained), реестр
- terminals: Unwrap / Print / Tokenize
- driver: Chain Driver, Done Handler
- parser: текстовая форма вызовов
"""

from .driver import (
    ChainConfig,
    ChainDriver,
    ChainResult,
    ExpansionLimitExceeded,
    done,
    evaluate,
    run_program,
)
from .operations import (
    Operation,
    OperationRegistry,
    UnknownOperation,
    build_default_registry,
)
from .parser import ChainSyntaxError, InvocationParser, parse_invocation, parse_program
from .protocol import MAX_POP_ARITY, ChainState, Link, MalformedChain

__all__ = [
    "ChainConfig",
    "ChainDriver",
    "ChainResult",
    "ChainState",
    "ChainSyntaxError",
    "ExpansionLimitExceeded",
    "InvocationParser",
    "Link",
    "MAX_POP_ARITY",
    "MalformedChain",
    "Operation",
    "OperationRegistry",
    "UnknownOperation",
    "build_default_registry",
    "done",
    "evaluate",
    "parse_invocation",
    "parse_program",
    "run_program",
]
