"""Operations — дескрипторы операций с двумя формами вызова.

Каждая операция имеет:
- direct(args) -> Value: самостоятельный вызов вне Chain
- chained(op, link, state) -> (next_link, state'): форма-продолжение внутри Chain

Chain Driver всегда выбирает chained-форму. Операция без chained-формы
внутри Chain → MalformedChain.

Правило chained-диспетчеризации (compute_and_push):
1. заполнить placeholder из pending (если перед операцией был Pop)
2. вычислить результат ровно как direct-форма
3. положить результат в начало стека
4. вернуть следующее звено с новым стеком
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from src.chain.protocol import (
    ChainState,
    Link,
    MalformedChain,
    fill_pending,
    parse_pop_arity,
    pop,
    push,
)
from src.core.domain.invocation import OperationInvocation
from src.core.domain.value import Value
from src.core.math.bounded_arithmetic import BoundedArithmeticUnit


DirectFn = Callable[[tuple[str, ...]], Value]
ChainedFn = Callable[["Operation", Link, ChainState], tuple[Optional[Link], ChainState]]


class UnknownOperation(MalformedChain):
    """Имя операции не зарегистрировано."""

    pass


# =============================================================================
# DESCRIPTOR
# =============================================================================


@dataclass(frozen=True)
class Operation:
    """Дескриптор операции.

    - arity: число аргументов (None — любое)
    - chained: None, если операция не имеет chained-формы
    - terminal: операция завершает цепочку (Unwrap/Print/Tokenize)
    """

    name: str
    direct: DirectFn
    chained: Optional[ChainedFn] = None
    arity: Optional[int] = None
    terminal: bool = False

    def check_arity(self, invocation: OperationInvocation) -> None:
        if self.arity is not None and len(invocation.args) != self.arity:
            raise MalformedChain(
                f"{self.name} takes {self.arity} argument(s), got {len(invocation.args)}: "
                f"{invocation.render()}"
            )

    def evaluate_direct(self, invocation: OperationInvocation) -> Value:
        """Direct-форма: вызов вне Chain."""
        self.check_arity(invocation)
        if invocation.placeholder_count():
            raise MalformedChain(
                f"{invocation.render()}: placeholder(s) outside a Chain"
            )
        return self.direct(invocation.args)

    def step(self, link: Link, state: ChainState) -> tuple[Optional[Link], ChainState]:
        """Chained-форма: один шаг цепочки."""
        if self.chained is None:
            raise MalformedChain(f"{self.name} has no chained form and cannot be used inside a Chain")
        return self.chained(self, link, state)

    @classmethod
    def from_function(
        cls, name: str, func: Callable[..., int | str], arity: Optional[int] = None
    ) -> "Operation":
        """
        Chain-aware операция из обычной функции над текстом аргументов.

        Результат функции превращается в Value; chained-форма — compute_and_push.
        """

        def direct(args: tuple[str, ...]) -> Value:
            return Value.of(func(*args))

        return cls(name=name, direct=direct, chained=compute_and_push, arity=arity)


def compute_and_push(
    operation: Operation, link: Link, state: ChainState
) -> tuple[Optional[Link], ChainState]:
    """Стандартная chained-форма: вычислить как direct, push, продолжить."""
    invocation, state = fill_pending(link.invocation, state)
    operation.check_arity(invocation)
    value = operation.direct(invocation.args)
    return link.next, push(state, value)


# =============================================================================
# STACK OPERATIONS
# =============================================================================


def _identity(args: tuple[str, ...]) -> Value:
    return Value.from_text(args[0])


def _pop_direct(args: tuple[str, ...]) -> Value:
    raise MalformedChain("Pop used outside a Chain")


def _pop_chained(
    operation: Operation, link: Link, state: ChainState
) -> tuple[Optional[Link], ChainState]:
    arity = parse_pop_arity(link.invocation)
    if link.next is None:
        raise MalformedChain(f"{link.invocation.render()} at the end of a Chain has nothing to fill")
    return link.next, pop(state, arity)


# =============================================================================
# REGISTRY
# =============================================================================


class OperationRegistry:
    """Реестр операций по имени."""

    def __init__(self, operations: Iterable[Operation] = ()):
        self._operations: dict[str, Operation] = {}
        for operation in operations:
            self.register(operation)

    def register(self, operation: Operation, replace: bool = False) -> None:
        """
        Регистрация операции.

        Raises:
            ValueError: Если имя уже занято и replace=False
        """
        if operation.name in self._operations and not replace:
            raise ValueError(f"operation already registered: {operation.name}")
        self._operations[operation.name] = operation

    def resolve(self, name: str) -> Operation:
        operation = self._operations.get(name)
        if operation is None:
            raise UnknownOperation(f"unknown operation: {name}")
        return operation

    def names(self) -> list[str]:
        return sorted(self._operations)

    def __contains__(self, name: str) -> bool:
        return name in self._operations


def arithmetic_operations(unit: BoundedArithmeticUnit) -> list[Operation]:
    """Операции Bounded Arithmetic Unit для реестра."""
    return [
        Operation.from_function("Add", unit.add, arity=2),
        Operation.from_function("Subtract", unit.subtract, arity=2),
        Operation.from_function("Negate", unit.negate, arity=1),
        Operation.from_function("Log2", unit.log2, arity=1),
        Operation.from_function("Pow2", unit.pow2, arity=1),
    ]


def stack_operations() -> list[Operation]:
    return [
        Operation(name="Push", direct=_identity, chained=compute_and_push, arity=1),
        Operation(name="Identity", direct=_identity, chained=compute_and_push, arity=1),
        Operation(name="Pop", direct=_pop_direct, chained=_pop_chained),
    ]


def build_default_registry(unit: Optional[BoundedArithmeticUnit] = None) -> OperationRegistry:
    """Реестр со всеми стандартными операциями."""
    from src.chain.terminals import terminal_operations

    unit = unit or BoundedArithmeticUnit()
    return OperationRegistry(
        arithmetic_operations(unit) + stack_operations() + terminal_operations()
    )
