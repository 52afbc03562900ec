"""Terminal Consumers — Unwrap / Print / Tokenize.

Терминальная операция:
1. берёт одно значение: последнее снятое Pop, либо начало стека
2. подставляет его во ВСЕ placeholder шаблона
3. поглощает весь оставшийся стек (остальные значения отбрасываются)
4. завершает цепочку: после неё операций быть не может

Unwrap   — значение без разделителей:   Unwrap(($))  → (15)
Print    — значение в разделителях:      Print(($))   → ((15))
Tokenize — как Unwrap; для сборки идентификатора: Tokenize(FOO_$) → FOO_15
"""

from typing import Optional

from src.chain.operations import Operation
from src.chain.protocol import ChainState, Link, MalformedChain
from src.core.domain.value import Value


def _outside_chain(name: str):
    def direct(args: tuple[str, ...]) -> Value:
        raise MalformedChain(f"{name} used outside a Chain")

    return direct


def _consume(enclose: bool):
    def chained(
        operation: Operation, link: Link, state: ChainState
    ) -> tuple[Optional[Link], ChainState]:
        template = link.invocation
        if link.next is not None:
            raise MalformedChain(
                f"{operation.name} must be the last operation of a Chain, "
                f"followed by {link.next.invocation.render()}"
            )
        if not template.args or not template.placeholder_count():
            raise MalformedChain(f"{template.render()}: template has no placeholder")

        if state.pending:
            value = state.pending[-1]
        elif not state.stack.is_empty():
            value = state.stack.front()
        else:
            raise MalformedChain(f"{template.render()}: nothing to consume, stack is empty")

        text = value.enclosed() if enclose else value.bare()
        output = template.fill_all(text).template()
        return None, ChainState(output=output, terminated_by=operation.name)

    return chained


def terminal_operations() -> list[Operation]:
    return [
        Operation(
            name="Unwrap", direct=_outside_chain("Unwrap"), chained=_consume(False), terminal=True
        ),
        Operation(
            name="Print", direct=_outside_chain("Print"), chained=_consume(True), terminal=True
        ),
        Operation(
            name="Tokenize", direct=_outside_chain("Tokenize"), chained=_consume(False), terminal=True
        ),
    ]
