"""Parser — текстовая форма вызовов операций.

Грамматика:
    invocation := NAME "(" body ")"
    body       := аргументы, разделённые запятыми верхнего уровня
    chain      := "Chain" "(" invocation ([,]* invocation)* ")"

Скобки внутри аргументов должны быть сбалансированы, поэтому шаблоны
вида ($) остаются одним аргументом. Аргументы не раскрываются:
вложенный вызов остаётся текстом.
"""

from dataclasses import dataclass

from src.chain.protocol import MalformedChain
from src.core.domain.invocation import OperationInvocation


CHAIN_NAME = "Chain"


class ChainSyntaxError(MalformedChain):
    """Синтаксическая ошибка с позицией в исходном тексте."""

    def __init__(self, message: str, position: int):
        super().__init__(f"{message} at position {position}")
        self.position = position


@dataclass(frozen=True)
class ParsedProgram:
    """Результат разбора: одиночный вызов или Chain."""

    is_chain: bool
    invocations: tuple[OperationInvocation, ...]


class InvocationParser:
    """
    Посимвольный разбор текста вызовов.

    offset — позиция text в исходном тексте (для сообщений об ошибках
    при разборе тела Chain).
    """

    def __init__(self, text: str, offset: int = 0):
        self.text = text
        self.pos = 0
        self.offset = offset

    def _error(self, message: str) -> ChainSyntaxError:
        return ChainSyntaxError(message, self.offset + self.pos)

    def _skip_whitespace(self):
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def _skip_separators(self):
        while self.pos < len(self.text) and (
            self.text[self.pos].isspace() or self.text[self.pos] == ","
        ):
            self.pos += 1

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def _parse_name(self) -> str:
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos].isascii() and (
            self.text[self.pos].isalnum() or self.text[self.pos] == "_"
        ):
            self.pos += 1
        name = self.text[start:self.pos]
        if not name or name[0].isdigit():
            self.pos = start
            raise self._error("expected operation name")
        return name

    def _parse_body(self) -> tuple[str, int]:
        """Текст между парными скобками и его позиция."""
        if self.at_end() or self.text[self.pos] != "(":
            raise self._error("expected '('")
        self.pos += 1
        start = self.pos
        depth = 1
        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
                if depth == 0:
                    body = self.text[start:self.pos]
                    self.pos += 1
                    return body, start
            self.pos += 1
        raise self._error("unbalanced parentheses: missing ')'")

    @staticmethod
    def split_arguments(body: str) -> tuple[str, ...]:
        """Разбиение по запятым верхнего уровня; пустое тело — без аргументов."""
        if not body.strip():
            return ()
        args = []
        depth = 0
        current = []
        for char in body:
            if char == "," and depth == 0:
                args.append("".join(current).strip())
                current = []
                continue
            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
            current.append(char)
        args.append("".join(current).strip())
        return tuple(args)

    def _invocation(self, name: str, body: str) -> OperationInvocation:
        return OperationInvocation(
            name=name, args=self.split_arguments(body), body=body.strip()
        )

    def parse_invocation(self) -> OperationInvocation:
        """Один вызов Name(args) начиная с текущей позиции."""
        self._skip_whitespace()
        name = self._parse_name()
        self._skip_whitespace()
        body, _ = self._parse_body()
        return self._invocation(name, body)

    def parse_sequence(self) -> list[OperationInvocation]:
        """Вызовы через пробелы и/или запятые до конца текста."""
        invocations = []
        self._skip_separators()
        while not self.at_end():
            invocations.append(self.parse_invocation())
            self._skip_separators()
        return invocations

    def parse_program(self) -> ParsedProgram:
        """Весь текст: Chain(...) или одиночный вызов."""
        self._skip_whitespace()
        name = self._parse_name()
        self._skip_whitespace()
        body, body_start = self._parse_body()
        self._skip_whitespace()
        if not self.at_end():
            raise self._error("unexpected text after invocation")

        if name == CHAIN_NAME:
            inner = InvocationParser(body, offset=self.offset + body_start)
            return ParsedProgram(is_chain=True, invocations=tuple(inner.parse_sequence()))

        return ParsedProgram(
            is_chain=False,
            invocations=(self._invocation(name, body),),
        )


def parse_invocation(text: str) -> OperationInvocation:
    parser = InvocationParser(text)
    invocation = parser.parse_invocation()
    parser._skip_whitespace()
    if not parser.at_end():
        raise parser._error("unexpected text after invocation")
    return invocation


def parse_program(text: str) -> ParsedProgram:
    return InvocationParser(text).parse_program()
