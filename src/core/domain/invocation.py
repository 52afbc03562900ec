"""
OperationInvocation — вызов операции в том виде, как он записан

Immutable Pydantic модель: имя операции и её аргументы как текст.
Аргументы не вычисляются до подстановки (вложенные вызовы не раскрываются).

body — исходный текст между скобками, если вызов получен разбором текста.
Терминальные операции подставляют значение в body, не меняя остальной
текст шаблона (запятые и пробелы сохраняются как записаны).

Placeholder ($) в аргументах заполняются слева направо:
- fill(): каждый placeholder получает своё значение (Pop)
- fill_all(): все placeholder получают одно и то же значение (терминальные операции)
"""

import re
from typing import Iterator, Optional

from pydantic import BaseModel, Field, field_validator

from src.core.domain.value import PLACEHOLDER


_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _fill_text(text: str, remaining: Iterator[str]) -> str:
    pieces = text.split(PLACEHOLDER)
    out = pieces[0]
    for piece in pieces[1:]:
        out += next(remaining) + piece
    return out


class OperationInvocation(BaseModel):
    """Вызов операции: Name(arg, arg, ...)."""

    name: str = Field(..., min_length=1, description="Имя операции")
    args: tuple[str, ...] = Field(default=(), description="Аргументы как текст")
    body: Optional[str] = Field(default=None, description="Исходный текст между скобками")

    model_config = {"frozen": True}

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Имя операции — идентификатор"""
        if not _NAME_PATTERN.match(v):
            raise ValueError(f"invalid operation name {v!r}")
        return v

    @field_validator("args", mode="before")
    @classmethod
    def normalize_args(cls, v):
        """Целые числа допускаются как аргументы и приводятся к тексту"""
        if isinstance(v, (list, tuple)):
            return tuple(str(arg).strip() if isinstance(arg, (int, str)) else arg for arg in v)
        return v

    def placeholder_count(self) -> int:
        """Число placeholder во всех аргументах."""
        return sum(arg.count(PLACEHOLDER) for arg in self.args)

    def fill(self, texts: tuple[str, ...] | list[str]) -> "OperationInvocation":
        """
        Заполнение placeholder слева направо, по одному тексту на placeholder.

        Args:
            texts: Подставляемые тексты, в порядке появления placeholder

        Returns:
            Новый вызов без placeholder

        Raises:
            ValueError: Если число текстов не совпадает с числом placeholder
        """
        expected = self.placeholder_count()
        if len(texts) != expected:
            raise ValueError(
                f"{self.name}: {expected} placeholder(s) for {len(texts)} value(s)"
            )

        remaining = iter(texts)
        filled = tuple(_fill_text(arg, remaining) for arg in self.args)
        body = None
        if self.body is not None and self.body.count(PLACEHOLDER) == expected:
            body = _fill_text(self.body, iter(texts))
        return OperationInvocation(name=self.name, args=filled, body=body)

    def fill_all(self, text: str) -> "OperationInvocation":
        """Подстановка одного текста во все placeholder."""
        return OperationInvocation(
            name=self.name,
            args=tuple(arg.replace(PLACEHOLDER, text) for arg in self.args),
            body=None if self.body is None else self.body.replace(PLACEHOLDER, text),
        )

    def template(self) -> str:
        """Текст аргументов как записан (без body: аргументы через запятую)."""
        if self.body is not None:
            return self.body
        return ", ".join(self.args)

    def render(self) -> str:
        return f"{self.name}({', '.join(self.args)})"

    def __str__(self) -> str:
        return self.render()
