"""
Value — результат одного шага цепочки

Immutable Pydantic модель, представляющая одно вычисленное или литеральное
значение: последовательность токенов.

Два способа отображения:
- enclosed(): значение в паре разделителей, как оно лежит в стеке — "(15)"
- bare(): значение без разделителей, как оно подставляется в placeholder — "15"
"""

from typing import Final

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# КОНСТАНТЫ ТОКЕНОВ
# =============================================================================

# Токен: непрозрачная единица текста, дальше не декомпозируется
Token = str

# Маркер подстановки в аргументах операций
PLACEHOLDER: Final[str] = "$"

# Пара разделителей, в которую заключается значение при push
OPEN_DELIMITER: Final[str] = "("
CLOSE_DELIMITER: Final[str] = ")"


# =============================================================================
# VALUE MODEL
# =============================================================================


class Value(BaseModel):
    """
    Значение в стеке цепочки.

    Токены хранятся как tuple (immutable); пустое значение допустимо
    как модель, но вызовы операций его не порождают.
    """

    tokens: tuple[Token, ...] = Field(default=(), description="Токены значения")

    model_config = {"frozen": True}

    @field_validator("tokens")
    @classmethod
    def validate_tokens(cls, v: tuple[Token, ...]) -> tuple[Token, ...]:
        """Токен не может быть пустым или содержать пробелы"""
        for token in v:
            if not token or token != token.strip() or len(token.split()) != 1:
                raise ValueError(f"invalid token {token!r}")
        return v

    @classmethod
    def from_text(cls, text: str) -> "Value":
        """Разбиение текста на токены по пробелам."""
        return cls(tokens=tuple(text.split()))

    @classmethod
    def of(cls, literal: int | str) -> "Value":
        return cls.from_text(str(literal))

    def bare(self) -> str:
        """Содержимое без разделителей."""
        return " ".join(self.tokens)

    def enclosed(self) -> str:
        """Содержимое в паре разделителей, как в стеке."""
        return f"{OPEN_DELIMITER}{self.bare()}{CLOSE_DELIMITER}"

    def __str__(self) -> str:
        return self.bare()
