"""Core parameter types shared by the builders and the drivers."""

from enum import Enum
from typing import Optional

__all__ = ("ParameterInfo", "ParameterStyle")


class ParameterStyle(str, Enum):
    """Parameter style enumeration with string values."""

    QMARK = "qmark"
    NUMERIC = "numeric"
    POSITIONAL_PYFORMAT = "pyformat_positional"

    def __str__(self) -> str:
        """String representation for better error messages.

        Returns:
            The enum value as a string.
        """
        return self.value


class ParameterInfo:
    """Immutable parameter information."""

    __slots__ = ("name", "ordinal", "placeholder_text", "position", "style")

    def __init__(
        self, name: Optional[str], style: ParameterStyle, position: int, ordinal: int, placeholder_text: str
    ) -> None:
        self.name = name
        self.style = style
        self.position = position
        self.ordinal = ordinal
        self.placeholder_text = placeholder_text

    @property
    def index(self) -> Optional[int]:
        """One-based index of a numeric placeholder, ``None`` for ``?``."""
        if self.style is ParameterStyle.NUMERIC and self.name is not None:
            return int(self.name)
        return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return False
        return self.name == other.name and self.style == other.style and self.position == other.position

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join([f'name={self.name!r}', f'ordinal={self.ordinal!r}', f'placeholder_text={self.placeholder_text!r}', f'position={self.position!r}', f'style={self.style!r}'])})"

    def __hash__(self) -> int:
        return hash((self.name, self.style, self.position))
