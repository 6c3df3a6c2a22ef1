"""Parameter conversion logic for SQL placeholders.

Built statements always carry numeric ``$n`` placeholders. Drivers whose
native style is positional-by-appearance (``?`` or ``%s``) need both the
text and the argument sequence rewritten, since a numeric placeholder may
appear more than once or out of order.
"""

from collections.abc import Sequence
from typing import Any, Optional

from sqlaudit.exceptions import MissingParameterError
from sqlaudit.parameters.types import ParameterInfo, ParameterStyle
from sqlaudit.parameters.validator import ParameterValidator

__all__ = ("ParameterConverter",)


class ParameterConverter:
    """Numeric placeholder conversion with argument reordering."""

    __slots__ = ("validator",)

    def __init__(self) -> None:
        self.validator = ParameterValidator()

    def convert(
        self,
        sql: str,
        parameters: Sequence[Any],
        target_style: ParameterStyle,
        parameter_info: Optional[list[ParameterInfo]] = None,
    ) -> tuple[str, list[Any]]:
        """Convert numeric placeholders to ``target_style``.

        Args:
            sql: The SQL string with ``$n`` placeholders.
            parameters: Arguments indexed by placeholder number.
            target_style: The driver's native parameter style.
            parameter_info: Optional pre-extracted placeholder info.

        Raises:
            MissingParameterError: If a placeholder references a missing argument.

        Returns:
            The converted SQL and the argument list in binding order.
        """
        if target_style is ParameterStyle.NUMERIC:
            return sql, list(parameters)

        parameter_info = parameter_info if parameter_info is not None else self.validator.extract_parameters(sql)
        numeric = [param for param in parameter_info if param.style is ParameterStyle.NUMERIC]

        placeholder = "%s" if target_style is ParameterStyle.POSITIONAL_PYFORMAT else "?"
        escape_percent = target_style is ParameterStyle.POSITIONAL_PYFORMAT

        result_parts: list[str] = []
        ordered: list[Any] = []
        current_pos = 0
        for param in numeric:
            index = param.index or 0
            if index < 1 or index > len(parameters):
                msg = f"Placeholder {param.placeholder_text} has no matching argument ({len(parameters)} supplied)"
                raise MissingParameterError(msg, sql)
            segment = sql[current_pos : param.position]
            result_parts.append(segment.replace("%", "%%") if escape_percent else segment)
            result_parts.append(placeholder)
            ordered.append(parameters[index - 1])
            current_pos = param.position + len(param.placeholder_text)

        tail = sql[current_pos:]
        result_parts.append(tail.replace("%", "%%") if escape_percent else tail)
        return "".join(result_parts), ordered

    def needs_conversion(self, target_style: ParameterStyle) -> bool:
        """Check if parameter style conversion is needed.

        Returns:
            True when the driver does not accept numeric placeholders.
        """
        return target_style is not ParameterStyle.NUMERIC
