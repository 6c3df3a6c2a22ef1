"""Parameter extraction logic.

Finds ``?`` and ``$N`` placeholders in SQL text while skipping quoted
literals, comments, PostgreSQL casts and the ``??``/``?|``/``?&`` JSON
operators, none of which carry bound values.
"""

import re
from typing import Final

from sqlaudit.parameters.types import ParameterInfo, ParameterStyle

__all__ = ("ParameterValidator",)


_PARAMETER_REGEX: Final = re.compile(
    r"""
    # Literals and Comments (matched first and skipped)
    (?P<dquote>"(?:[^"\\]|\\.)*") |
    (?P<squote>'(?:[^'\\]|\\.)*') |
    (?P<dollar_quoted_string>\$(?P<dollar_quote_tag_inner>(?:[A-Za-z_]\w*)?)\$[\s\S]*?\$(?P=dollar_quote_tag_inner)\$) |
    (?P<line_comment>--[^\r\n]*) |
    (?P<block_comment>/\*(?:[^*]|\*(?!/))*\*/) |
    # Tokens that resemble parameters
    (?P<pg_q_operator>\?\?|\?\||\?&) |
    (?P<pg_cast>::(?P<cast_type>\w+)) |
    # Placeholders
    (?P<numeric>\$(?P<numeric_index>\d+)) |
    (?P<qmark>\?)
    """,
    re.VERBOSE | re.MULTILINE | re.DOTALL,
)


class ParameterValidator:
    """Extracts SQL placeholders with position and style information."""

    __slots__ = ()

    def extract_parameters(self, sql: str) -> list[ParameterInfo]:
        """Extract parameter information from SQL string.

        Args:
            sql: SQL string to analyze

        Returns:
            List of ParameterInfo objects, sorted by position
        """
        parameters: list[ParameterInfo] = []
        ordinal = 0

        for match in _PARAMETER_REGEX.finditer(sql):
            if match.group("qmark"):
                parameters.append(
                    ParameterInfo(
                        name=None,
                        style=ParameterStyle.QMARK,
                        position=match.start("qmark"),
                        ordinal=ordinal,
                        placeholder_text=match.group("qmark"),
                    )
                )
                ordinal += 1
            elif match.group("numeric"):
                parameters.append(
                    ParameterInfo(
                        name=match.group("numeric_index"),
                        style=ParameterStyle.NUMERIC,
                        position=match.start("numeric"),
                        ordinal=ordinal,
                        placeholder_text=match.group("numeric"),
                    )
                )
                ordinal += 1

        return parameters
