"""Unit tests for placeholder extraction and conversion."""

import pytest

from sqlaudit.exceptions import MissingParameterError
from sqlaudit.parameters import ParameterConverter, ParameterStyle, ParameterValidator


@pytest.mark.parametrize(
    ("sql", "expected"),
    [
        ("SELECT * FROM t WHERE a = ? AND b = ?", ["?", "?"]),
        ("SELECT * FROM t WHERE a = $1 AND b = $12", ["$1", "$12"]),
        ("SELECT '?', \"$1\" FROM t WHERE a = ?", ["?"]),
        ("SELECT 1 -- ?\n/* $1 */ WHERE x = ?", ["?"]),
        ("SELECT data ?? 'k', data ?| ARRAY['a'], data ?& ARRAY['b'] FROM t", []),
        ("SELECT $$ ? $1 $$, $fn$ ? $fn$ WHERE id = $1", ["$1"]),
        ("SELECT x::text FROM t WHERE y = ?", ["?"]),
    ],
    ids=["qmark", "numeric", "quoted", "comments", "json-operators", "dollar-quoted", "cast"],
)
def test_extract_parameters(sql: str, expected: "list[str]") -> None:
    """Test placeholders are found only outside literals, comments and operators."""
    found = ParameterValidator().extract_parameters(sql)

    assert [info.placeholder_text for info in found] == expected
    assert all(sql.startswith(info.placeholder_text, info.position) for info in found)
    assert [info.ordinal for info in found] == list(range(len(expected)))


def test_numeric_parameter_index() -> None:
    """Test numeric placeholders expose their 1-based index."""
    first, second = ParameterValidator().extract_parameters("a = $2 AND b = $1")

    assert (first.index, second.index) == (2, 1)
    assert first.style is ParameterStyle.NUMERIC


def test_qmark_parameter_has_no_index() -> None:
    """Test qmark placeholders carry no explicit index."""
    (info,) = ParameterValidator().extract_parameters("a = ?")

    assert info.index is None
    assert info.style is ParameterStyle.QMARK


def test_numeric_target_is_passthrough() -> None:
    """Test drivers that accept $n get the statement untouched."""
    converter = ParameterConverter()

    sql, parameters = converter.convert("SELECT $1", ("a",), ParameterStyle.NUMERIC)

    assert (sql, parameters) == ("SELECT $1", ["a"])
    assert converter.needs_conversion(ParameterStyle.NUMERIC) is False


def test_convert_to_qmark_reorders_arguments() -> None:
    """Test out-of-order and repeated $n placeholders become positional qmarks."""
    sql, parameters = ParameterConverter().convert(
        "SELECT * FROM t WHERE b = $2 AND a = $1 AND c = $2", ["A", "B"], ParameterStyle.QMARK
    )

    assert sql == "SELECT * FROM t WHERE b = ? AND a = ? AND c = ?"
    assert parameters == ["B", "A", "B"]


def test_convert_to_pyformat_escapes_percent() -> None:
    """Test literal percent signs are doubled for %s drivers."""
    sql, parameters = ParameterConverter().convert(
        "SELECT * FROM t WHERE name LIKE 'a%' AND id = $1 AND pct = 5 % 2", [7], ParameterStyle.POSITIONAL_PYFORMAT
    )

    assert sql == "SELECT * FROM t WHERE name LIKE 'a%%' AND id = %s AND pct = 5 %% 2"
    assert parameters == [7]


def test_convert_leaves_literal_dollar_tokens() -> None:
    """Test $n inside a string literal is not treated as a placeholder."""
    sql, parameters = ParameterConverter().convert("SELECT '$1' WHERE a = $1", ["x"], ParameterStyle.QMARK)

    assert sql == "SELECT '$1' WHERE a = ?"
    assert parameters == ["x"]


def test_convert_missing_argument_raises() -> None:
    """Test a placeholder beyond the argument list is reported."""
    with pytest.raises(MissingParameterError, match=r"\$3"):
        ParameterConverter().convert("SELECT $3", [1, 2], ParameterStyle.QMARK)


def test_parameter_style_str() -> None:
    """Test styles render as their value."""
    assert str(ParameterStyle.POSITIONAL_PYFORMAT) == "pyformat_positional"
