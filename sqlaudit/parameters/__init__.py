"""Placeholder extraction and conversion shared by builders and drivers."""

from sqlaudit.parameters.converter import ParameterConverter
from sqlaudit.parameters.types import ParameterInfo, ParameterStyle
from sqlaudit.parameters.validator import ParameterValidator

__all__ = ("ParameterConverter", "ParameterInfo", "ParameterStyle", "ParameterValidator")
