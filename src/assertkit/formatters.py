"""Renderers that turn a failure record into report text."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any

import yaml


class BaseFormatter(ABC):
    """Renders a failure record plus optional stack text.

    Implementations must be pure: the same record and stack always give
    the same output, and empty inputs never raise.
    """

    name: str = ""

    @abstractmethod
    def format(self, record: dict[str, Any], stack: str) -> str:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class TextFormatter(BaseFormatter):
    name = "text"

    def format(self, record: dict[str, Any], stack: str) -> str:
        lines = ["ASSERT"]
        for key, value in record.items():
            lines.append(f"   {key}={value}")
        output = "\n".join(lines) + "\n"
        if stack:
            output += f"{stack}\n"
        return output


def _envelope(record: dict[str, Any], stack: str) -> dict[str, Any]:
    data: dict[str, Any] = {"assertData": record}
    if stack:
        data["stack"] = stack
    return data


class JSONFormatter(BaseFormatter):
    name = "json"

    def format(self, record: dict[str, Any], stack: str) -> str:
        return json.dumps(_envelope(record, stack), indent=2, default=str)


def _plain(value: Any) -> Any:
    """Reduce a value to types yaml.safe_dump accepts."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, dict):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_plain(v) for v in value]
    return str(value)


class YAMLFormatter(BaseFormatter):
    name = "yaml"

    def format(self, record: dict[str, Any], stack: str) -> str:
        return yaml.safe_dump(
            _plain(_envelope(record, stack)), default_flow_style=False
        )


_FORMATTERS: dict[str, type[BaseFormatter]] = {
    "text": TextFormatter,
    "json": JSONFormatter,
    "yaml": YAMLFormatter,
}


def get_formatter(formatter_name: str) -> BaseFormatter:
    cls = _FORMATTERS.get(formatter_name)
    if cls is None:
        raise ValueError(
            f"Unknown formatter: {formatter_name!r}. "
            f"Available: {', '.join(sorted(_FORMATTERS))}"
        )
    return cls()


def available_formatters() -> list[str]:
    return sorted(_FORMATTERS)
