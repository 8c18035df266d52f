from __future__ import annotations

import json
import re
from functools import lru_cache
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .config import MODULE_TEMPLATE, templates_root

IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

DEFAULT_PRINT_WIDTH = 100
DEFAULT_INDENT = 2


def _quote(text: str, single_quote: bool) -> str:
    quote = "'" if single_quote else '"'
    escaped = text.replace("\\", "\\\\").replace(quote, "\\" + quote).replace("\n", "\\n")
    return f"{quote}{escaped}{quote}"


def _key(key: Any, single_quote: bool) -> str:
    text = str(key)
    return text if IDENTIFIER_RE.match(text) else _quote(text, single_quote)


def _is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, (bool, int, float, str))


def _scalar(value: Any, single_quote: bool) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return json.dumps(value)
    if isinstance(value, str):
        return _quote(value, single_quote)
    raise TypeError(f"Cannot render {type(value).__name__} as a JS literal")


def js_literal(
    value: Any,
    print_width: int = DEFAULT_PRINT_WIDTH,
    single_quote: bool = True,
    indent: int = DEFAULT_INDENT,
    depth: int = 0,
    column: int = 0,
) -> str:
    """Render plain data as a JS object literal the way prettier lays it out.

    Mapping keys that are valid identifiers are left unquoted. Arrays of scalars stay
    on one line while the whole line, from ``column`` (where the value starts) up to
    its trailing comma, fits in ``print_width``.
    """
    pad = " " * (indent * (depth + 1))
    closing = " " * (indent * depth)

    if isinstance(value, dict):
        if not value:
            return "{}"
        lines = []
        for key, item in value.items():
            prefix = f"{pad}{_key(key, single_quote)}: "
            lines.append(prefix + js_literal(item, print_width, single_quote, indent, depth + 1, len(prefix)))
        return "{\n" + ",\n".join(lines) + "\n" + closing + "}"

    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        items = [js_literal(item, print_width, single_quote, indent, depth + 1, len(pad)) for item in value]
        inline = "[" + ", ".join(items) + "]"
        if all(_is_scalar(item) for item in value) and column + len(inline) + 1 <= print_width:
            return inline
        return "[\n" + ",\n".join(f"{pad}{item}" for item in items) + "\n" + closing + "]"

    return _scalar(value, single_quote)


@lru_cache(maxsize=1)
def _environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(templates_root())),
        undefined=StrictUndefined,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["js_literal"] = js_literal
    return env


def render_module(document: dict[str, Any], format_document: dict[str, Any] | None = None) -> str:
    options = format_document or {}
    rendered = (
        _environment()
        .get_template(MODULE_TEMPLATE)
        .render(
            document=document,
            print_width=int(options.get("printWidth", DEFAULT_PRINT_WIDTH)),
            single_quote=bool(options.get("singleQuote", True)),
            indent=int(options.get("tabWidth", DEFAULT_INDENT)),
        )
    )
    return rendered + ("\n" if not rendered.endswith("\n") else "")


def render_json(document: dict[str, Any]) -> str:
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"
