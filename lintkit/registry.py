from __future__ import annotations

import copy
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from .config import FRAMEWORKS, REGISTRY_FILE, REGISTRY_VERSION, templates_root

REQUIRED_SECTIONS = ("lint", "format", "transpile", "typecheck", "dependencies")
STRATEGIES = ("plain", "typed")


class RegistryError(RuntimeError):
    pass


@dataclass(frozen=True)
class TranspileSet:
    presets: tuple[str, ...]
    plugins: tuple[str, ...]


@dataclass(frozen=True)
class ParseStrategy:
    """Lint and transpile fragments that depend on whether type checking is used."""

    name: str
    parser: str
    parser_options: dict[str, Any]
    extends: tuple[str, ...]
    plugins: tuple[str, ...]
    rules: dict[str, Any]
    extensions: tuple[str, ...]
    transpile: TranspileSet
    dependencies: tuple[str, ...]


@dataclass(frozen=True)
class FrameworkTemplate:
    """Lint and transpile fragments for one UI framework.

    ``parser`` wraps the strategy parser when set: the framework parser becomes the
    top-level ``parser`` and the strategy parser moves to ``parserOptions.parser``.
    """

    name: str
    parser: str | None
    extends: tuple[str, ...]
    plugins: tuple[str, ...]
    settings: dict[str, Any]
    rules: dict[str, Any]
    extensions: tuple[str, ...]
    transpile: TranspileSet
    dependencies: tuple[str, ...]


@dataclass(frozen=True)
class TemplateRegistry:
    version: int
    lint_base: dict[str, Any]
    final_extends: tuple[str, ...]
    strategies: dict[str, ParseStrategy]
    frameworks: dict[str, FrameworkTemplate]
    format_document: dict[str, Any]
    transpile_base: TranspileSet
    typecheck_document: dict[str, Any]
    dependencies: tuple[str, ...]

    def strategy(self, use_type_checking: bool) -> ParseStrategy:
        return self.strategies["typed" if use_type_checking else "plain"]

    def framework(self, name: str) -> FrameworkTemplate:
        try:
            return self.frameworks[name]
        except KeyError:
            raise RegistryError(f"No template registered for framework: {name}") from None

    def base_lint(self) -> dict[str, Any]:
        return copy.deepcopy(self.lint_base)

    def format_config(self) -> dict[str, Any]:
        return copy.deepcopy(self.format_document)

    def typecheck_config(self) -> dict[str, Any]:
        return copy.deepcopy(self.typecheck_document)


def _section(data: dict, key: str, where: str) -> Any:
    if not isinstance(data, dict) or key not in data:
        raise RegistryError(f"Registry is missing section: {where}{key}")
    return data[key]


def _strings(values: Any, where: str) -> tuple[str, ...]:
    if values is None:
        return ()
    if not isinstance(values, list) or not all(isinstance(item, str) for item in values):
        raise RegistryError(f"Expected a list of strings at {where}")
    return tuple(values)


def _transpile_set(data: dict, where: str) -> TranspileSet:
    return TranspileSet(
        presets=_strings(data.get("presets"), f"{where}.presets"),
        plugins=_strings(data.get("plugins"), f"{where}.plugins"),
    )


def _parse_strategy(name: str, data: dict) -> ParseStrategy:
    where = f"lint.strategies.{name}"
    return ParseStrategy(
        name=name,
        parser=str(_section(data, "parser", f"{where}.")),
        parser_options=dict(data.get("parserOptions") or {}),
        extends=_strings(data.get("extends"), f"{where}.extends"),
        plugins=_strings(data.get("plugins"), f"{where}.plugins"),
        rules=dict(data.get("rules") or {}),
        extensions=_strings(_section(data, "extensions", f"{where}."), f"{where}.extensions"),
        transpile=_transpile_set(data.get("transpile") or {}, f"{where}.transpile"),
        dependencies=_strings(data.get("dependencies"), f"{where}.dependencies"),
    )


def _parse_framework(name: str, data: dict) -> FrameworkTemplate:
    where = f"lint.frameworks.{name}"
    return FrameworkTemplate(
        name=name,
        parser=data.get("parser"),
        extends=_strings(data.get("extends"), f"{where}.extends"),
        plugins=_strings(data.get("plugins"), f"{where}.plugins"),
        settings=dict(data.get("settings") or {}),
        rules=dict(data.get("rules") or {}),
        extensions=_strings(data.get("extensions"), f"{where}.extensions"),
        transpile=_transpile_set(data.get("transpile") or {}, f"{where}.transpile"),
        dependencies=_strings(data.get("dependencies"), f"{where}.dependencies"),
    )


def parse_registry(data: Any) -> TemplateRegistry:
    if not isinstance(data, dict):
        raise RegistryError("Registry document must be a mapping.")

    version = data.get("version")
    if version != REGISTRY_VERSION:
        raise RegistryError(f"Unsupported registry version: {version!r} (expected {REGISTRY_VERSION})")

    for key in REQUIRED_SECTIONS:
        _section(data, key, "")

    lint = data["lint"]
    strategies_data = _section(lint, "strategies", "lint.")
    frameworks_data = _section(lint, "frameworks", "lint.")

    strategies = {
        name: _parse_strategy(name, _section(strategies_data, name, "lint.strategies.")) for name in STRATEGIES
    }
    frameworks = {
        name: _parse_framework(name, _section(frameworks_data, name, "lint.frameworks.")) for name in FRAMEWORKS
    }

    return TemplateRegistry(
        version=version,
        lint_base=dict(_section(lint, "base", "lint.")),
        final_extends=_strings(lint.get("final_extends"), "lint.final_extends"),
        strategies=strategies,
        frameworks=frameworks,
        format_document=dict(data["format"]),
        transpile_base=_transpile_set(_section(data["transpile"], "base", "transpile."), "transpile.base"),
        typecheck_document=dict(data["typecheck"]),
        dependencies=_strings(data["dependencies"], "dependencies"),
    )


def load_registry(path: Path | None = None) -> TemplateRegistry:
    if path is None:
        return _default_registry()
    return _read_registry(path)


def _read_registry(path: Path) -> TemplateRegistry:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as error:
        raise RegistryError(f"Could not read registry {path}: {error}") from error
    return parse_registry(data)


@lru_cache(maxsize=1)
def _default_registry() -> TemplateRegistry:
    return _read_registry(templates_root() / REGISTRY_FILE)
