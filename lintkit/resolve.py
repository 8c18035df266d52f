from __future__ import annotations

import copy
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable

from .config import FRAMEWORK_ALIASES, PRE_COMMIT_PACKAGES, SOURCE_DIR
from .registry import TemplateRegistry, load_registry


class Framework(str, Enum):
    react = "react"
    vue = "vue"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class RepoConfig:
    use_type_checking: bool
    framework: Framework


@dataclass(frozen=True)
class TranspileConfig:
    presets: tuple[str, ...]
    plugins: tuple[str, ...]

    def as_dict(self) -> dict[str, list[str]]:
        return {"presets": list(self.presets), "plugins": list(self.plugins)}


@dataclass(frozen=True)
class ResolvedConfig:
    repo_config: RepoConfig
    lint: dict[str, Any]
    transpile: TranspileConfig
    typecheck: dict[str, Any] | None
    dependencies: tuple[str, ...]
    extensions: tuple[str, ...]
    lint_staged_glob: str


def parse_framework(value: str | Framework) -> Framework:
    if isinstance(value, Framework):
        return value
    normalized = str(value).strip().lower()
    normalized = FRAMEWORK_ALIASES.get(normalized, normalized)
    try:
        return Framework(normalized)
    except ValueError:
        choices = ", ".join(item.value for item in Framework)
        raise ConfigError(f"Unsupported framework: {value!r} (choose one of: {choices})") from None


def dedupe(items: Iterable[str]) -> tuple[str, ...]:
    """Drop repeated entries, keeping the first occurrence and the original order."""
    seen: set[str] = set()
    unique: list[str] = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        unique.append(item)
    return tuple(unique)


def lint_staged_glob(extensions: Iterable[str]) -> str:
    names = ",".join(extension.lstrip(".") for extension in extensions)
    return f"{SOURCE_DIR}/**/*.{{{names}}}"


def _build_lint_document(registry: TemplateRegistry, repo_config: RepoConfig) -> dict[str, Any]:
    base = registry.base_lint()
    strategy = registry.strategy(repo_config.use_type_checking)
    framework = registry.framework(repo_config.framework.value)

    parser_options = copy.deepcopy(strategy.parser_options)
    parser = strategy.parser
    if framework.parser:
        parser_options = {"parser": strategy.parser, **parser_options}
        parser = framework.parser

    rules: dict[str, Any] = {}
    for layer in (base.get("rules") or {}, framework.rules, strategy.rules):
        rules.update(copy.deepcopy(layer))

    document: dict[str, Any] = {
        "root": base.get("root", True),
        "env": base.get("env") or {},
        "parser": parser,
        "parserOptions": parser_options,
        "extends": list(
            dedupe(
                [
                    *(base.get("extends") or []),
                    *framework.extends,
                    *strategy.extends,
                    *registry.final_extends,
                ]
            )
        ),
        "plugins": list(dedupe([*(base.get("plugins") or []), *framework.plugins, *strategy.plugins])),
    }
    if framework.settings:
        document["settings"] = copy.deepcopy(framework.settings)
    document["rules"] = rules
    return document


def resolve(repo_config: RepoConfig, registry: TemplateRegistry | None = None) -> ResolvedConfig:
    registry = registry or load_registry()
    strategy = registry.strategy(repo_config.use_type_checking)
    framework = registry.framework(repo_config.framework.value)

    extensions = dedupe([*strategy.extensions, *framework.extensions])

    transpile = TranspileConfig(
        presets=dedupe(
            [*registry.transpile_base.presets, *framework.transpile.presets, *strategy.transpile.presets]
        ),
        plugins=dedupe(
            [*registry.transpile_base.plugins, *framework.transpile.plugins, *strategy.transpile.plugins]
        ),
    )

    dependencies = dedupe(
        [
            *registry.dependencies,
            *framework.dependencies,
            *transpile.presets,
            *transpile.plugins,
            *PRE_COMMIT_PACKAGES,
            *strategy.dependencies,
        ]
    )

    return ResolvedConfig(
        repo_config=repo_config,
        lint=_build_lint_document(registry, repo_config),
        transpile=transpile,
        typecheck=registry.typecheck_config() if repo_config.use_type_checking else None,
        dependencies=dependencies,
        extensions=extensions,
        lint_staged_glob=lint_staged_glob(extensions),
    )
