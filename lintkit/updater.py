from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Protocol

from rich.console import Console

from .config import (
    FORMAT_CONFIG_FILE,
    LINT_CONFIG_FILE,
    MANIFEST_FILE,
    STALE_CONFIG_PATTERNS,
    TRANSPILE_CONFIG_FILE,
    TYPECHECK_CONFIG_FILE,
)
from .manifest import apply_manifest_patch, build_manifest_patch, dump_manifest, read_manifest
from .registry import TemplateRegistry, load_registry
from .render import render_json, render_module
from .resolve import RepoConfig, ResolvedConfig, resolve


class UpdateError(RuntimeError):
    pass


class TargetFolderError(UpdateError):
    pass


class Prompts(Protocol):
    def confirm_overwrite(self) -> bool: ...

    def collect(self) -> RepoConfig: ...


@dataclass(frozen=True)
class UpdatePlan:
    folder: Path
    repo_config: RepoConfig
    resolved: ResolvedConfig
    deletions: tuple[str, ...]
    # File name -> rendered text, in write order. The manifest is always last.
    writes: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class UpdateReport:
    folder: Path
    repo_config: RepoConfig | None = None
    deleted: tuple[str, ...] = ()
    written: tuple[str, ...] = ()
    aborted: bool = False
    dry_run: bool = False


def is_stale_config_file(name: str) -> bool:
    return any(pattern.search(name) for pattern in STALE_CONFIG_PATTERNS)


def find_stale_files(folder: Path, is_stale: Callable[[str], bool] = is_stale_config_file) -> tuple[str, ...]:
    return tuple(sorted(path.name for path in folder.iterdir() if path.is_file() and is_stale(path.name)))


def plan_update(
    folder: Path,
    repo_config: RepoConfig,
    is_stale: Callable[[str], bool] = is_stale_config_file,
    registry: TemplateRegistry | None = None,
) -> UpdatePlan:
    """Work out every deletion and write without touching the folder.

    The manifest is read and validated here, so a missing or broken ``package.json``
    aborts the run before any config file is removed.
    """
    if not folder.is_dir():
        raise TargetFolderError(f"Target folder does not exist: {folder}")

    manifest = read_manifest(folder)
    registry = registry or load_registry()
    resolved = resolve(repo_config, registry)
    format_document = registry.format_config()

    writes = {
        LINT_CONFIG_FILE: render_module(resolved.lint, format_document),
        FORMAT_CONFIG_FILE: render_json(format_document),
        TRANSPILE_CONFIG_FILE: render_module(resolved.transpile.as_dict(), format_document),
    }
    if resolved.typecheck is not None:
        writes[TYPECHECK_CONFIG_FILE] = render_json(resolved.typecheck)
    writes[MANIFEST_FILE] = dump_manifest(apply_manifest_patch(manifest, build_manifest_patch(resolved)))

    try:
        deletions = find_stale_files(folder, is_stale)
    except OSError as error:
        raise UpdateError(f"Could not list {folder}: {error}") from error

    return UpdatePlan(
        folder=folder,
        repo_config=repo_config,
        resolved=resolved,
        deletions=deletions,
        writes=writes,
    )


def write_atomic(path: Path, content: str) -> None:
    descriptor, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(descriptor, "w", encoding="utf-8") as handle:
            handle.write(content)
        os.replace(temp_name, path)
    except BaseException:
        Path(temp_name).unlink(missing_ok=True)
        raise


def commit_plan(plan: UpdatePlan, console: Console | None = None) -> UpdateReport:
    deleted: list[str] = []
    written: list[str] = []
    try:
        for name in plan.deletions:
            (plan.folder / name).unlink()
            deleted.append(name)
            if console is not None:
                console.print(f"[dim]removed {name}[/dim]")

        for name, content in plan.writes.items():
            write_atomic(plan.folder / name, content)
            written.append(name)
            if console is not None:
                console.print(f"[green]success to write {name}[/green]")
    except OSError as error:
        raise UpdateError(f"Failed to update {plan.folder}: {error}") from error

    return UpdateReport(
        folder=plan.folder,
        repo_config=plan.repo_config,
        deleted=tuple(deleted),
        written=tuple(written),
    )


def run_update(
    folder: Path,
    prompts: Prompts,
    console: Console | None = None,
    assume_yes: bool = False,
    dry_run: bool = False,
    is_stale: Callable[[str], bool] = is_stale_config_file,
    registry: TemplateRegistry | None = None,
) -> UpdateReport:
    if not assume_yes and not prompts.confirm_overwrite():
        return UpdateReport(folder=folder, aborted=True)

    repo_config = prompts.collect()
    plan = plan_update(folder, repo_config, is_stale=is_stale, registry=registry)

    if dry_run:
        return UpdateReport(
            folder=folder,
            repo_config=repo_config,
            deleted=plan.deletions,
            written=tuple(plan.writes),
            dry_run=True,
        )
    return commit_plan(plan, console=console)
