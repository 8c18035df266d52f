from __future__ import annotations

import copy
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .config import (
    DEPENDENCY_VERSION,
    LINT_STAGED_COMMAND,
    MANIFEST_FILE,
    PRE_COMMIT_COMMAND,
    SOURCE_DIR,
)
from .resolve import ResolvedConfig

# Fields merged into by apply_manifest_patch; anything else is carried over untouched.
PATCHED_OBJECT_FIELDS = ("devDependencies", "scripts", "husky")


class ManifestError(RuntimeError):
    pass


class ManifestNotFoundError(ManifestError):
    pass


@dataclass(frozen=True)
class ManifestPatch:
    dev_dependencies: tuple[str, ...]
    lint_script: str
    lint_staged: dict[str, str]
    hooks: dict[str, str]


def build_manifest_patch(resolved: ResolvedConfig) -> ManifestPatch:
    extensions = ",".join(resolved.extensions)
    return ManifestPatch(
        dev_dependencies=resolved.dependencies,
        lint_script=f"eslint --ext {extensions} {SOURCE_DIR}",
        lint_staged={resolved.lint_staged_glob: LINT_STAGED_COMMAND},
        hooks={"pre-commit": PRE_COMMIT_COMMAND},
    )


def apply_manifest_patch(manifest: dict[str, Any], patch: ManifestPatch) -> dict[str, Any]:
    """Return a copy of ``manifest`` with ``patch`` applied.

    Keys the patch does not touch keep their values and position. Dependencies that
    already exist are repinned to ``latest``.
    """
    patched = copy.deepcopy(manifest)

    dev_dependencies = dict(patched.get("devDependencies") or {})
    for name in patch.dev_dependencies:
        dev_dependencies[name] = DEPENDENCY_VERSION
    patched["devDependencies"] = dev_dependencies

    scripts = dict(patched.get("scripts") or {})
    scripts["lint"] = patch.lint_script
    patched["scripts"] = scripts

    patched["lint-staged"] = dict(patch.lint_staged)

    husky = dict(patched.get("husky") or {})
    husky["hooks"] = {**dict(husky.get("hooks") or {}), **patch.hooks}
    patched["husky"] = husky
    return patched


def manifest_path(folder: Path) -> Path:
    return folder / MANIFEST_FILE


def read_manifest(folder: Path) -> dict[str, Any]:
    path = manifest_path(folder)
    if not path.is_file():
        raise ManifestNotFoundError(f"Missing {MANIFEST_FILE} in {folder}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as error:
        raise ManifestError(f"Could not read {path}: {error}") from error
    except json.JSONDecodeError as error:
        raise ManifestError(f"Invalid JSON in {path}: {error}") from error

    if not isinstance(data, dict):
        raise ManifestError(f"{path} must contain a JSON object.")

    for key in PATCHED_OBJECT_FIELDS:
        if data.get(key) is not None and not isinstance(data[key], dict):
            raise ManifestError(f"\"{key}\" in {path} must be a JSON object.")
    hooks = (data.get("husky") or {}).get("hooks")
    if hooks is not None and not isinstance(hooks, dict):
        raise ManifestError(f"\"husky.hooks\" in {path} must be a JSON object.")
    return data


def dump_manifest(manifest: dict[str, Any]) -> str:
    return json.dumps(manifest, indent=2, ensure_ascii=False) + "\n"
