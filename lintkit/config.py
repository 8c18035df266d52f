from __future__ import annotations

import re
from pathlib import Path

FRAMEWORKS = ("react", "vue")
DEFAULT_FRAMEWORK = "react"
FRAMEWORK_ALIASES = {"vuejs": "vue", "vue.js": "vue", "reactjs": "react"}

REGISTRY_VERSION = 1
REGISTRY_FILE = "registry.yml"
MODULE_TEMPLATE = "module.js.j2"

MANIFEST_FILE = "package.json"
LINT_CONFIG_FILE = ".eslintrc.js"
FORMAT_CONFIG_FILE = ".prettierrc"
TRANSPILE_CONFIG_FILE = "babel.config.js"
TYPECHECK_CONFIG_FILE = "tsconfig.json"

STALE_CONFIG_PATTERNS = (re.compile(r"\.eslintrc"), re.compile(r"\.prettierrc"))

PRE_COMMIT_PACKAGES = ("lint-staged", "husky")
LINT_STAGED_COMMAND = "eslint"
PRE_COMMIT_COMMAND = "lint-staged"
DEPENDENCY_VERSION = "latest"
SOURCE_DIR = "src"


def templates_root() -> Path:
    return Path(__file__).resolve().parent / "templates"
