import itertools

import pytest

from lintkit.render import render_module
from lintkit.resolve import ConfigError, Framework, RepoConfig, dedupe, parse_framework, resolve

ALL_CONFIGS = [
    RepoConfig(use_type_checking=use_ts, framework=framework)
    for use_ts, framework in itertools.product((False, True), Framework)
]


def test_dedupe_keeps_first_occurrence_in_order():
    assert dedupe(["b", "a", "b", "c", "a"]) == ("b", "a", "c")
    assert dedupe([]) == ()


def test_plain_react_scenario():
    resolved = resolve(RepoConfig(use_type_checking=False, framework=Framework.react))

    assert resolved.lint_staged_glob == "src/**/*.{js,jsx}"
    assert resolved.typecheck is None
    assert resolved.lint["parser"] == "@babel/eslint-parser"
    assert "typescript" not in resolved.dependencies
    assert resolved.transpile.presets == ("@babel/preset-env", "@babel/preset-react")
    assert resolved.transpile.plugins == ("@babel/plugin-transform-runtime",)


def test_typed_vue_scenario():
    resolved = resolve(RepoConfig(use_type_checking=True, framework=Framework.vue))

    assert resolved.lint_staged_glob == "src/**/*.{js,jsx,ts,tsx,vue}"
    assert resolved.typecheck is not None
    assert resolved.typecheck["compilerOptions"]["strict"] is True
    assert {"typescript", "@typescript-eslint/parser", "@typescript-eslint/eslint-plugin"} <= set(
        resolved.dependencies
    )
    assert resolved.lint["parser"] == "vue-eslint-parser"
    assert resolved.lint["parserOptions"]["parser"] == "@typescript-eslint/parser"
    assert resolved.transpile.presets == ("@babel/preset-env", "@babel/preset-typescript")
    assert resolved.transpile.plugins == ("@babel/plugin-transform-runtime", "@vue/babel-plugin-jsx")


@pytest.mark.parametrize("repo_config", ALL_CONFIGS)
def test_sequences_have_no_duplicates(repo_config):
    resolved = resolve(repo_config)

    for sequence in (
        resolved.transpile.presets,
        resolved.transpile.plugins,
        resolved.dependencies,
        resolved.lint["extends"],
        resolved.lint["plugins"],
    ):
        assert len(sequence) == len(set(sequence))


@pytest.mark.parametrize("repo_config", ALL_CONFIGS)
def test_pre_commit_packages_always_present(repo_config):
    resolved = resolve(repo_config)

    assert "husky" in resolved.dependencies
    assert "lint-staged" in resolved.dependencies


@pytest.mark.parametrize("repo_config", ALL_CONFIGS)
def test_type_checking_controls_tsconfig_and_glob(repo_config):
    resolved = resolve(repo_config)

    if repo_config.use_type_checking:
        assert resolved.typecheck is not None
        assert "ts,tsx" in resolved.lint_staged_glob
    else:
        assert resolved.typecheck is None
        assert "ts" not in resolved.lint_staged_glob.split("{")[1]


@pytest.mark.parametrize("repo_config", ALL_CONFIGS)
def test_resolve_is_deterministic(repo_config):
    first = resolve(repo_config)
    second = resolve(repo_config)

    assert first == second
    assert render_module(first.lint) == render_module(second.lint)
    assert render_module(first.transpile.as_dict()) == render_module(second.transpile.as_dict())


def test_prettier_integration_is_last_extend():
    for repo_config in ALL_CONFIGS:
        assert resolve(repo_config).lint["extends"][-1] == "plugin:prettier/recommended"


def test_typed_rules_override_base_rules():
    resolved = resolve(RepoConfig(use_type_checking=True, framework=Framework.react))

    assert resolved.lint["rules"]["no-unused-vars"] == "off"
    assert resolved.lint["rules"]["@typescript-eslint/no-unused-vars"] == "warn"
    assert resolved.lint["settings"] == {"react": {"version": "detect"}}


def test_resolved_documents_do_not_share_state():
    repo_config = RepoConfig(use_type_checking=True, framework=Framework.vue)
    first = resolve(repo_config)
    first.lint["rules"]["no-console"] = "off"
    first.lint["parserOptions"]["ecmaVersion"] = 3
    first.typecheck["compilerOptions"]["strict"] = False

    second = resolve(repo_config)

    assert second.lint["rules"]["no-console"] == "warn"
    assert second.lint["parserOptions"]["ecmaVersion"] == 2021
    assert second.typecheck["compilerOptions"]["strict"] is True


def test_parse_framework_accepts_aliases():
    assert parse_framework("React") is Framework.react
    assert parse_framework(" VueJS ") is Framework.vue
    assert parse_framework(Framework.vue) is Framework.vue


def test_parse_framework_rejects_unknown_value():
    with pytest.raises(ConfigError, match="react, vue"):
        parse_framework("angular")
