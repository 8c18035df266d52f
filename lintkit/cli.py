from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import FRAMEWORKS, MANIFEST_FILE
from .manifest import ManifestError, ManifestNotFoundError, build_manifest_patch
from .prompts import PromptCollector
from .registry import RegistryError
from .resolve import ConfigError, RepoConfig, parse_framework, resolve
from .updater import TargetFolderError, UpdateError, UpdateReport, run_update

app = typer.Typer(help="Generate eslint, prettier, babel and tsconfig files for a JavaScript project.")
console = Console()

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INVALID_INPUT = 2
EXIT_NOT_FOUND = 3


class OutputFormat(str, Enum):
    table = "table"
    json = "json"
    md = "md"


def _json_print(payload: dict) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=True, sort_keys=True))


def _print_key_value_table(title: str, rows: list[tuple[str, str]]) -> None:
    table = Table(title=title)
    table.add_column("Field")
    table.add_column("Value")
    for key, value in rows:
        table.add_row(key, value)
    console.print(table)


def _emit_success(
    command: str,
    output_format: OutputFormat,
    data: dict,
    md_renderer: Callable[[dict], str],
    table_renderer: Callable[[dict], None],
) -> None:
    if output_format == OutputFormat.json:
        _json_print(
            {
                "ok": True,
                "command": command,
                "exit_code": EXIT_OK,
                "data": data,
            }
        )
        return

    if output_format == OutputFormat.md:
        console.print(md_renderer(data))
    else:
        table_renderer(data)


def _emit_error(
    command: str,
    output_format: OutputFormat,
    exit_code: int,
    code: str,
    message: str,
) -> None:
    if output_format == OutputFormat.json:
        _json_print(
            {
                "ok": False,
                "command": command,
                "exit_code": exit_code,
                "error": {
                    "code": code,
                    "message": message,
                },
            }
        )
    elif output_format == OutputFormat.md:
        console.print(f"# {command}\n\n- **status**: error\n- **code**: {code}\n- **message**: {message}")
    else:
        console.print(f"[red]Error ({code}):[/red] {message}")

    raise typer.Exit(code=exit_code)


def _framework_option(value: Optional[str], command: str, output_format: OutputFormat) -> Optional[str]:
    if value is None:
        return None
    try:
        return parse_framework(value).value
    except ConfigError as error:
        _emit_error(
            command=command,
            output_format=output_format,
            exit_code=EXIT_INVALID_INPUT,
            code="invalid_framework",
            message=str(error),
        )
        raise


def _report_data(report: UpdateReport) -> dict:
    repo_config = report.repo_config
    return {
        "folder": str(report.folder),
        "typescript": repo_config.use_type_checking if repo_config else None,
        "framework": repo_config.framework.value if repo_config else None,
        "deleted": list(report.deleted),
        "written": list(report.written),
        "dry_run": report.dry_run,
    }


@app.command("init")
def init_project(
    folder: Path = typer.Argument(Path("."), help=f"Project folder containing {MANIFEST_FILE}."),
    typescript: Optional[bool] = typer.Option(
        None, "--typescript/--no-typescript", help="Answer the TypeScript question up front."
    ),
    framework: Optional[str] = typer.Option(None, "--framework", help=f"One of: {', '.join(FRAMEWORKS)}"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Replace existing config files without asking."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would change without touching files."),
    output_format: OutputFormat = typer.Option(OutputFormat.table, "--format", help="Output format."),
):
    """Replace lint/format config files and wire lint-staged into package.json."""
    command = "init"
    target = folder.resolve()
    # Keep stdout to the single JSON envelope; questions go to stderr.
    prompt_console = Console(stderr=True) if output_format == OutputFormat.json else console
    prompts = PromptCollector(
        prompt_console,
        use_type_checking=typescript,
        framework=_framework_option(framework, command, output_format),
    )
    progress = console if output_format != OutputFormat.json else None

    try:
        report = run_update(target, prompts, console=progress, assume_yes=yes, dry_run=dry_run)
    except ManifestNotFoundError as error:
        _emit_error(command, output_format, EXIT_NOT_FOUND, "manifest_not_found", str(error))
        raise
    except ManifestError as error:
        _emit_error(command, output_format, EXIT_INVALID_INPUT, "invalid_manifest", str(error))
        raise
    except (ConfigError, RegistryError) as error:
        _emit_error(command, output_format, EXIT_INVALID_INPUT, "invalid_config", str(error))
        raise
    except TargetFolderError as error:
        _emit_error(command, output_format, EXIT_INVALID_INPUT, "invalid_folder", str(error))
        raise
    except UpdateError as error:
        _emit_error(command, output_format, EXIT_ERROR, "update_error", str(error))
        raise

    if report.aborted:
        return

    data = _report_data(report)

    def render_md(payload: dict) -> str:
        lines = [f"# lintkit init: `{payload['folder']}`", ""]
        lines.append(f"- **typescript**: {payload['typescript']}")
        lines.append(f"- **framework**: {payload['framework']}")
        lines.append(f"- **dry_run**: {payload['dry_run']}")
        lines.append(f"- **deleted**: {', '.join(payload['deleted']) if payload['deleted'] else 'none'}")
        lines.append(f"- **written**: {', '.join(payload['written'])}")
        return "\n".join(lines)

    def render_table(payload: dict) -> None:
        table = Table(title=f"Planned changes: {payload['folder']}" if payload["dry_run"] else payload["folder"])
        table.add_column("Action")
        table.add_column("File")
        for name in payload["deleted"]:
            table.add_row("delete", name)
        for name in payload["written"]:
            table.add_row("write", name)
        console.print(table)
        if not payload["dry_run"]:
            console.print(
                "[green]everything's done, run `npm install` and enjoy coding with eslint && prettier![/green]"
            )

    _emit_success(command=command, output_format=output_format, data=data, md_renderer=render_md, table_renderer=render_table)


@app.command("preview")
def preview(
    typescript: bool = typer.Option(False, "--typescript/--no-typescript", help="Resolve the TypeScript variant."),
    framework: str = typer.Option("react", "--framework", help=f"One of: {', '.join(FRAMEWORKS)}"),
    output_format: OutputFormat = typer.Option(OutputFormat.json, "--format", help="Output format."),
):
    """Print the resolved documents without writing anything."""
    command = "preview"
    repo_config = RepoConfig(
        use_type_checking=typescript,
        framework=parse_framework(_framework_option(framework, command, output_format)),
    )
    try:
        resolved = resolve(repo_config)
    except RegistryError as error:
        _emit_error(command, output_format, EXIT_INVALID_INPUT, "invalid_config", str(error))
        raise

    patch = build_manifest_patch(resolved)
    data = {
        "typescript": typescript,
        "framework": repo_config.framework.value,
        "lint": resolved.lint,
        "transpile": resolved.transpile.as_dict(),
        "typecheck": resolved.typecheck,
        "dependencies": list(resolved.dependencies),
        "lint_staged": patch.lint_staged,
        "lint_script": patch.lint_script,
    }

    def render_md(payload: dict) -> str:
        lines = [f"# Preview: {payload['framework']} (typescript={payload['typescript']})", ""]
        lines.append(f"- **presets**: {', '.join(payload['transpile']['presets'])}")
        lines.append(f"- **plugins**: {', '.join(payload['transpile']['plugins'])}")
        lines.append(f"- **lint_script**: `{payload['lint_script']}`")
        lines.append("\n## Dependencies")
        lines.extend(f"- `{name}`" for name in payload["dependencies"])
        return "\n".join(lines)

    def render_table(payload: dict) -> None:
        _print_key_value_table(
            title=f"Preview: {payload['framework']}",
            rows=[
                ("typescript", str(payload["typescript"])),
                ("parser", str(payload["lint"]["parser"])),
                ("extends", ", ".join(payload["lint"]["extends"])),
                ("presets", ", ".join(payload["transpile"]["presets"])),
                ("plugins", ", ".join(payload["transpile"]["plugins"])),
                ("lint-staged", ", ".join(payload["lint_staged"])),
                ("dependencies", ", ".join(payload["dependencies"])),
            ],
        )

    _emit_success(command=command, output_format=output_format, data=data, md_renderer=render_md, table_renderer=render_table)


@app.command("version")
def version(
    output_format: OutputFormat = typer.Option(OutputFormat.table, "--format", help="Output format."),
) -> None:
    """Print version."""
    _emit_success(
        command="version",
        output_format=output_format,
        data={"version": __version__},
        md_renderer=lambda payload: f"lintkit {payload['version']}",
        table_renderer=lambda payload: _print_key_value_table("lintkit", [("version", payload["version"])]),
    )


if __name__ == "__main__":
    app()
