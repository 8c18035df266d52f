from __future__ import annotations

from rich.console import Console
from rich.prompt import Confirm, Prompt

from .config import DEFAULT_FRAMEWORK, FRAMEWORKS
from .resolve import RepoConfig, parse_framework

OVERWRITE_WARNING = "We will replace your existing .eslintrc.* and .prettierrc files."
TYPESCRIPT_QUESTION = "Will you use TypeScript in this repo?"
FRAMEWORK_QUESTION = "Which framework will you use?"


class PromptCollector:
    """Ask the interactive questions that produce a ``RepoConfig``.

    Answers already known (from command-line flags) are passed in and not asked again.
    """

    def __init__(
        self,
        console: Console,
        use_type_checking: bool | None = None,
        framework: str | None = None,
    ) -> None:
        self.console = console
        self.use_type_checking = use_type_checking
        self.framework = framework

    def confirm_overwrite(self) -> bool:
        self.console.print(f"[yellow]{OVERWRITE_WARNING}[/yellow]")
        return Confirm.ask("Continue?", default=True, console=self.console)

    def collect(self) -> RepoConfig:
        use_type_checking = self.use_type_checking
        if use_type_checking is None:
            use_type_checking = Confirm.ask(TYPESCRIPT_QUESTION, default=False, console=self.console)

        framework = self.framework
        if framework is None:
            framework = Prompt.ask(
                FRAMEWORK_QUESTION,
                choices=list(FRAMEWORKS),
                default=DEFAULT_FRAMEWORK,
                console=self.console,
            )

        return RepoConfig(use_type_checking=use_type_checking, framework=parse_framework(framework))
