"""wizardflow command line."""

import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
import yaml
from rich.console import Console
from rich.table import Table

from wizardflow.config import CliProperties, UserConfig
from wizardflow.engine import (
    ConsoleRunner,
    Flow,
    FlowBuilder,
    FlowLoader,
    FlowResult,
    PromptRunner,
    PromptState,
    ResultMode,
    WizardFlowError,
)
from wizardflow.utils.log import configure_logging

app = typer.Typer(help="Declarative terminal wizards.", no_args_is_help=True)
template_app = typer.Typer(help="Project template repositories.", no_args_is_help=True)
app.add_typer(template_app, name="template")

DEFAULT_PROJECT_NAME = "demo"


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING or ERROR"),
):
    configure_logging(log_level)


def _runner() -> PromptRunner:
    return ConsoleRunner()


def parse_overrides(pairs: List[str]) -> Dict[str, str]:
    """Turn ``id=value`` strings into a dict."""
    overrides = {}
    for pair in pairs:
        key, sep, value = pair.partition('=')
        if not sep or not key.strip():
            raise typer.BadParameter(f"Expected id=value, got '{pair}'", param_hint="--set")
        overrides[key.strip()] = value
    return overrides


def _printable(result: FlowResult) -> Dict[str, Any]:
    return {
        key: str(value) if isinstance(value, Path) else value
        for key, value in result.context.as_dict().items()
    }


def _execute(flow: Flow) -> FlowResult:
    try:
        return flow.run()
    except (KeyboardInterrupt, EOFError):
        typer.echo("\nAborted.", err=True)
        raise typer.Exit(code=130)


@app.command()
def run(
    flow: str = typer.Argument(..., help="Flow name (flows/<name>.yaml) or path to a YAML file"),
    set_values: List[str] = typer.Option([], "--set", "-s", help="Pre-supplied answer as id=value"),
    verify: bool = typer.Option(False, "--verify", help="Prompt anyway, offering pre-supplied answers as defaults"),
    base_path: Path = typer.Option(Path("."), "--base-path", help="Directory containing flows/"),
):
    """Run a flow defined in YAML and print the collected answers."""
    mode = ResultMode.VERIFY if verify else ResultMode.ACCEPT
    try:
        compiled = FlowLoader(base_path).load_flow(
            flow, runner=_runner(), overrides=parse_overrides(set_values), mode=mode
        )
    except WizardFlowError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    result = _execute(compiled)
    typer.echo(yaml.safe_dump(_printable(result), sort_keys=False), nl=False)


def package_name_for(project_name: str) -> str:
    """Derive a Python package name from a project name."""
    name = re.sub(r'[^0-9a-zA-Z]+', '_', project_name.strip()).strip('_').lower()
    if not name:
        return DEFAULT_PROJECT_NAME
    if name[0].isdigit():
        name = f"_{name}"
    return name


def _default_package(state: PromptState) -> None:
    if not state.default_value:
        state.default_value = package_name_for(state.get('project-name') or DEFAULT_PROJECT_NAME)


def _default_directory(state: PromptState) -> None:
    if not state.default_value:
        project = (state.get('project-name') or DEFAULT_PROJECT_NAME).replace(' ', '_')
        state.default_value = str(Path.cwd() / project)


def build_new_project_flow(
    properties: CliProperties,
    runner: Optional[PromptRunner] = None,
    project_name: Optional[str] = None,
    template_name: Optional[str] = None,
    url: Optional[str] = None,
    package_name: Optional[str] = None,
) -> Flow:
    """
    Project wizard: name, template repository, package name, target directory.

    Command line options win over configuration defaults; any answer known
    from either is accepted without prompting.
    """
    defaults = properties.defaults
    builder = FlowBuilder(runner)

    (builder.with_text('project-name')
        .name("Project name")
        .default_value(DEFAULT_PROJECT_NAME)
        .result_value(project_name or defaults.project_name)
        .result_mode(ResultMode.ACCEPT)
        .and_())

    template_url = url
    if not template_url:
        repository = properties.find_template(template_name or defaults.template_repository_name)
        template_url = repository.url if repository else None

    if properties.template_repositories:
        (builder.with_single_choice('template-url')
            .name("Template")
            .select_items([(repo.name, repo.url) for repo in properties.template_repositories])
            .sort(lambda item: item.name.lower())
            .max_items(10)
            .result_value(template_url)
            .result_mode(ResultMode.ACCEPT)
            .and_())
    else:
        (builder.with_text('template-url')
            .name("Template repository URL")
            .result_value(template_url)
            .result_mode(ResultMode.ACCEPT)
            .and_())

    (builder.with_text('package-name')
        .name("Package name")
        .result_value(package_name or defaults.package_name)
        .result_mode(ResultMode.ACCEPT)
        .pre_hook(_default_package)
        .and_())

    (builder.with_path('project-directory')
        .name("Project directory")
        .pre_hook(_default_directory)
        .and_())

    return builder.build()


@app.command()
def new(
    project_name: Optional[str] = typer.Option(None, "--project-name", help="Name of the new project"),
    template_name: Optional[str] = typer.Option(None, "--template-name", help="Name of a configured template repository"),
    url: Optional[str] = typer.Option(None, "--url", help="URL of a template repository"),
    package_name: Optional[str] = typer.Option(None, "--package-name", help="Package name for the new project"),
):
    """Walk through the settings for a new project."""
    if template_name and url:
        typer.echo("Error: --template-name and --url can not be specified together", err=True)
        raise typer.Exit(code=1)

    try:
        properties = UserConfig().load()
    except WizardFlowError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if template_name and properties.find_template(template_name) is None:
        typer.echo(f"Error: Could not find a template repository given name = {template_name}", err=True)
        raise typer.Exit(code=1)

    compiled = build_new_project_flow(
        properties,
        runner=_runner(),
        project_name=project_name,
        template_name=template_name,
        url=url,
        package_name=package_name,
    )
    result = _execute(compiled)
    context = result.context
    typer.echo(
        f"Project {context.get('project-name')} will be created in "
        f"{context.get('project-directory')} from {context.get('template-url') or '(no template)'}"
    )
    typer.echo(yaml.safe_dump(_printable(result), sort_keys=False), nl=False)


@template_app.command("list")
def template_list():
    """List configured template repositories."""
    try:
        repositories = UserConfig().load().template_repositories
    except WizardFlowError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if not repositories:
        typer.echo("No template repositories configured.")
        return

    table = Table(title="Template Repositories")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Description")
    table.add_column("Tags")
    for repo in repositories:
        table.add_row(repo.name, repo.description or "", ", ".join(repo.tags))

    Console().print(table)


if __name__ == "__main__":
    app()
