import typer
from pathlib import Path
from typing import List, Optional

from rich.markup import escape
from rich.prompt import Confirm, Prompt

from mcmod import __version__
from mcmod.logging_config import setup_logging
from mcmod.cli import config_cmd
from mcmod.cli.output import exit_on_error, get_console, print_warning
from mcmod.features import VALID_FEATURES, add_feature
from mcmod.scaffold import InitOptions, init_project
from mcmod.schemas import LOADER_NAMES
from mcmod.update import run_update
from mcmod.user_config import load_preferences
from mcmod.utils import default_mod_name
from mcmod.versions import fetch_versions

app = typer.Typer(help="Scaffold and extend multi-loader Minecraft mod projects.")
console = get_console()


@app.callback()
def global_options(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log debug output to stderr (also via MCMOD_LOG_LEVEL)"
    ),
):
    """
    mcmod: multi-loader Minecraft mod scaffolding.
    """
    if verbose:
        setup_logging(level="DEBUG", force=True)


def _ask(prompt: str, value: Optional[str], default: str, interactive: bool) -> str:
    if value is not None:
        return value
    if not interactive:
        return default
    return Prompt.ask(f"  {prompt}", default=default, console=console)


@app.command()
def init(
    directory: Path = typer.Option(Path("."), "--dir", "-d", help="Directory to create the project in"),
    mod_id: Optional[str] = typer.Option(None, "--mod-id", help="Mod ID (lowercase, e.g. my_mod)"),
    mod_name: Optional[str] = typer.Option(None, "--mod-name", "--name", help="Display name"),
    package: Optional[str] = typer.Option(None, "--package", help="Java package, e.g. com.example.my_mod"),
    author: Optional[str] = typer.Option(None, "--author", help="Author name"),
    description: Optional[str] = typer.Option(None, "--description", help="Mod description"),
    language: Optional[str] = typer.Option(None, "--language", help="java or kotlin"),
    loader: Optional[List[str]] = typer.Option(None, "--loader", help="fabric and/or neoforge (repeatable)"),
    ci: Optional[bool] = typer.Option(None, "--ci/--no-ci", help="Add a GitHub Actions workflow"),
    offline: bool = typer.Option(False, "--offline", help="Use built-in versions instead of fetching"),
):
    """
    Create a new mod project. Prompts for anything not given when --mod-id is omitted.
    """
    interactive = mod_id is None

    with exit_on_error():
        prefs = load_preferences()
        defaults = prefs.defaults

        if interactive:
            console.print("\n[bold cyan]  mcmod init[/bold cyan]\n")
        mod_id = _ask("Mod ID", mod_id, "mymod", interactive)
        mod_name = _ask("Mod Name", mod_name, default_mod_name(mod_id), interactive)
        package = _ask("Package", package, f"com.example.{mod_id}", interactive)
        author = _ask("Author", author, defaults.author or "Your Name", interactive)
        description = _ask("Description", description, "A Minecraft mod", interactive)

        if language is None:
            language = defaults.language or "java"
            if interactive:
                language = Prompt.ask(
                    "  Language", choices=["java", "kotlin"], default=language, console=console
                )

        loaders = list(loader or [])
        if not loaders:
            loaders = list(LOADER_NAMES)
            if interactive:
                answer = Prompt.ask(
                    "  Loaders (comma-separated)", default=",".join(LOADER_NAMES), console=console
                )
                loaders = [item.strip() for item in answer.split(",") if item.strip()]

        if ci is None:
            ci = Confirm.ask("  Enable CI (GitHub Actions)?", default=True, console=console) if interactive else True

        versions = fetch_versions(offline=offline, warn=print_warning)

        descriptor = init_project(
            InitOptions(
                directory=directory,
                mod_id=mod_id,
                mod_name=mod_name,
                package=package,
                author=author,
                description=description,
                language=language,
                loaders=loaders,
                ci=ci,
            ),
            versions=versions,
            prefs=prefs,
            warn=print_warning,
        )

    info = descriptor.mod_info
    console.print("\n[bold green]  Project created successfully![/bold green]\n")
    console.print(f"    Mod ID:      {escape(info.mod_id)}")
    console.print(f"    Mod Name:    {escape(info.mod_name)}")
    console.print(f"    Package:     {escape(info.package)}")
    console.print(f"    Language:    {info.language}")
    console.print(f"    Loaders:     {', '.join(descriptor.enabled_platforms())}")
    console.print(f"    CI:          {str(descriptor.features.ci).lower()}")
    console.print("\n  [bold]Next steps:[/bold]")
    console.print(f"    cd {escape(str(directory))}")
    console.print("    gradle wrapper      [dim](generates gradlew; needs a local Gradle)[/dim]")
    console.print("    ./gradlew build\n")


@app.command()
def add(
    feature: str = typer.Argument(..., help=f"Feature to add: {', '.join(VALID_FEATURES)}"),
    directory: Path = typer.Option(Path("."), "--dir", "-d", help="Project directory (contains mcmod.toml)"),
):
    """
    Add a feature to an existing project.
    """
    with exit_on_error():
        add_feature(feature, directory)

    if feature == "kotlin":
        console.print("[green]Migrated project to Kotlin[/green]")
    else:
        console.print(f"[green]Added {escape(feature)}[/green]")


@app.command()
def update():
    """
    Update mcmod to the latest release.
    """
    console.print("Checking for updates...")
    with exit_on_error():
        result = run_update(__version__, on_progress=console.print)

    if result.up_to_date:
        console.print(f"[green]Already up to date (v{result.current})[/green]")
    else:
        console.print(f"[green]Updated mcmod v{result.current} -> v{result.latest}[/green]")


@app.command()
def version():
    """
    Print the mcmod version.
    """
    console.print(f"mcmod {__version__}", highlight=False)


app.add_typer(config_cmd.app, name="config", help="Global config commands (set, get, list)")


if __name__ == "__main__":
    app()
