"""Command-line interface for create-webiny-project."""

import logging

import click
from rich.logging import RichHandler
from rich.markup import escape

from create_webiny_project import __version__
from create_webiny_project.config import load_config
from create_webiny_project.console import console, err_console
from create_webiny_project.environment import print_environment_info
from create_webiny_project.naming import InvalidProjectNameError
from create_webiny_project.packages import PackageManagerError
from create_webiny_project.project import MalformedTemplateError, create_app

logger = logging.getLogger(__name__)

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


class DefaultCommandGroup(click.Group):
    """Group that treats an unknown first argument as the default command's.

    Lets `create-webiny-project my-app -t basic` (or `-t basic my-app`) work
    alongside subcommands such as `create-webiny-project info`.
    """

    default_command = "create"

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        # Group options are all flags; the first other option starts `create`
        group_opts = {
            opt
            for param in self.get_params(ctx)
            for opt in (*param.opts, *param.secondary_opts)
        }
        for index, arg in enumerate(args):
            if arg.split("=", 1)[0] in group_opts:
                continue
            if arg.startswith("-") and arg != "--":
                args = [*args[:index], self.default_command, *args[index:]]
            break
        return super().parse_args(ctx, args)

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        if args and self.get_command(ctx, args[0]) is None:
            args = [self.default_command, *args]
        return super().resolve_command(ctx, args)


def version_callback(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    """Print version and exit."""
    if not value or ctx.resilient_parsing:
        return
    console.print(f"create-webiny-project [bold cyan]{__version__}[/bold cyan]")
    ctx.exit()


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_time=False, show_path=False)],
        force=True,
    )


def report_invalid_name(error: InvalidProjectNameError) -> None:
    """Print every reason a project name was rejected."""
    err_console.print(
        f'[red]Cannot create a project named [green]"{escape(error.name)}"[/green] '
        "because of npm naming restrictions:[/red]\n"
    )
    for problem in error.validation.problems:
        err_console.print(f"[red]  * {problem}[/red]")
    err_console.print("\n[red]Please choose a different project name.[/red]")


@click.group(cls=DefaultCommandGroup, context_settings=CONTEXT_SETTINGS)
@click.option(
    "--version",
    is_flag=True,
    callback=version_callback,
    expose_value=False,
    is_eager=True,
    help="Show version and exit.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """Create a new Webiny project from a template.

    Usage: create-webiny-project <project-name> --template=<name>
    """
    configure_logging(verbose)


@main.command()
@click.argument("project_name")
@click.option(
    "--template",
    "-t",
    required=True,
    help="Name of template to use (name, @scope/name, file:, git+ or tarball).",
)
@click.option(
    "--package-manager",
    envvar="CWP_PACKAGE_MANAGER",
    help="Package manager command (default: yarnpkg).",
)
def create(project_name: str, template: str, package_manager: str | None) -> None:
    """Create PROJECT_NAME using the given template.

    Example: create-webiny-project helloWorld --template=basic
    """
    config = load_config()
    if package_manager:
        config.package_manager = package_manager

    try:
        create_app(project_name, template, config)
    except InvalidProjectNameError as e:
        report_invalid_name(e)
        raise SystemExit(1) from None
    except PackageManagerError as e:
        console.print("\nAborting installation.")
        console.print(f"  [cyan]{escape(e.command)}[/cyan] has failed.\n")
        console.print("Done.")
        raise SystemExit(1) from None
    except MalformedTemplateError as e:
        console.print("\nAborting installation.")
        console.print(f"[red]{escape(str(e))}[/red]\n")
        console.print("Done.")
        raise SystemExit(1) from None
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        console.print("\nAborting installation.")
        console.print("[red]Unexpected error. Please report it as a bug:[/red]")
        console.print(escape(repr(e)))
        console.print("\nDone.")
        raise SystemExit(1) from None


@main.command()
def info() -> None:
    """Print environment debug information."""
    print_environment_info()
