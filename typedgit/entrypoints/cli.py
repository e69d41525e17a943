"""typedgit CLI entrypoint.

Command-line interface for inspecting git repositories through typed
identifiers and parsed ref and history listings.
"""

import functools
import logging
from pathlib import Path

import click

from typedgit.adapters.config import TomlConfigProvider
from typedgit.adapters.git_cmd import GitRepository
from typedgit.core.errors import (
    TypedGitCliError,
    repo_not_found_error,
    unknown_identifier_kind_error,
)
from typedgit.core.presentation import (
    format_commit_json_line,
    format_commit_text,
    format_ref_line,
    format_refs_json,
)
from typedgit.domain.config import TypedGitConfig
from typedgit.domain.exceptions import TypedGitError
from typedgit.domain.identifiers import (
    FullRefName,
    GitUrl,
    RefName,
    RefNameComponent,
    RepositoryName,
    Rev,
    Sha1,
    ShortSha1,
)
from typedgit.ports.config import ConfigProvider
from typedgit.version import __version__

logger = logging.getLogger(__name__)

IDENTIFIER_KINDS = {
    "rev": Rev,
    "ref-name": RefName,
    "component": RefNameComponent,
    "full-ref-name": FullRefName,
    "short-sha1": ShortSha1,
    "sha1": Sha1,
    "repository-name": RepositoryName,
    "url": GitUrl,
}

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def handle_cli_errors(command_name: str):
    """Decorator to handle common CLI errors.

    Domain errors become TypedGitCliError so their hints are shown.
    Anything unexpected is reported with the command name, and the
    traceback is logged in verbose mode.

    Args:
        command_name: Name of the command for error messages.

    Returns:
        Decorated function with error handling.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except (TypedGitCliError, click.exceptions.Exit, click.Abort):
                raise
            except TypedGitError as e:
                # str() so GitCommandError includes the command and its output
                raise TypedGitCliError(str(e), hint=e.hint) from e
            except Exception as e:
                logger.debug("Unexpected error in %s", command_name, exc_info=True)
                raise TypedGitCliError(
                    f"Unexpected error in {command_name}: {e}",
                    hint="Run with --verbose for more details",
                ) from e

        return wrapper

    return decorator


def _configure_logging(verbose: bool, quiet: bool, config: TypedGitConfig) -> None:
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = config.logging.numeric_level
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)


def _load_config(start: Path, provider: ConfigProvider | None = None) -> TypedGitConfig:
    """Load configuration for the repository containing start, if any.

    Centralizes config loading so every command sees the same merged
    global and local settings.
    """
    provider = provider or TomlConfigProvider()
    repo = GitRepository.find_containing_repository(start)
    return provider.load(repo.path if repo else None)


def _open_repository(ctx: click.Context) -> GitRepository:
    """Open the repository containing the working directory (or -C path)."""
    start: Path = ctx.obj["path"]
    config: TypedGitConfig = ctx.obj["config"]
    repo = GitRepository.find_containing_repository(start, config=config.git)
    if repo is None:
        repo_not_found_error(str(start))
    return repo


@click.group()
@click.version_option(version=__version__, prog_name="typedgit")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Suppress non-essential output.",
)
@click.option(
    "-C",
    "path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    help="Run as if started in PATH.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, path: Path) -> None:
    """typedgit - Typed access to git repositories.

    Lists refs and history through validated identifiers.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["path"] = path.resolve()

    config = _load_config(ctx.obj["path"])
    ctx.obj["config"] = config
    _configure_logging(verbose, quiet, config)


@cli.command()
@click.option("--tags", "kind", flag_value="tags", help="List only tags.")
@click.option("--heads", "kind", flag_value="heads", help="List only branches.")
@click.option("--remote", is_flag=True, help="List refs on the default remote.")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
@handle_cli_errors("refs")
def refs(ctx: click.Context, kind: str | None, remote: bool, as_json: bool) -> None:
    """List refs and the commits they point to.

    Annotated tags are shown with the commit they tag.
    """
    repo = _open_repository(ctx)
    listers = {
        (None, False): repo.get_refs,
        (None, True): repo.get_remote_refs,
        ("tags", False): repo.get_tags,
        ("tags", True): repo.get_remote_tags,
        ("heads", False): repo.get_branches,
        ("heads", True): repo.get_remote_branches,
    }
    found = listers[(kind, remote)]()

    if as_json:
        click.echo(format_refs_json(found))
        return
    for ref in found:
        click.echo(format_ref_line(ref))


@cli.command()
@click.argument("rev", type=str, required=False, default="HEAD")
@click.option(
    "--max-count",
    "-n",
    type=int,
    default=None,
    help="Limit the number of commits (default from config).",
)
@click.option("--json", "as_json", is_flag=True, help="Output one JSON object per line.")
@click.option("--abbrev", type=click.IntRange(4, 40), default=None, help="Abbreviate hashes.")
@click.pass_context
@handle_cli_errors("log")
def log(
    ctx: click.Context,
    rev: str,
    max_count: int | None,
    as_json: bool,
    abbrev: int | None,
) -> None:
    """Show commit history reachable from REV (default: HEAD).

    History is read lazily, so -n only reads as much as it shows.
    """
    config: TypedGitConfig = ctx.obj["config"]
    repo = _open_repository(ctx)
    count = max_count if max_count is not None else config.log.max_count
    if count < -1:
        raise TypedGitCliError(
            f"Invalid --max-count {count}", hint="Use -1 for no limit"
        )

    commits = repo.rev_list(
        Rev(rev), max_count=count, include_parents=config.log.include_parents
    )
    for index, commit in enumerate(commits):
        if as_json:
            click.echo(format_commit_json_line(commit))
            continue
        if index:
            click.echo()
        click.echo(format_commit_text(commit, abbreviate=abbrev))


@cli.command()
@click.argument("rev", type=str)
@click.option(
    "--short",
    "short",
    type=int,
    is_flag=False,
    flag_value=0,
    default=None,
    help="Print an abbreviated hash, optionally of at least N characters.",
)
@click.pass_context
@handle_cli_errors("resolve")
def resolve(ctx: click.Context, rev: str, short: int | None) -> None:
    """Resolve REV to the commit hash it names."""
    repo = _open_repository(ctx)
    if short is None:
        click.echo(str(repo.get_commit_id(Rev(rev))))
        return
    try:
        click.echo(str(repo.get_short_commit_id(Rev(rev), minimum_length=short)))
    except ValueError as e:
        raise TypedGitCliError(str(e)) from e


@cli.command()
@click.pass_context
@handle_cli_errors("branch")
def branch(ctx: click.Context) -> None:
    """Print the checked-out branch, or HEAD's commit when detached."""
    repo = _open_repository(ctx)
    current = repo.get_branch()
    if current is not None:
        click.echo(str(current))
        return
    if not ctx.obj.get("quiet", False):
        click.echo("(detached HEAD)", err=True)
    click.echo(str(repo.get_commit_id()))


@cli.command()
@click.argument("kind", type=str)
@click.argument("value", type=str)
@handle_cli_errors("validate")
def validate(kind: str, value: str) -> None:
    """Check VALUE against the rules for identifier KIND.

    KIND is one of: rev, ref-name, component, full-ref-name, short-sha1,
    sha1, repository-name, url.
    """
    identifier_type = IDENTIFIER_KINDS.get(kind)
    if identifier_type is None:
        unknown_identifier_kind_error(kind, list(IDENTIFIER_KINDS))
    identifier = identifier_type(value)
    click.echo(f"valid {kind}: {identifier}")


@cli.group()
def config() -> None:
    """Manage typedgit configuration files.

    typedgit uses a two-tier configuration system:
    - Local: .typedgit/config.toml (repo-specific settings)
    - Global: ~/.config/typedgit/config.toml (user defaults)

    Local settings override global settings. Missing values use built-in defaults.
    """


def _display_path_status(path: Path, label: str) -> None:
    """Display a config path with its existence status."""
    status = "exists" if path.exists() else "not created"
    color = "green" if path.exists() else "yellow"
    click.echo(f"{label}{path}")
    click.echo(f"  Status: {click.style(status, fg=color)}")


def _display_config_summary(config: TypedGitConfig) -> None:
    """Display a summary of config settings."""
    click.echo("  [git]")
    click.echo(f"    program = {config.git.program}")
    click.echo(f"    default_remote = {config.git.default_remote}")
    click.echo(f"    timeout = {config.git.timeout}")
    click.echo("  [log]")
    click.echo(f"    max_count = {config.log.max_count}")
    click.echo(f"    include_parents = {config.log.include_parents}")
    click.echo("  [logging]")
    click.echo(f"    level = {config.logging.level}")


@config.command(name="show")
@click.pass_context
@handle_cli_errors("config show")
def config_show(ctx: click.Context) -> None:
    """Show configuration file locations and effective settings."""
    from typedgit.shared.config_io import get_global_config_path, get_local_config_path

    _display_path_status(get_global_config_path(), "Global config: ")
    repo = GitRepository.find_containing_repository(ctx.obj["path"])
    if repo is not None:
        _display_path_status(get_local_config_path(repo.path), "Local config:  ")
    else:
        click.echo("Local config: Not in a git repository")

    click.echo("\nEffective configuration:")
    _display_config_summary(ctx.obj["config"])


@config.command(name="init")
@click.option(
    "--global", "-g", "init_global", is_flag=True, help="Create the global config file"
)
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing config file")
@click.pass_context
@handle_cli_errors("config init")
def config_init(ctx: click.Context, init_global: bool, force: bool) -> None:
    """Create a commented config file with default settings.

    Creates the local config by default. Use --global for the user-wide one.
    """
    from typedgit.shared.config_io import (
        create_default_config_file,
        get_global_config_path,
        get_local_config_path,
    )

    if init_global:
        path = get_global_config_path()
    else:
        path = get_local_config_path(_open_repository(ctx).path)

    if path.exists() and not force:
        raise TypedGitCliError(
            f"Config file already exists: {path}",
            hint="Use --force to overwrite it",
        )

    create_default_config_file(path)
    if not ctx.obj.get("quiet", False):
        click.echo(f"Created {path}")


def main() -> None:
    """Main entrypoint for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
