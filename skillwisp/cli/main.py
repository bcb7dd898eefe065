"""CLI entry point for skillwisp."""

from typing import Annotated, List, Optional

import typer
from rich.table import Table

from skillwisp import __version__
from skillwisp.cli.common import (
    console,
    err_console,
    fetch_spinner,
    load_config,
    parse_kind,
    scope_from_flag,
    setup_logging,
)
from skillwisp.core.installer import Installer
from skillwisp.core.manager import detail, list_resources, uninstall
from skillwisp.core.paths import InstallScope
from skillwisp.core.resource import Resource
from skillwisp.core.tool import detect_tools, tool_ids

app = typer.Typer(
    name="skillwisp",
    help="Install skills, rules and workflows into your AI coding tools.",
    no_args_is_help=True,
    add_completion=False,
)

KindOption = Annotated[
    str,
    typer.Option("--kind", "-k", help="Resource kind: skill, rule or workflow"),
]
GlobalOption = Annotated[
    bool,
    typer.Option("--global", "-g", help="Use the home directory instead of the project"),
]


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"skillwisp {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug logging.")
    ] = False,
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show version."),
    ] = None,
) -> None:
    setup_logging(verbose)


@app.command()
def install(
    resource_id: Annotated[str, typer.Argument(help="Resource id (e.g., pdf)")],
    path: Annotated[
        Optional[str],
        typer.Option("--path", "-p", help="Path below the kind directory (defaults to the id)"),
    ] = None,
    kind: KindOption = "skill",
    targets: Annotated[
        Optional[List[str]],
        typer.Option("--target", "-t", help=f"Target tool, repeatable ({', '.join(tool_ids())})"),
    ] = None,
    global_install: GlobalOption = False,
    copy: Annotated[
        bool, typer.Option("--copy", help="Copy into every target instead of symlinking")
    ] = False,
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Overwrite existing installs")
    ] = False,
    source: Annotated[str, typer.Option("--source", help="Source label")] = "",
    description: Annotated[
        str, typer.Option("--description", help="Description used for single-file targets")
    ] = "",
) -> None:
    """Install a resource into the Primary Source and each target tool.

    Examples:
      skillwisp install pdf --path @anthropic/pdf
      skillwisp install pdf -t claude -t cursor
      skillwisp install review --kind rule --global
    """
    config = load_config()
    resource_kind = parse_kind(kind)
    scope = InstallScope.GLOBAL if global_install else InstallScope(config.default_scope)
    installer = Installer(config)

    target_ids = list(targets or [])
    check_ids = target_ids or [t.id for t in detect_tools()]
    if not force:
        existing = installer.check_exists(resource_id, resource_kind, check_ids, scope)
        if existing:
            err_console.print(
                f"[yellow]'{resource_id}' is already installed for: {', '.join(existing)}[/yellow]"
            )
            err_console.print("[dim]Use --force to overwrite.[/dim]")
            raise typer.Exit(1)

    resource = Resource(
        id=resource_id,
        kind=resource_kind,
        path=path or resource_id,
        source=source,
        description=description,
    )
    with fetch_spinner(f"Fetching {resource.path}..."):
        result = installer.install(
            resource,
            target_ids=target_ids or None,
            use_symlinks=False if copy else None,
            scope=scope,
        )

    if not result.success:
        err_console.print(f"[red]Error:[/red] {result.error}")
        raise typer.Exit(1)

    table = Table(title=f"Installed {resource_kind.value} '{resource_id}'")
    table.add_column("Target")
    table.add_column("Mode")
    table.add_column("Path")
    for target in result.targets:
        table.add_row(target.tool_id, target.mechanism.value, str(target.path))
    console.print(table)

    for notice in result.compat_notices:
        console.print(f"[dim]{notice.tool_name}: {notice.note}[/dim]")


@app.command("list")
def list_command(
    global_only: Annotated[bool, typer.Option("--global", "-g", help="Only global installs")] = False,
    local_only: Annotated[bool, typer.Option("--local", "-l", help="Only project installs")] = False,
    kind: Annotated[Optional[str], typer.Option("--kind", "-k", help="Filter by kind")] = None,
    tool: Annotated[Optional[str], typer.Option("--tool", "-t", help="Filter by tool id")] = None,
) -> None:
    """List installed resources."""
    if global_only and local_only:
        raise typer.BadParameter("--global and --local are mutually exclusive")
    scope = InstallScope.GLOBAL if global_only else InstallScope.LOCAL if local_only else None
    resources = list_resources(
        scope=scope,
        kind=parse_kind(kind) if kind else None,
        tool_id=tool,
    )

    if not resources:
        console.print("[dim]No resources installed.[/dim]")
        return

    table = Table()
    table.add_column("Id")
    table.add_column("Kind")
    table.add_column("Scope")
    table.add_column("Tool")
    table.add_column("Description")
    for resource in resources:
        table.add_row(
            resource.id,
            resource.kind.value,
            resource.scope.value,
            resource.tool_id + (" (link)" if resource.is_symlink else ""),
            resource.name or "",
        )
    console.print(table)


def _print_detail(resource_id: str, kind_value: str, global_install: bool) -> bool:
    info = detail(resource_id, parse_kind(kind_value), scope_from_flag(global_install))
    if info is None:
        return False

    console.print(f"[bold]{info.kind.value} '{info.id}'[/bold] ({info.scope.value})")
    if info.primary_path is not None:
        console.print(f"  Primary: {info.primary_path}")
    for tool_path in info.tool_paths:
        mode = "link" if tool_path.is_symlink else "copy"
        console.print(f"  {tool_path.tool_name}: {tool_path.path} [dim]({mode})[/dim]")
    return True


@app.command()
def info(
    resource_id: Annotated[str, typer.Argument(help="Resource id")],
    kind: KindOption = "skill",
    global_install: GlobalOption = False,
) -> None:
    """Show where a resource is installed."""
    if not _print_detail(resource_id, kind, global_install):
        err_console.print(f"[red]Error:[/red] '{resource_id}' is not installed")
        raise typer.Exit(1)


@app.command("uninstall")
def uninstall_command(
    resource_id: Annotated[str, typer.Argument(help="Resource id")],
    kind: KindOption = "skill",
    global_install: GlobalOption = False,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Remove a resource from every tool directory."""
    if not _print_detail(resource_id, kind, global_install):
        err_console.print(f"[red]Error:[/red] '{resource_id}' is not installed")
        raise typer.Exit(1)

    if not yes and not typer.confirm("Remove all of the above?"):
        raise typer.Exit(1)

    result = uninstall(resource_id, parse_kind(kind), scope_from_flag(global_install))
    if not result.success:
        err_console.print(f"[red]Error:[/red] {result.error}")
        raise typer.Exit(1)
    console.print(f"[green]Removed {len(result.removed_paths)} location(s)[/green]")


if __name__ == "__main__":
    app()
