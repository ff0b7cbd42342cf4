"""
CLI 入口模块 - 使用 Typer 构建命令行界面

检查流程：
1. 计算变更并准备工作区
2. 渲染并解析检查树文档
3. 执行检查，遇到第一个失败即退出
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax

from gitix.checks import drain, load_check_tree, read_document, start_check
from gitix.config import ENV_ECOSYSTEM, ENV_REV_SPEC, ENV_STAGED, RunConfig, WorkspaceConfig
from gitix.errors import ConfigError, GitixError
from gitix.executor import CommandExecutor
from gitix.plugins import PluginRegistry
from gitix.repo import Workspace, start_workspace
from gitix.reporters import JsonReporter, Reporter, RichReporter

logger = logging.getLogger("gitix")

# 创建 Typer 应用实例
app = typer.Typer(
    name="gitix",
    help="gitix: run checks against the changed parts of a git repository.",
    add_completion=False,
)

# Rich Console 用于输出（stderr，保持 stdout 给 JSON 报告）
console = Console(stderr=True)


def _setup_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _fail(message: str) -> typer.Exit:
    console.print(f"[red]Error:[/red] {escape(message)}")
    return typer.Exit(1)


def _make_reporter(run_config: RunConfig) -> Reporter:
    if run_config.output_format == "json":
        return JsonReporter()
    if run_config.output_format == "rich":
        return RichReporter(console, verbose=run_config.debug)
    raise _fail(f'Unknown output format "{run_config.output_format}" (use rich or json)')


def _close(workspace: Workspace) -> None:
    try:
        workspace.close()
    except OSError as e:
        # checks that were still running may hold files in the workspace
        logger.warning("Unable to remove workspace %s: %s", workspace.work_dir, e)


def run(ws_config: WorkspaceConfig, run_config: RunConfig, config_file: Optional[Path]) -> None:
    """Run the checks; raises typer.Exit(1) on the first failure."""
    reporter = _make_reporter(run_config)

    # 在切换工作目录之前读取文档
    try:
        source = read_document(config_file.resolve(), "") if config_file else None
    except ConfigError as e:
        raise _fail(str(e))

    try:
        with console.status("[yellow]Identifying changed files...[/yellow]"):
            workspace = start_workspace(ws_config)
    except GitixError as e:
        raise _fail(str(e))

    try:
        if source is None:
            source = PluginRegistry.get_plugin(workspace.ecosystem).default_flow

        data = workspace.template_data()
        if run_config.debug:
            console.print("Template data:")
            console.print_json(data=data)

        try:
            tree = load_check_tree(source, data)
        except ConfigError as e:
            if e.document is not None:
                console.print(Panel(Syntax(e.document, "yaml"), title="Rendered config file"))
            raise _fail(str(e))

        executor = CommandExecutor(dry_run=run_config.dry_run, cwd=workspace.root_dir)
        reporter.start(workspace)

        failure = None
        for outcome in drain(start_check(tree, executor)):
            reporter.outcome(outcome)
            if not outcome.ok:
                failure = outcome
                break
        reporter.finish(failure)

        if failure is not None:
            raise typer.Exit(1)
    finally:
        _close(workspace)


@app.command()
def check(
    config_file: Optional[Path] = typer.Argument(
        None,
        help="Step-tree document (YAML with Jinja2 templating); the ecosystem default is used if omitted",
    ),
    path_spec: Optional[list[str]] = typer.Option(
        None,
        "--path-spec",
        help="git path spec selecting files to check (repeatable; default: the ecosystem's sources, excluding vendor/)",
    ),
    root: Path = typer.Option(
        Path("."),
        "--root",
        "-r",
        help="Any path inside the repository to check",
    ),
    rev: str = typer.Option(
        "",
        "--rev",
        envvar=ENV_REV_SPEC,
        help="Revision range to check; its newest commit is checked out into a temporary workspace",
    ),
    staged: bool = typer.Option(
        False,
        "--staged",
        envvar=ENV_STAGED,
        help="Check what is staged in the index, in a temporary workspace",
    ),
    shadow_link: bool = typer.Option(
        False,
        "--shadow-link",
        "--lndir",
        help="Stage by symlinking the working tree instead of checking out the whole index",
    ),
    ecosystem: Optional[str] = typer.Option(
        None,
        "--ecosystem",
        "-e",
        envvar=ENV_ECOSYSTEM,
        help="Build-unit ecosystem (go, python); detected if omitted",
    ),
    output_format: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich (default) or json",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Show debug logging and template data",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Print the commands instead of running them",
    ),
) -> None:
    """
    Run the configured checks against the changed parts of a repository.

    Examples:
        gitix check
        gitix check --staged --shadow-link
        gitix check --rev origin/main..HEAD checks.yml
        gitix check -n --path-spec '*.py' --path-spec ':(exclude)vendor/'
    """
    _setup_logging(debug)

    if rev and staged:
        logger.warning("--rev and --staged are exclusive; checking revision range %s", rev)
    if shadow_link and not staged:
        logger.warning("--shadow-link only applies with --staged")

    ws_config = WorkspaceConfig(
        root=root,
        path_spec=list(path_spec or []),
        rev_spec=rev,
        staging=staged and not rev,
        use_shadow_link=shadow_link,
        ecosystem=ecosystem,
    )
    run_config = RunConfig(dry_run=dry_run, debug=debug, output_format=output_format)
    run(ws_config, run_config, config_file)


@app.command()
def version() -> None:
    """Show the version of gitix."""
    from gitix import __version__
    console.print(f"[bold]gitix[/bold] v{__version__}")


if __name__ == "__main__":
    app()
