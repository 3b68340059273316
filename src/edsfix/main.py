from __future__ import annotations

from pathlib import Path
from typing import List, Optional
import json
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .app_context import AppContext
from .config.loader import load_behavior_config
from .context.assembler import assemble_context
from .context.scanner import scan_directory
from .errors import EdsFixError
from .mcp.server import install_signal_handlers
from .util.fs import FsError, resolve_child
from .util.log import setup_logging, stderr_console


app = typer.Typer(add_completion=False, help="edsfix: block matching and accessibility-fix tools over MCP stdio.")
console = Console()


def _resolve_cwd(cwd: Path | None) -> Path:
    cwd = Path(str(cwd or Path.cwd())).expanduser()
    if not cwd.is_absolute():
        cwd = (Path.cwd() / cwd).resolve()
    else:
        cwd = cwd.resolve()
    if not cwd.is_dir():
        raise typer.BadParameter(f"--cwd must be an existing directory, got: {cwd}")
    return cwd


def _build_context(
    cwd: Path | None,
    config: Path,
    provider: str | None,
    behavior_config: Path | None,
    blocks_root: Path | None,
) -> AppContext:
    cwd = _resolve_cwd(cwd)
    if not config.expanduser().is_absolute():
        config = cwd / config
    try:
        return AppContext.from_env(
            cwd=cwd,
            provider=provider,
            behavior_config=behavior_config,
            config_path=config,
            blocks_root=blocks_root,
        )
    except EdsFixError as e:
        stderr_console.print(f"[bold red]config error:[/bold red] {e}")
        raise typer.Exit(code=2)


CwdOpt = typer.Option(None, "--cwd", help="Project root. Defaults to current directory.")
ConfigOpt = typer.Option(Path("edsfix.yaml"), "--config", help="Provider YAML path (default: ./edsfix.yaml; falls back to AZURE_* env vars).")
ProviderOpt = typer.Option(None, "--provider", help="Provider name in the YAML (optional when it has one entry).")
BehaviorOpt = typer.Option(None, "--behavior-config", help="Optional behavior JSON (edsfix.json) path.")
BlocksOpt = typer.Option(None, "--blocks-root", help="Override the blocks directory.")
LogLevelOpt = typer.Option("INFO", "--log-level", help="Log level for stderr logging.")


@app.command()
def serve(
    cwd: Path = CwdOpt,
    config: Path = ConfigOpt,
    provider: str = ProviderOpt,
    behavior_config: Path = BehaviorOpt,
    blocks_root: Path = BlocksOpt,
    log_level: str = LogLevelOpt,
):
    """Run the MCP tool server on stdin/stdout."""
    setup_logging(log_level)
    ctx = _build_context(cwd, config, provider, behavior_config, blocks_root)
    install_signal_handlers()
    ctx.server().serve()


@app.command()
def tools(
    cwd: Path = CwdOpt,
    config: Path = ConfigOpt,
    provider: str = ProviderOpt,
    behavior_config: Path = BehaviorOpt,
    blocks_root: Path = BlocksOpt,
    log_level: str = typer.Option("WARNING", "--log-level"),
):
    """List the registered tools and their arguments."""
    setup_logging(log_level)
    ctx = _build_context(cwd, config, provider, behavior_config, blocks_root)

    table = Table(title="edsfix tools")
    table.add_column("name", style="bold", no_wrap=True)
    table.add_column("description")
    table.add_column("arguments")
    for spec in ctx.tools.list_specs():
        required = set(spec.parameters.get("required") or [])
        args = [
            f"{k}{'*' if k in required else ''}: {v.get('type', '?')}"
            for k, v in (spec.parameters.get("properties") or {}).items()
        ]
        table.add_row(spec.name, spec.description, "\n".join(args))
    console.print(table)
    console.print("[dim]* required[/dim]")


@app.command()
def call(
    name: str = typer.Argument(..., help="Tool name."),
    args: str = typer.Option("{}", "--args", "-a", help="Tool arguments as a JSON object."),
    cwd: Path = CwdOpt,
    config: Path = ConfigOpt,
    provider: str = ProviderOpt,
    behavior_config: Path = BehaviorOpt,
    blocks_root: Path = BlocksOpt,
    log_level: str = LogLevelOpt,
):
    """Invoke one tool locally, without the stdio transport."""
    setup_logging(log_level)
    try:
        arguments = json.loads(args)
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"--args is not valid JSON: {e}")

    ctx = _build_context(cwd, config, provider, behavior_config, blocks_root)
    result = ctx.dispatcher.invoke(name, arguments)
    style = "red" if result.is_error else "green"
    console.print(Panel(Text(result.joined_text), title=f"[bold]{name}[/bold]", border_style=style))
    if result.is_error:
        raise typer.Exit(code=1)


@app.command()
def context(
    block: str = typer.Argument(None, help="Block name; omit for the whole blocks root."),
    extensions: Optional[List[str]] = typer.Option(None, "--ext", help="File extension to include (repeatable)."),
    max_chars: int = typer.Option(None, "--max-chars", help="Context budget override."),
    cwd: Path = CwdOpt,
    behavior_config: Path = BehaviorOpt,
    blocks_root: Path = BlocksOpt,
    log_level: str = typer.Option("WARNING", "--log-level"),
):
    """Print the directory context a tool would send, without calling the model."""
    setup_logging(log_level)
    cwd = _resolve_cwd(cwd)
    behavior = load_behavior_config(cwd=cwd, explicit_path=behavior_config)
    root = (cwd / blocks_root).resolve() if blocks_root else behavior.blocks_root
    try:
        target = resolve_child(root, block) if block else root
        records = scan_directory(target, extensions or behavior.extensions, behavior.exclude_dirs)
    except (EdsFixError, FsError, OSError) as e:
        stderr_console.print(f"[bold red]error:[/bold red] {e}")
        raise typer.Exit(code=1)

    text = assemble_context(records, max_chars or behavior.max_context_chars)
    stderr_console.print(f"[dim]{len(records)} file(s) under {target}, {len(text)} chars[/dim]")
    console.print(text, markup=False, highlight=False, soft_wrap=True)
