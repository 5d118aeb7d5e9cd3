"""skill-router CLI: picks the skills relevant to a message.

Three commands: build, match, status.
Uses typer for argument parsing and rich for formatted terminal output.
"""

from __future__ import annotations

import json
from dataclasses import replace

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from skillrouter import __version__
from skillrouter.config import get_config, get_skill_directories, validate_config
from skillrouter.indexer import build_index_from_directories
from skillrouter.injector import write_context_file
from skillrouter.logging_config import resolve_level, setup_logging
from skillrouter.models import SkillIndex
from skillrouter.scorer import score_query
from skillrouter.store import IndexStore

app = typer.Typer(
    help="skill-router: load only the skills relevant to each message.",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"skill-router {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True,
        help="Show the version and exit",
    ),
):
    setup_logging(resolve_level(verbose))


def _load_index(index_path: str) -> SkillIndex | None:
    return IndexStore(index_path).load()


# ── build ───────────────────────────────────────────────────────────


@app.command()
def build(
    output: str | None = typer.Option(
        None, "--output", "-o", help="Output path for the index file"
    ),
    paths: list[str] | None = typer.Option(
        None, "--paths", "-p", help="Additional skill directory to scan (repeatable)"
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Rebuild even if an index exists"
    ),
):
    """Scan skill directories and write the skill index."""
    config = get_config()
    index_path = output or config.index_path
    extra_paths = paths or []
    store = IndexStore(index_path)

    if store.exists() and not force:
        console.print(f"Index already exists at {index_path}. Use --force to rebuild.")
        return
    if extra_paths:
        console.print(f"Additional paths: {', '.join(extra_paths)}")

    with console.status("[bold blue]Building skill index..."):
        index = build_index_from_directories(extra_paths)

    if not index.skills:
        console.print("[yellow]No skills found in any skill directory.[/yellow]")
        console.print("Checked directories:")
        for directory in get_skill_directories() + extra_paths:
            console.print(f"  - {directory}")
        return

    store.save(index)

    table = Table(title="Index Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_row("Skills", str(len(index.skills)))
    table.add_row("Unique Terms", str(len(index.document_frequency)))
    table.add_row("Avg Doc Length", f"{index.avg_doc_length:.1f}")
    table.add_row("Output", index_path)
    console.print(table)

    skills_table = Table(title="Indexed Skills")
    skills_table.add_column("Skill", style="cyan")
    skills_table.add_column("Keywords", justify="right")
    skills_table.add_column("Always", width=8)
    for skill in index.skills:
        skills_table.add_row(
            skill.name,
            str(len(skill.keywords)),
            "[green]yes[/green]" if skill.always_include else "",
        )
    console.print(skills_table)


# ── match ───────────────────────────────────────────────────────────


@app.command()
def match(
    message: str = typer.Argument(..., help="Message to route"),
    index: str | None = typer.Option(None, "--index", "-i", help="Path to the index file"),
    output: str | None = typer.Option(
        None, "--output", "-o", help="Output path for the context file"
    ),
    max_results: int | None = typer.Option(
        None, "--max-results", "-n", help="Maximum number of skills to return"
    ),
    threshold: float | None = typer.Option(
        None, "--threshold", "-t", help="Minimum score threshold"
    ),
    as_json: bool = typer.Option(False, "--json", help="Output results as JSON"),
):
    """Score a message against the index and write the context file."""
    config = get_config()
    overrides = {}
    if max_results is not None:
        overrides["max_results"] = max_results
    if threshold is not None:
        overrides["threshold"] = threshold
    config = replace(config, **overrides)

    errors = validate_config(config)
    if errors:
        err_console.print(Panel("[bold red]✗ Invalid configuration[/bold red]", border_style="red"))
        for err in errors:
            err_console.print(f"  [red]✗[/red] {err}")
        raise typer.Exit(code=1)

    index_path = index or config.index_path
    context_path = output or config.context_file_path

    skill_index = _load_index(index_path)
    if skill_index is None:
        err_console.print(f"[red]Error: index not found at {index_path}[/red]")
        err_console.print('Run "skill-router build" first to create the index.')
        raise typer.Exit(code=1)

    results = score_query(skill_index, message, config)
    write_context_file(results, context_path, query=message)

    if as_json:
        payload = {
            "query": message,
            "contextFile": context_path,
            "results": [r.to_dict() for r in results],
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    console.print(f'\n[bold]Query:[/bold] "{message}"')
    if not results:
        console.print("No skills matched.")
    else:
        table = Table(title=f"Matched {len(results)} skill(s)")
        table.add_column("#", style="dim", width=3)
        table.add_column("Skill", style="cyan", min_width=20)
        table.add_column("Score", justify="right", width=10)
        table.add_column("Matched")
        for i, r in enumerate(results, 1):
            score_str = f"{r.score:.2f}" if r.score > 0 else "[dim]always[/dim]"
            table.add_row(str(i), r.skill.name, score_str, ", ".join(r.matched_keywords))
        console.print(table)
    console.print(f"\nContext written to: {context_path}")


# ── status ──────────────────────────────────────────────────────────


@app.command()
def status(
    index: str | None = typer.Option(None, "--index", "-i", help="Path to the index file"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Show index health, statistics and the active configuration."""
    config = get_config()
    index_path = index or config.index_path
    skill_index = _load_index(index_path)

    if skill_index is None:
        if as_json:
            typer.echo(json.dumps({
                "status": "missing",
                "indexPath": index_path,
                "message": 'Index not found. Run "skill-router build" to create it.',
            }))
        else:
            console.print(
                Panel(
                    f"[bold yellow]Index not found[/bold yellow]\nPath: {index_path}\n"
                    'Run "skill-router build" to create the index.',
                    border_style="yellow",
                )
            )
        return

    always_from_metadata = [s.name for s in skill_index.skills if s.always_include]
    stats = {
        "status": "ok",
        "indexPath": index_path,
        "version": skill_index.version,
        "generated": skill_index.generated,
        "skillCount": len(skill_index.skills),
        "uniqueTerms": len(skill_index.document_frequency),
        "avgDocLength": skill_index.avg_doc_length,
        "alwaysIncludeSkills": always_from_metadata,
        "config": {
            "maxResults": config.max_results,
            "threshold": config.threshold,
            "alwaysInclude": config.always_include,
        },
    }

    if as_json:
        typer.echo(json.dumps(stats, indent=2))
        return

    console.print(
        Panel(
            f"[bold green]✓ Index OK[/bold green]\n"
            f"Path: {index_path}  |  Version: {skill_index.version}  |  "
            f"Generated: {skill_index.generated}",
            border_style="green",
        )
    )

    table = Table(title="Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Skills indexed", str(stats["skillCount"]))
    table.add_row("Unique terms", str(stats["uniqueTerms"]))
    table.add_row("Avg doc length", f"{skill_index.avg_doc_length:.1f}")
    table.add_row("Max results", str(config.max_results))
    table.add_row("Threshold", str(config.threshold))
    table.add_row("Always include", ", ".join(config.always_include) or "-")
    console.print(table)

    if always_from_metadata:
        console.print("\n[bold]Always-include skills (from metadata):[/bold]")
        for name in always_from_metadata:
            console.print(f"  - {name}")

    skills_table = Table(title="Indexed Skills")
    skills_table.add_column("Skill", style="cyan")
    skills_table.add_column("Keywords", justify="right")
    skills_table.add_column("Tokens", justify="right")
    for skill in skill_index.skills:
        skills_table.add_row(skill.name, str(len(skill.keywords)), str(len(skill.tokens)))
    console.print(skills_table)


if __name__ == "__main__":
    app()
