from __future__ import annotations

from pathlib import Path
from typing import NoReturn
import os

import typer

from diffscope_ci import actions
from diffscope_ci.config import load_filters, load_trigger_context
from diffscope_ci.filters import apply_filters
from diffscope_ci.git_scope import Git, GitScopeError, diff_paths, ensure_full_history
from diffscope_ci.resolver import resolve_base
from diffscope_ci.runs import DEFAULT_API_URL, GitHubRuns

app = typer.Typer(help="diffscope-ci: list files changed since the last good CI run")


def _fail(message: str) -> NoReturn:
    actions.set_output("files", "")
    actions.set_failed(message)
    raise typer.Exit(code=1)


@app.callback()
def main() -> None:
    """diffscope-ci command group."""


@app.command()
def run(
    github_token: str | None = typer.Option(None, envvar="INPUT_GITHUB_TOKEN", help="Token for the workflow runs API"),
    workflow_id: str | None = typer.Option(
        None, envvar="INPUT_WORKFLOW_ID", help="Workflow id or file name; diff since its last successful run"
    ),
    filter: str | None = typer.Option(None, envvar="INPUT_FILTER", help="Newline-separated glob patterns"),
    filter_file: str | None = typer.Option(
        None, envvar="INPUT_FILTER_FILE", help="YAML file with a 'filter' list of glob patterns"
    ),
    path: str = typer.Option(".", envvar="INPUT_PATH", help="Path to the repository checkout"),
) -> None:
    if not github_token:
        _fail("Failed to get input github_token")

    try:
        patterns = load_filters(filter, filter_file)
        ctx = load_trigger_context()
    except (OSError, ValueError) as exc:
        _fail(str(exc))

    git = Git(Path(path).resolve())
    runs = GitHubRuns(token=github_token, api_url=os.getenv("GITHUB_API_URL") or DEFAULT_API_URL)

    current = ctx.current
    base = resolve_base(ctx, git, runs=runs, workflow_id=workflow_id) if current else None
    if not current or not base:
        _fail("Failed to get start or endpoint for diff.")

    history_error: GitScopeError | None = None
    with actions.group("Testing shallowness."):
        try:
            ensure_full_history(git)
        except GitScopeError as exc:
            history_error = exc
    if history_error is not None:
        _fail(str(history_error))

    actions.info(f"Diffing between {current} and {base}")
    try:
        files = diff_paths(git, base, current)
    except GitScopeError as exc:
        _fail(str(exc))

    if patterns:
        actions.info("Filtering Output")
        files = apply_filters(files, patterns)

    with actions.group("Final Diff"):
        for changed in files:
            actions.info(changed)
    actions.set_output("files", "\n".join(files))


if __name__ == "__main__":
    app()
