from __future__ import annotations

from typing import Callable, Iterable

from diffscope_ci import actions
from diffscope_ci.git_scope import Git, GitScopeError, ensure_full_history
from diffscope_ci.models import RevisionPair, TriggerContext
from diffscope_ci.runs import GitHubRuns, RunsLookupError, latest_run

EMPTY_TAG = "empty"

Stage = tuple[str, Callable[[], "str | None"]]


def last_successful_run(
    ctx: TriggerContext,
    runs: GitHubRuns | None,
    workflow_id: str | None,
) -> str | None:
    branch = ctx.branch
    if not workflow_id or not branch or runs is None:
        return None
    if not ctx.owner or not ctx.repo:
        actions.warning("Repository name unknown, skipping workflow run lookup.")
        return None

    actions.info("Fetching workflow run data.")
    try:
        found = runs.list_runs(ctx.owner, ctx.repo, branch, workflow_id, status="success")
    except RunsLookupError as exc:
        actions.error(str(exc))
        return None

    actions.info("Fetching HEAD commit.")
    run = latest_run(found)
    if run is None:
        actions.warning("No successful workflow found.")
        return None

    actions.info(f"Found SHA {run.head_sha} from run {run.id}")
    return run.head_sha


def _ensure_local_branch(git: Git, name: str) -> None:
    if git.has_ref(name):
        return
    try:
        git.create_branch(name, f"origin/{name}")
    except GitScopeError as exc:
        actions.warning(f"Could not create local branch '{name}': {exc}")


def branch_deviation(git: Git, pair: RevisionPair) -> str | None:
    """Merge-base of ``pair.base`` and ``pair.split``, or None."""
    actions.info(f"Base branch: {pair.base or 'n/a'}, split branch: {pair.split or 'n/a'}")
    if not pair.is_complete():
        return None
    actions.info(f"Finding deviation between {pair.base} and {pair.split}")

    deviated = None
    try:
        ensure_full_history(git)
        _ensure_local_branch(git, pair.base)
        _ensure_local_branch(git, pair.split)

        actions.info("Finding Merge Base")
        deviated = git.merge_base(pair.base, pair.split) or None
    except GitScopeError as exc:
        actions.error(str(exc))

    if deviated:
        actions.info(f"Found Deviation SHA: {deviated}")
    else:
        actions.warning("Couldn't find deviation SHA.")
    return deviated


def empty_tree_tag(git: Git) -> str | None:
    try:
        actions.info("Generating Empty Tree")
        tree = git.hash_empty_tree()

        actions.info("Generating Tree Tag")
        git.create_tag(EMPTY_TAG, tree)
    except GitScopeError as exc:
        actions.error(str(exc))
        return None
    return EMPTY_TAG


def first_resolved(stages: Iterable[Stage]) -> str | None:
    for title, attempt in stages:
        with actions.group(title):
            revision = attempt()
        if revision:
            return revision
    return None


def branch_stages(
    ctx: TriggerContext,
    git: Git,
    runs: GitHubRuns | None = None,
    workflow_id: str | None = None,
) -> list[Stage]:
    return [
        ("Fetching Last Successful Workflow", lambda: last_successful_run(ctx, runs, workflow_id)),
        ("Checking Branch Deviation", lambda: branch_deviation(git, RevisionPair.for_branch(ctx))),
        ("Creating Empty Tag", lambda: empty_tree_tag(git)),
    ]


def pull_request_stages(ctx: TriggerContext, git: Git) -> list[Stage]:
    pair = RevisionPair(base=ctx.base_ref, split=ctx.head_ref)
    return [
        ("Checking Branch Deviation", lambda: branch_deviation(git, pair)),
        ("Creating Empty Tag", lambda: empty_tree_tag(git)),
    ]


def resolve_base(
    ctx: TriggerContext,
    git: Git,
    runs: GitHubRuns | None = None,
    workflow_id: str | None = None,
) -> str | None:
    """Pick the revision to diff against, or None when nothing applies."""
    if ctx.branch:
        return first_resolved(branch_stages(ctx, git, runs, workflow_id))
    if ctx.is_pull_request:
        return first_resolved(pull_request_stages(ctx, git))
    return None
