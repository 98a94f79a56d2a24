from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import requests

from diffscope_ci.models import WorkflowRun

DEFAULT_API_URL = "https://api.github.com"


class RunsLookupError(RuntimeError):
    pass


def _parse_timestamp(value: str) -> datetime:
    # GitHub sends ISO 8601 with a trailing Z.
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_run(item: dict[str, Any]) -> WorkflowRun | None:
    head = item.get("head_commit")
    if not isinstance(head, dict) or not head.get("timestamp"):
        return None
    sha = head.get("id") or item.get("head_sha")
    if not sha:
        return None
    return WorkflowRun(
        id=int(item.get("id") or 0),
        conclusion=item.get("conclusion"),
        head_sha=str(sha),
        head_timestamp=_parse_timestamp(str(head["timestamp"])),
    )


def latest_run(runs: list[WorkflowRun]) -> WorkflowRun | None:
    """Newest run by head-commit timestamp; ties keep the first one seen."""
    ordered = sorted(runs, key=lambda r: r.head_timestamp, reverse=True)
    return ordered[0] if ordered else None


@dataclass
class GitHubRuns:
    token: str
    api_url: str = DEFAULT_API_URL
    timeout_seconds: int = 25

    def _runs_url(self, owner: str, repo: str, workflow_id: str) -> str:
        base = self.api_url.rstrip("/")
        return f"{base}/repos/{owner}/{repo}/actions/workflows/{workflow_id}/runs"

    def list_runs(
        self,
        owner: str,
        repo: str,
        branch: str,
        workflow_id: str,
        status: str = "success",
    ) -> list[WorkflowRun]:
        try:
            resp = requests.get(
                self._runs_url(owner, repo, workflow_id),
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Accept": "application/vnd.github+json",
                },
                params={"branch": branch, "status": status},
                timeout=self.timeout_seconds,
            )
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise RunsLookupError(f"Failed to list runs of workflow '{workflow_id}': {exc}") from exc

        items = data.get("workflow_runs") if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise RunsLookupError("Unexpected workflow runs response: missing 'workflow_runs' list")

        out: list[WorkflowRun] = []
        for item in items:
            if not isinstance(item, dict):
                continue
            try:
                run = _parse_run(item)
            except ValueError as exc:
                raise RunsLookupError(f"Invalid workflow run {item.get('id')}: {exc}") from exc
            if run is not None:
                out.append(run)
        return out
