from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping
import json
import os

import yaml

from diffscope_ci.filters import parse_filter_patterns
from diffscope_ci.models import TriggerContext


def _get(data: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def load_event_payload(path: str | None) -> dict[str, Any]:
    if not path:
        return {}

    event_path = Path(path)
    if not event_path.exists():
        raise FileNotFoundError(f"Event payload not found: {path}")

    try:
        data = json.loads(event_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid event payload JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Event payload in {path} must be a JSON object")
    return data


def load_trigger_context(environ: Mapping[str, str] | None = None) -> TriggerContext:
    """Snapshot the triggering event from the GitHub Actions environment."""
    env = os.environ if environ is None else environ
    payload = load_event_payload(env.get("GITHUB_EVENT_PATH"))

    repository = _get(payload, "repository", "full_name") or env.get("GITHUB_REPOSITORY") or None
    default_branch = (
        _get(payload, "repository", "master_branch")
        or _get(payload, "repository", "default_branch")
        or None
    )

    return TriggerContext(
        event_name=env.get("GITHUB_EVENT_NAME", ""),
        ref=env.get("GITHUB_REF", ""),
        after=payload.get("after") or None,
        base_ref=env.get("GITHUB_BASE_REF") or _get(payload, "pull_request", "base", "ref") or None,
        head_ref=env.get("GITHUB_HEAD_REF") or _get(payload, "pull_request", "head", "ref") or None,
        head_sha=_get(payload, "pull_request", "head", "sha") or None,
        default_branch=default_branch,
        repository=repository,
    )


def load_filter_file(path: str | None) -> list[str]:
    if not path:
        return []

    filter_path = Path(path)
    if not filter_path.exists():
        raise FileNotFoundError(f"Filter file not found: {path}")

    try:
        data = yaml.safe_load(filter_path.read_text()) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid filter file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Filter file {path} must be a mapping with a 'filter' key")

    patterns = data.get("filter") or []
    if isinstance(patterns, str):
        return parse_filter_patterns(patterns)
    if not isinstance(patterns, list):
        raise ValueError(f"'filter' in {path} must be a list of glob patterns")
    return [str(p).strip() for p in patterns if p is not None and str(p).strip()]


def load_filters(raw: str | None, filter_file: str | None = None) -> list[str]:
    return parse_filter_patterns(raw) + load_filter_file(filter_file)
