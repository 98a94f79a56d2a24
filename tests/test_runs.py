from datetime import datetime, timezone
from unittest.mock import patch

import pytest
import requests

from diffscope_ci.models import WorkflowRun
from diffscope_ci.runs import GitHubRuns, RunsLookupError, latest_run


class _Resp:
    def __init__(self, payload=None, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


def _item(run_id, sha, ts):
    return {
        "id": run_id,
        "conclusion": "success",
        "head_sha": sha,
        "head_commit": {"id": sha, "timestamp": ts},
    }


@patch("diffscope_ci.runs.requests.get")
def test_list_runs_parses_workflow_runs(mock_get):
    mock_get.return_value = _Resp(
        {
            "total_count": 3,
            "workflow_runs": [
                _item(11, "aaa", "2024-05-01T10:00:00Z"),
                {"id": 12, "conclusion": "success", "head_sha": "bbb", "head_commit": None},
                _item(13, "ccc", "2024-05-02T10:00:00+02:00"),
            ],
        }
    )
    client = GitHubRuns(token="t0ken", api_url="https://ghe.example.com/api/v3/")
    runs = client.list_runs("acme", "widgets", "feature", "ci.yml")

    assert [r.head_sha for r in runs] == ["aaa", "ccc"]
    assert runs[0].head_timestamp == datetime(2024, 5, 1, 10, tzinfo=timezone.utc)

    url = mock_get.call_args.args[0]
    kwargs = mock_get.call_args.kwargs
    assert url == "https://ghe.example.com/api/v3/repos/acme/widgets/actions/workflows/ci.yml/runs"
    assert kwargs["params"] == {"branch": "feature", "status": "success"}
    assert kwargs["headers"]["Authorization"] == "Bearer t0ken"


@patch("diffscope_ci.runs.requests.get")
def test_list_runs_http_error(mock_get):
    mock_get.return_value = _Resp({"message": "Not Found"}, status_code=404)
    with pytest.raises(RunsLookupError, match="404"):
        GitHubRuns(token="x").list_runs("acme", "widgets", "main", "missing.yml")


@patch("diffscope_ci.runs.requests.get")
def test_list_runs_connection_error(mock_get):
    mock_get.side_effect = requests.ConnectionError("unreachable")
    with pytest.raises(RunsLookupError):
        GitHubRuns(token="x").list_runs("acme", "widgets", "main", "ci.yml")


@patch("diffscope_ci.runs.requests.get")
def test_list_runs_unexpected_shape(mock_get):
    mock_get.return_value = _Resp({"runs": []})
    with pytest.raises(RunsLookupError, match="workflow_runs"):
        GitHubRuns(token="x").list_runs("acme", "widgets", "main", "ci.yml")


def test_latest_run_by_head_timestamp():
    runs = [
        WorkflowRun(1, "success", "a", datetime(2024, 1, 2, tzinfo=timezone.utc)),
        WorkflowRun(2, "success", "b", datetime(2024, 1, 3, tzinfo=timezone.utc)),
        WorkflowRun(3, "success", "c", datetime(2024, 1, 1, tzinfo=timezone.utc)),
    ]
    assert latest_run(runs).head_sha == "b"
    assert latest_run([]) is None
