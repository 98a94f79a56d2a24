from __future__ import annotations

from pathlib import Path
import subprocess

from diffscope_ci import actions


class GitScopeError(RuntimeError):
    pass


class Git:
    """Thin wrapper over the git executable for one checkout."""

    def __init__(self, root: Path):
        self.root = root

    def _run(self, *args: str, stdin: str | None = None) -> str:
        cmd = ["git", *args]
        try:
            proc = subprocess.run(
                cmd,
                cwd=str(self.root),
                input=stdin,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as exc:
            raise GitScopeError("git is not installed or not available in PATH") from exc

        if proc.returncode != 0:
            stderr = (proc.stderr or "").strip()
            raise GitScopeError(
                f"git {' '.join(args)} failed with exit code {proc.returncode}. {stderr or 'No error output.'}"
            )
        return proc.stdout or ""

    def is_shallow(self) -> bool:
        return self._run("rev-parse", "--is-shallow-repository").strip() == "true"

    def unshallow(self) -> None:
        self._run("fetch", "--unshallow")

    def has_ref(self, name: str) -> bool:
        try:
            self._run("rev-parse", "--verify", "--quiet", f"refs/heads/{name}")
        except GitScopeError:
            return False
        return True

    def create_branch(self, name: str, start_point: str) -> None:
        self._run("branch", name, start_point)

    def merge_base(self, a: str, b: str) -> str:
        return self._run("merge-base", a, b).strip()

    def hash_empty_tree(self) -> str:
        return self._run("hash-object", "-w", "-t", "tree", "--stdin", stdin="").strip()

    def create_tag(self, name: str, target: str) -> None:
        self._run("tag", "--force", name, target)

    def diff_names(self, a: str, b: str) -> str:
        return self._run("diff", f"{a}..{b}", "--name-only")


def ensure_full_history(git: Git) -> None:
    """Unshallow the clone once if needed; merge-base and diffs need full history."""
    if git.is_shallow():
        actions.info("Repository is shallow, fetching.")
        git.unshallow()
    else:
        actions.info("Repository isn't shallow.")


def diff_paths(git: Git, base: str, current: str) -> list[str]:
    out: list[str] = []
    for line in git.diff_names(base, current).splitlines():
        p = line.strip()
        if p:
            out.append(p)
    return out
