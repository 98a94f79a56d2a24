from __future__ import annotations

import fnmatch


def parse_filter_patterns(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [line.strip() for line in raw.splitlines() if line.strip()]


def apply_filters(paths: list[str], patterns: list[str]) -> list[str]:
    """Keep paths matching any pattern.

    Matches are grouped by pattern, in pattern order, so a path hit by two
    patterns lands where its first pattern's group puts it.
    """
    if not patterns:
        return paths

    matched: list[str] = []
    for pattern in patterns:
        matched.extend(p for p in paths if fnmatch.fnmatch(p, pattern))

    out: list[str] = []
    seen: set[str] = set()
    for path in matched:
        p = path.strip()
        if not p or p in seen:
            continue
        seen.add(p)
        out.append(p)
    return out
