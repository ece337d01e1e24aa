"""Decide from ``git status`` output whether a repository may be fast-forwarded.

Two output formats are understood. ``git status --porcelain=v2 --branch`` is
what the reconciler asks for. The human-readable format is matched against a
fixed pattern so status text captured from older tooling still works.
"""
import re
from typing import Dict, Optional

PORCELAIN_HEADER = "# branch."
ENTRY_PREFIXES = ("1 ", "2 ", "u ", "? ")

_HUMAN_TEMPLATE = (
    r"On branch {branch}\n"
    r"(?:Your branch is behind '{upstream}' by \d+ commits?, and can be fast-forwarded\."
    r"|Your branch is up[- ]to[- ]date with '{upstream}'\.)\n"
    r"(?:  \(use \"git pull\" to update your local branch\)\n)?"
    r"\n?"
    r"nothing to commit, working tree clean\n?"
)


def human_status_pattern(branch: str = "master", remote: str = "origin") -> "re.Pattern[str]":
    return re.compile(_HUMAN_TEMPLATE.format(
        branch=re.escape(branch),
        upstream=re.escape(f"{remote}/{branch}"),
    ))


def is_porcelain_v2(status_output: str) -> bool:
    return any(line.startswith(PORCELAIN_HEADER) for line in status_output.splitlines())


def parse_porcelain_v2(status_output: str) -> Dict[str, Optional[str]]:
    info: Dict[str, Optional[str]] = {"head": None, "upstream": None, "ab": None, "dirty": None}
    for line in status_output.splitlines():
        if line.startswith("# branch.head "):
            info["head"] = line[len("# branch.head "):]
        elif line.startswith("# branch.upstream "):
            info["upstream"] = line[len("# branch.upstream "):]
        elif line.startswith("# branch.ab "):
            info["ab"] = line[len("# branch.ab "):]
        elif line.startswith(ENTRY_PREFIXES):
            info["dirty"] = line
    return info


def _porcelain_can_fast_forward(status_output: str, branch: str, remote: str) -> bool:
    info = parse_porcelain_v2(status_output)
    if info["dirty"] is not None:
        return False
    if info["head"] != branch or info["upstream"] != f"{remote}/{branch}":
        return False
    if info["ab"] is None:
        return False
    parts = info["ab"].split()
    if len(parts) != 2 or not parts[0].startswith("+") or not parts[1].startswith("-"):
        return False
    try:
        ahead = int(parts[0][1:])
        int(parts[1][1:])
    except ValueError:
        return False
    return ahead == 0


def can_fast_forward(status_output: str, branch: str = "master", remote: str = "origin") -> bool:
    """True only for a clean work tree on ``branch`` that is level with or strictly behind its upstream."""
    if is_porcelain_v2(status_output):
        return _porcelain_can_fast_forward(status_output, branch, remote)
    return human_status_pattern(branch, remote).fullmatch(status_output) is not None
