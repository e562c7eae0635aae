"""Fix-chain (debug spiral) detection with pattern tagging.

A fix chain is a maximal run of consecutive fix commits on one component.
Runs of SPIRAL_THRESHOLD or more commits are spirals. Each chain is tagged
with the first matching category from PATTERNS, searched over the chain's
joined messages.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..math import round_int
from .models import Commit, sort_commits, whole_minutes_between

SPIRAL_THRESHOLD = 3

UNKNOWN_COMPONENT = "unknown"
OTHER_PATTERN = "OTHER"

# Evaluated top to bottom; the first match wins.
PATTERNS: tuple[tuple[str, re.Pattern], ...] = (
    ("VOLUME_CONFIG", re.compile(r"volume|mount|path|permission|readonly|pvc|storage", re.I)),
    ("SECRETS_AUTH", re.compile(r"secret|auth|oauth|token|credential|password|key", re.I)),
    ("API_MISMATCH", re.compile(r"api|version|field|spec|schema|crd|resource", re.I)),
    ("SSL_TLS", re.compile(r"ssl|tls|cert|fips|handshake|https", re.I)),
    ("IMAGE_REGISTRY", re.compile(r"image|pull|registry|docker|tag", re.I)),
    ("GITOPS_DRIFT", re.compile(r"drift|sync|argocd|reconcil|outof", re.I)),
)

_LEADING_FIX_RE = re.compile(r"^fix\s*:?\s*", re.I)


def component_of(commit: Commit) -> str:
    """Component label: explicit scope, else first word of 3+ chars."""
    if commit.scope:
        return commit.scope.lower()

    stripped = _LEADING_FIX_RE.sub("", commit.message, count=1)
    for word in stripped.split():
        if len(word) > 2:
            return word.lower()
    return UNKNOWN_COMPONENT


def detect_pattern(text: str) -> Optional[str]:
    for name, regex in PATTERNS:
        if regex.search(text):
            return name
    return None


@dataclass(frozen=True)
class FixChain:
    component: str
    commits: int
    duration: int  # whole minutes, first to last commit
    is_spiral: bool
    pattern: Optional[str]
    first_commit: datetime
    last_commit: datetime
    hashes: tuple[str, ...] = ()

    @classmethod
    def from_run(cls, run: list[Commit], component: str) -> FixChain:
        first, last = run[0].date, run[-1].date
        return cls(
            component=component,
            commits=len(run),
            duration=whole_minutes_between(first, last),
            is_spiral=len(run) >= SPIRAL_THRESHOLD,
            pattern=detect_pattern(" ".join(c.message for c in run)),
            first_commit=first,
            last_commit=last,
            hashes=tuple(c.hash for c in run),
        )


def detect_fix_chains(
    commits: Iterable[Commit], spiral_threshold: int = SPIRAL_THRESHOLD
) -> list[FixChain]:
    """Scan commits once, oldest first, and return runs of length >= threshold.

    A fix on the running component extends the run; a fix on another
    component closes the run and starts a new one; any non-fix commit closes
    the run and resets.
    """
    chains: list[FixChain] = []
    run: list[Commit] = []
    component: Optional[str] = None

    def flush() -> None:
        if component is not None and len(run) >= spiral_threshold:
            chains.append(FixChain.from_run(run, component))

    for commit in sort_commits(commits):
        if not commit.is_fix:
            flush()
            run, component = [], None
            continue

        commit_component = component_of(commit)
        if component is None or commit_component == component:
            run.append(commit)
            component = commit_component
        else:
            flush()
            run, component = [commit], commit_component

    flush()
    return chains


@dataclass
class PatternSummary:
    """Commit counts of fix chains grouped by pattern category."""

    categories: dict[str, int] = field(default_factory=dict)
    total: int = 0
    tracer_available: int = 0  # percent of chain commits with a known pattern

    def to_dict(self) -> dict:
        return {
            "categories": dict(self.categories),
            "total": self.total,
            "tracer_available": self.tracer_available,
        }


def calculate_pattern_summary(chains: Iterable[FixChain]) -> PatternSummary:
    summary = PatternSummary()
    tagged = 0

    for chain in chains:
        key = chain.pattern or OTHER_PATTERN
        summary.categories[key] = summary.categories.get(key, 0) + chain.commits
        summary.total += chain.commits
        if chain.pattern:
            tagged += chain.commits

    if summary.total > 0:
        summary.tracer_available = round_int(tagged / summary.total * 100)
    return summary
