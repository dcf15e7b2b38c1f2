"""Ownership-rule (CODEOWNERS-style) parsing and last-match-wins resolution.

Rule text follows the GitHub CODEOWNERS layout: one ``pattern owner...`` entry
per line, ``#`` comments, blank lines ignored. Resolution replays every rule
in file order and lets the last matching one win outright, so a later rule
fully replaces the owners of an earlier one rather than merging with them.
"""

from __future__ import annotations

import functools
import logging
import re
from dataclasses import dataclass

from revsuggest_core.utils.identity import is_bot_login

logger = logging.getLogger(__name__)

# Locations GitHub itself checks, in the order it checks them.
OWNERSHIP_FILE_PATHS = (
    ".github/CODEOWNERS",
    "CODEOWNERS",
    "docs/CODEOWNERS",
)

_INLINE_COMMENT_RE = re.compile(r"\s+#")


@dataclass(frozen=True)
class OwnershipRule:
    """One effective rule from the ownership file."""

    pattern: str  # as written, e.g. "/src/**" or "*.md"
    owners: tuple[str, ...]  # "@" stripped, bots removed, de-duplicated
    position: int  # ordinal among effective rules, 0-based
    line_number: int  # 1-based line in the source text


def _parse_owner(token: str) -> str:
    return token[1:] if token.startswith("@") else token


def parse_ownership_rules(text: str | None) -> list[OwnershipRule]:
    """Parse ownership rule text into ordered rules.

    Malformed lines (a pattern with no owners) are skipped, as are rules
    whose owners are all bots. ``None`` or empty text yields no rules.
    """
    rules: list[OwnershipRule] = []
    if not text:
        return rules

    for line_number, raw in enumerate(text.splitlines(), 1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        content = _INLINE_COMMENT_RE.split(line, maxsplit=1)[0].strip()
        parts = content.split()
        if len(parts) < 2:
            logger.debug("Skipping ownership line %d without owners: %r", line_number, raw)
            continue

        try:
            _compile(parts[0])
        except re.error as e:
            logger.debug("Skipping ownership line %d with invalid pattern (%s): %r", line_number, e, raw)
            continue

        owners: list[str] = []
        for token in parts[1:]:
            owner = _parse_owner(token)
            if owner and not is_bot_login(owner) and owner not in owners:
                owners.append(owner)
        if not owners:
            continue

        rules.append(
            OwnershipRule(
                pattern=parts[0],
                owners=tuple(owners),
                position=len(rules),
                line_number=line_number,
            )
        )

    return rules


def normalize_pattern(pattern: str) -> str:
    """Map an ownership pattern onto a repository-relative glob.

    - A leading "/" anchors the pattern to the repository root.
    - Anything else may match at any directory depth.
    - A trailing "/" means "everything under this directory".
    """
    if pattern.startswith("/"):
        normalized = pattern[1:]
    else:
        normalized = f"**/{pattern}"
    if normalized.endswith("/"):
        normalized += "**"
    return normalized


def _glob_to_regex(glob: str) -> str:
    out: list[str] = []
    i, n = 0, len(glob)
    while i < n:
        c = glob[i]
        if c == "*":
            j = i
            while j < n and glob[j] == "*":
                j += 1
            whole_segment = (i == 0 or glob[i - 1] == "/") and (j == n or glob[j] == "/")
            if j - i >= 2 and whole_segment:
                if j < n:
                    # "**/" also matches zero directories.
                    out.append("(?:.*/)?")
                    j += 1
                else:
                    out.append(".*")
            else:
                out.append("[^/]*")
            i = j
        elif c == "?":
            out.append("[^/]")
            i += 1
        elif c == "[":
            end = glob.find("]", i + 1)
            if end == -1:
                out.append(re.escape(c))
                i += 1
                continue
            body = glob[i + 1 : end].replace("\\", "\\\\").replace("[", "\\[")
            if body.startswith("!"):
                body = "^" + body[1:]
            out.append(f"[{body}]")
            i = end + 1
        else:
            out.append(re.escape(c))
            i += 1
    return "".join(out)


@functools.lru_cache(maxsize=1024)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(_glob_to_regex(normalize_pattern(pattern)))


def pattern_matches(pattern: str, file_path: str) -> bool:
    """Case-sensitive match of an ownership pattern against a repo path.

    Dotfiles are matched like any other file.
    """
    return _compile(pattern).fullmatch(file_path.lstrip("/")) is not None


def matching_rule(rules: list[OwnershipRule], file_path: str) -> OwnershipRule | None:
    """Return the last rule in file order whose pattern matches file_path."""
    winner: OwnershipRule | None = None
    for rule in rules:
        if pattern_matches(rule.pattern, file_path):
            winner = rule
    return winner


def resolve_owners(rules: list[OwnershipRule], file_path: str) -> tuple[str, ...]:
    """Return the owners of file_path, or an empty tuple if no rule matches."""
    rule = matching_rule(rules, file_path)
    return rule.owners if rule is not None else ()
