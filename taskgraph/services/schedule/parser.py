"""Dependency rule parser.

Turns raw multi-line text into ``(source, target)`` pairs, where each pair
means "source must execute before target"::

    # build steps
    Fetch -> Compile
    Compile -> Test

Parsing is permissive: malformed lines are skipped, never reported as
errors. Whether the resulting set of tasks can be scheduled is left
entirely to :class:`~taskgraph.services.schedule.graph.DependencyGraph`.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from taskgraph.core.logging import get_logger

logger = get_logger(__name__)

ARROW = "->"
COMMENT_PREFIX = "#"
FORBIDDEN_NAME_CHARS = frozenset(' ";')

_LINE_BREAK = re.compile(r"\r\n|\r|\n")

RulePair = tuple[str, str]

# Reasons reported for skipped lines
NO_ARROW = "no arrow"
SEGMENT_COUNT = "segment count"
FORBIDDEN_CHARACTER = "forbidden character"


def is_valid_task_name(name: str) -> bool:
    """Check that a trimmed segment can be used as a task name.

    Names must be non-empty and free of spaces, double quotes and
    semicolons. Anything else is accepted.
    """
    return bool(name) and FORBIDDEN_NAME_CHARS.isdisjoint(name)


def _split_rule(clean: str) -> RulePair | str:
    """Split a trimmed, non-comment line into a pair or a skip reason."""
    if ARROW not in clean:
        return NO_ARROW

    # Every arrow splits; zero-length pieces between adjacent arrows vanish.
    segments = [segment for segment in clean.split(ARROW) if segment]
    if len(segments) != 2:
        return SEGMENT_COUNT

    source, target = segments[0].strip(), segments[1].strip()
    if not (is_valid_task_name(source) and is_valid_task_name(target)):
        return FORBIDDEN_CHARACTER
    return source, target


def parse_line(line: str) -> RulePair | None:
    """Parse a single rule line.

    Returns:
        The ``(source, target)`` pair, or None when the line is blank, a
        comment, or not a well-formed ``Name -> Name`` rule.
    """
    clean = line.strip()
    if not clean or clean.startswith(COMMENT_PREFIX):
        return None
    result = _split_rule(clean)
    return result if isinstance(result, tuple) else None


def iter_rules(raw_text: str) -> Iterator[RulePair]:
    """Lazily yield rule pairs from raw text in input order.

    Malformed lines are logged at DEBUG with their 1-based line number and
    the reason they were skipped.
    """
    for line_no, line in enumerate(_LINE_BREAK.split(raw_text), start=1):
        clean = line.strip()
        if not clean or clean.startswith(COMMENT_PREFIX):
            continue
        result = _split_rule(clean)
        if isinstance(result, str):
            logger.debug(
                "Skipping malformed rule line",
                extra={"context": {"line_no": line_no, "line": clean, "reason": result}},
            )
            continue
        yield result


class RuleParser:
    """Convert raw rule text into an ordered list of dependency pairs.

    Duplicate pairs and self-dependencies (``A -> A``) are passed through
    unchanged; the graph turns the latter into a reportable cycle.

    Example:
        >>> RuleParser().parse("A -> B\\n# comment\\n\\nC->D")
        [('A', 'B'), ('C', 'D')]
    """

    def parse(self, raw_text: str) -> list[RulePair]:
        pairs = list(iter_rules(raw_text))
        logger.info(
            "Parsed dependency rules",
            extra={"context": {"rules": len(pairs), "chars": len(raw_text)}},
        )
        return pairs


def parse_rules(raw_text: str) -> list[RulePair]:
    """Module-level shortcut for ``RuleParser().parse``."""
    return RuleParser().parse(raw_text)


__all__ = [
    "FORBIDDEN_CHARACTER",
    "NO_ARROW",
    "RuleParser",
    "RulePair",
    "SEGMENT_COUNT",
    "is_valid_task_name",
    "iter_rules",
    "parse_line",
    "parse_rules",
]
