"""Data models for inline-snippets runs."""

from dataclasses import dataclass, field
from enum import Enum, auto

from .exceptions import FetchError
from .locator import MatchRecord
from .nodes import Code


class TransformState(Enum):
    """Phases of a transform run.

    Attributes:
        SCANNING: Locating marked links and validating their references.
        DISPATCHING: Starting one fetch pipeline per match.
        SETTLING: Waiting for every pipeline to finish.
        DONE: Replacements applied, tree handed back.
    """

    SCANNING = auto()
    DISPATCHING = auto()
    SETTLING = auto()
    DONE = auto()


@dataclass
class SnippetOutcome:
    """Terminal result of one match's pipeline.

    Exactly one of `code` and `error` is set.

    Attributes:
        match: The match the pipeline worked on.
        code: Replacement node on success.
        error: Fetch failure otherwise.
    """

    match: MatchRecord
    code: Code | None = None
    error: FetchError | None = None


@dataclass
class TransformContext:
    """Encapsulate progress while inlining snippets into one tree.

    Attributes:
        state: Current phase.
        matches: Matches found during scanning.
        replaced: Number of links replaced by code blocks.
        failed: Errors of pipelines whose fetch failed, in match order.
    """

    state: TransformState = TransformState.SCANNING
    matches: list[MatchRecord] = field(default_factory=list)
    replaced: int = 0
    failed: list[FetchError] = field(default_factory=list)
