from dataclasses import dataclass
from enum import Enum


class Phase(str, Enum):
    INITIAL = "initial"
    REVIEW = "review"


class ReviewState(str, Enum):
    INIT = "init"
    HAVE_INITIAL = "have_initial"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class ReviewRequest:
    """What the caller asked for: a prompt, an optional image and the review flag."""

    prompt: str
    image_path: str | None = None
    review: bool = False


@dataclass(frozen=True)
class ReviewOutcome:
    """
    Terminal result of a run.

    A DONE outcome carries `output`. A FAILED outcome carries `error` and the
    phase that failed; when the review phase is the one that failed,
    `initial_answer` still holds the phase-1 answer as a fallback.
    """

    state: ReviewState
    output: str | None = None
    initial_answer: str | None = None
    review_answer: str | None = None
    error: Exception | None = None
    phase: Phase | None = None

    @property
    def succeeded(self) -> bool:
        return self.state is ReviewState.DONE

    @property
    def fallback(self) -> str | None:
        """Phase-1 answer of a run whose review phase failed."""
        if self.state is ReviewState.FAILED and self.phase is Phase.REVIEW:
            return self.initial_answer
        return None
