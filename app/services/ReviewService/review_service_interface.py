from abc import ABC, abstractmethod

from app.entities.review import ReviewOutcome, ReviewRequest


class ReviewServiceInterface(ABC):
    @abstractmethod
    def run(self, request: ReviewRequest) -> ReviewOutcome:
        """
        Run the initial phase and, when requested, the review phase.

        Failures of either phase are reported in the returned outcome rather
        than raised.
        """
