"""
Two-phase review orchestration.

The run is an explicit state machine:

    INIT ──ok──> HAVE_INITIAL ──no review──────> DONE (initial answer)
      │                │
      │ error          └──review ok──> DONE (review answer)
      v                └──review error──> FAILED (initial answer kept as fallback)
    FAILED
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from langfuse import observe

from app.entities.message import Conversation, ImageAttachment
from app.entities.review import Phase, ReviewOutcome, ReviewRequest, ReviewState
from app.services.ImageService.image_service import ImageProcessingError
from app.services.ImageService.image_service_interface import ImageServiceInterface
from app.services.InferenceService.inference_service import InferenceError
from app.services.InferenceService.inference_service_interface import (
    InferenceServiceInterface,
)
from app.services.MessageBuilder.message_builder import (
    EmptyPromptError,
    build_conversation,
)
from app.services.ReviewService.review_service_interface import (
    ReviewServiceInterface,
)


# Errors a run turns into a FAILED outcome; anything else propagates.
RUN_ERRORS: tuple[type[Exception], ...] = (
    EmptyPromptError,
    ImageProcessingError,
    InferenceError,
)


@dataclass(frozen=True)
class _InitialResult:
    answer: str
    image: ImageAttachment | None


class ReviewService(ReviewServiceInterface):
    def __init__(
        self,
        image_service: ImageServiceInterface,
        inference_service: InferenceServiceInterface,
        logger: logging.Logger,
        system_prompt: str | None = None,
    ) -> None:
        self.image_service = image_service
        self.inference_service = inference_service
        self.logger = logger
        self.system_prompt = system_prompt

    @observe()
    def run(self, request: ReviewRequest) -> ReviewOutcome:
        self.logger.debug("State %s", ReviewState.INIT.value)
        try:
            initial = self._run_initial(request)
        except RUN_ERRORS as error:
            return self._failed(Phase.INITIAL, error)

        self.logger.debug("State %s", ReviewState.HAVE_INITIAL.value)
        return self._after_initial(request, initial)

    def _run_initial(self, request: ReviewRequest) -> _InitialResult:
        # Prompt is validated before the image is read.
        if not request.prompt or not request.prompt.strip():
            raise EmptyPromptError()

        image: ImageAttachment | None = None
        if request.image_path:
            self.logger.info("Reading and encoding image: %s", request.image_path)
            image = self.image_service.encode(request.image_path)

        conversation = build_conversation(
            Phase.INITIAL,
            request.prompt,
            image=image,
            system_prompt=self.system_prompt,
        )
        answer = self._complete(conversation)
        return _InitialResult(answer=answer, image=image)

    def _after_initial(
        self, request: ReviewRequest, initial: _InitialResult
    ) -> ReviewOutcome:
        if not request.review:
            return self._done(output=initial.answer, initial_answer=initial.answer)

        self.logger.info("Building review request")
        try:
            conversation = build_conversation(
                Phase.REVIEW,
                request.prompt,
                image=initial.image,
                answer=initial.answer,
                system_prompt=self.system_prompt,
            )
            review_answer = self._complete(conversation)
        except RUN_ERRORS as error:
            return self._failed(Phase.REVIEW, error, initial_answer=initial.answer)

        return self._done(
            output=review_answer,
            initial_answer=initial.answer,
            review_answer=review_answer,
        )

    def _complete(self, conversation: Conversation) -> str:
        request = self.inference_service.new_request(conversation)
        return self.inference_service.complete(request).text

    def _done(self, **kwargs) -> ReviewOutcome:
        self.logger.debug("State %s", ReviewState.DONE.value)
        return ReviewOutcome(state=ReviewState.DONE, **kwargs)

    def _failed(
        self, phase: Phase, error: Exception, initial_answer: str | None = None
    ) -> ReviewOutcome:
        self.logger.info("%s phase failed: %s", phase.value.capitalize(), error)
        self.logger.debug("State %s", ReviewState.FAILED.value)
        return ReviewOutcome(
            state=ReviewState.FAILED,
            error=error,
            phase=phase,
            initial_answer=initial_answer,
        )
