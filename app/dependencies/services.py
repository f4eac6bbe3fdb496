import httpx

from app.bootstrap.components import Components
from app.components.configuration.configuration import Configuration
from app.components.logger.logger import Logger
from app.services.ImageService.image_service import ImageService
from app.services.ImageService.image_service_interface import ImageServiceInterface
from app.services.InferenceService.inference_service import (
    DEFAULT_BASE_URL,
    InferenceService,
)
from app.services.InferenceService.inference_service_interface import (
    InferenceServiceInterface,
)
from app.services.ReviewService.review_service import ReviewService
from app.services.ReviewService.review_service_interface import (
    ReviewServiceInterface,
)


def get_image_service(components: Components) -> ImageServiceInterface:
    return ImageService(
        logger=components.get_component(Logger).get_logger("ImageService"),
    )


def get_inference_service(
    components: Components,
    base_url: str | None = None,
    model_name: str | None = None,
) -> InferenceServiceInterface:
    """
    Create the chat-completion client.

    Explicit arguments (usually from the command line) win over the
    LLM_BASE_URL and MODEL_NAME settings.
    """
    configuration = components.get_component(Configuration)

    base_url = base_url or configuration.get_configuration(
        "LLM_BASE_URL", str, default=DEFAULT_BASE_URL
    )
    model_name = model_name or configuration.get_configuration(
        "MODEL_NAME", str, default=None
    )

    temp_val = configuration.get_configuration("LLM_TEMPERATURE", float, default=0.7)
    temperature = float(temp_val if temp_val is not None else 0.7)

    max_tokens = configuration.get_configuration("LLM_MAX_TOKENS", int, default=None)

    http_client = components.get_component(httpx.Client)

    return InferenceService(
        base_url=base_url,
        model=model_name,
        logger=components.get_component(Logger).get_logger("InferenceService"),
        timeout=http_client.timeout.read,
        temperature=temperature,
        max_tokens=max_tokens,
        http_client=http_client,
    )


def get_review_service(
    components: Components,
    base_url: str | None = None,
    model_name: str | None = None,
) -> ReviewServiceInterface:
    configuration = components.get_component(Configuration)
    system_prompt = configuration.get_configuration("SYSTEM_PROMPT", str, default=None)

    return ReviewService(
        image_service=get_image_service(components),
        inference_service=get_inference_service(
            components, base_url=base_url, model_name=model_name
        ),
        logger=components.get_component(Logger).get_logger("ReviewService"),
        system_prompt=system_prompt,
    )
