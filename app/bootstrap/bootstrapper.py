from app.bootstrap.components import Components
from app.dependencies.components import get_components
from app.dependencies.services import get_review_service
from app.services.ReviewService.review_service_interface import (
    ReviewServiceInterface,
)


def bootstrap_review(
    env: str = "development",
    config_path: str = ".env",
    base_url: str | None = None,
    model_name: str | None = None,
) -> tuple[Components, ReviewServiceInterface]:
    """
    Build the review service and the components backing it.

    The caller owns the returned components and must close them. If the
    service cannot be built, the components are closed before re-raising.
    """
    components = get_components(env=env, config_path=config_path)
    try:
        review_service = get_review_service(
            components, base_url=base_url, model_name=model_name
        )
    except Exception:
        components.close()
        raise
    return components, review_service
