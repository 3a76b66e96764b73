"""Identity provider webhook endpoint"""

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError as PydanticValidationError

from ..config import settings
from ..exceptions import MalformedEventError, WebhookNotConfiguredError, WebhookVerificationError
from ..schemas.identity import IdentityEvent
from ..services.identity_sync import IdentitySyncService
from ..utils.dependencies import get_identity_sync_service, get_raw_body
from ..utils.logging import get_logger
from ..utils.webhook import WebhookVerifier

logger = get_logger(__name__)

router = APIRouter()


def get_webhook_verifier() -> WebhookVerifier:
    """Verifier built from the configured signing secret"""

    if not settings.IDENTITY_WEBHOOK_SECRET:
        logger.error("Identity webhook received but no signing secret is configured")
        raise WebhookNotConfiguredError()

    return WebhookVerifier(settings.IDENTITY_WEBHOOK_SECRET)


@router.post("/identity")
def receive_identity_event(
    request: Request,
    body: bytes = Depends(get_raw_body),
    verifier: WebhookVerifier = Depends(get_webhook_verifier),
    service: IdentitySyncService = Depends(get_identity_sync_service),
):
    """
    Apply a user lifecycle event from the identity provider

    The raw body is verified against the svix-* signature headers before
    it is parsed. Events of types other than user.created, user.updated and
    user.deleted are acknowledged and ignored.
    """
    try:
        payload = verifier.verify(body, request.headers)
    except (MalformedEventError, WebhookVerificationError) as e:
        logger.warning("Rejected identity webhook", error=str(e), svix_id=request.headers.get("svix-id"))
        raise

    try:
        event = IdentityEvent.model_validate(payload)
    except PydanticValidationError as e:
        logger.warning("Unparseable identity webhook", error=str(e))
        raise MalformedEventError("Invalid event payload")

    outcome = service.handle_event(event)

    logger.info("Identity webhook processed", event_type=event.type, outcome=outcome.value)

    return {"success": True}
