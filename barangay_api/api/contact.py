"""Contact Form Routes.

Accepts resident contact form submissions. The body reaching this handler has
already been sanitized and gated by ``RequestSanitizationMiddleware``;
the model adds format validation. Delivery (email / ticketing) is handled
outside this service.

Author: Barangay Platform Team
Version: 1.0.0
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status

from barangay_api.api.dependencies import get_request_ip
from barangay_api.models.requests import ContactFormRequest
from barangay_api.models.responses import ContactAcknowledgement
from barangay_api.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/v1/contact", tags=["Contact"])


@router.post("", response_model=ContactAcknowledgement, status_code=status.HTTP_202_ACCEPTED)
async def submit_contact_form(
    form: ContactFormRequest, client_ip: str = Depends(get_request_ip)
) -> ContactAcknowledgement:
    """Acknowledge a contact form submission."""
    logger.info(
        "Contact form received",
        category=form.category,
        ip=client_ip,
        subject_length=len(form.subject),
    )

    return ContactAcknowledgement(
        message="Your message has been received by the barangay office.",
        category=form.category,
        received_at=datetime.now(timezone.utc).isoformat(),
    )
