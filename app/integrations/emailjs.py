"""
EmailJS REST client for templated transactional email.

Template variables are passed through untouched; the template itself lives in
the EmailJS dashboard and is addressed by id.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from app.config import settings

logger = logging.getLogger(__name__)


def send_email(recipient: str, variables: Dict[str, Any], template_id: Optional[str] = None) -> bool:
    """
    Send a templated email via EmailJS.
    Returns True on success, False on error.
    """
    if not settings.emailjs_enabled:
        logger.info("EmailJS disabled. Skipping email to %s", recipient)
        return True

    if not recipient:
        logger.warning("send_email called with empty recipient. Skipping.")
        return False

    payload: Dict[str, Any] = {
        "service_id": settings.emailjs_service_id,
        "template_id": template_id or settings.emailjs_template_id,
        "user_id": settings.emailjs_public_key,
        "template_params": {"to_email": recipient, **variables},
    }
    if settings.emailjs_private_key:
        payload["accessToken"] = settings.emailjs_private_key

    try:
        with httpx.Client(timeout=10) as client:
            resp = client.post(settings.emailjs_api_url, json=payload)
        if resp.status_code == 200:
            return True
        logger.error("send_email failed: %s %s", resp.status_code, resp.text)
        return False
    except Exception as e:
        logger.error("send_email exception: %s", e)
        return False
