from __future__ import annotations

import base64
import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from .config import REQUEST_TIMEOUT_SECONDS, RESEND_API_URL
from .log import log_success
from .models import ImageAttachment, SendResult

logger = logging.getLogger(__name__)


class MailError(Exception):
    """Raised when the mailer cannot be set up."""


def build_attachments(attachments: Sequence[ImageAttachment]) -> List[Dict[str, str]]:
    payload: List[Dict[str, str]] = []
    for attachment in attachments:
        try:
            raw = attachment.path.read_bytes()
        except OSError as exc:
            logger.error("Skipping attachment %s: %s", attachment.path, exc)
            continue
        payload.append(
            {
                "content": base64.b64encode(raw).decode("ascii"),
                "filename": attachment.filename,
                "type": attachment.mime_type,
                "disposition": "inline",
                "content_id": attachment.content_id,
            }
        )
    return payload


class ResendMailer:
    provider = "resend"

    def __init__(
        self,
        api_key: str,
        sender_email: str,
        *,
        base_url: str = RESEND_API_URL,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ):
        if not api_key or not api_key.strip():
            raise MailError("Resend API key must be provided.")
        if not api_key.isascii():
            raise MailError("Resend API key must contain only ASCII characters.")
        if not sender_email or not sender_email.strip():
            raise MailError("Sender email must be provided.")
        self._api_key = api_key.strip()
        self._sender_email = sender_email.strip()
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def build_payload(
        self,
        recipient: str,
        subject: str,
        html_body: str,
        attachments: Optional[List[Dict[str, str]]] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "from": self._sender_email,
            "to": [recipient],
            "subject": subject,
            "html": html_body,
        }
        if attachments:
            payload["attachments"] = attachments
        return payload

    def send(
        self,
        recipient: str,
        subject: str,
        html_body: str,
        attachments: Optional[List[Dict[str, str]]] = None,
    ) -> SendResult:
        """POST one message; failures are reported in the result, never raised."""
        payload = self.build_payload(recipient, subject, html_body, attachments)
        headers = {"Authorization": f"Bearer {self._api_key}"}
        try:
            with httpx.Client(
                base_url=self._base_url,
                headers=headers,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = client.post("/emails", json=payload)
        except httpx.HTTPError as exc:
            logger.error("Failed to send email to %s: %s", recipient, exc)
            return SendResult(recipient=recipient, success=False, detail=f"request failed: {exc}")

        if response.is_success:
            message_id = _message_id(response)
            log_success(logger, "Email sent to %s (status=%s id=%s)", recipient, response.status_code, message_id)
            return SendResult(recipient=recipient, success=True, detail=message_id or str(response.status_code))

        logger.error(
            "Failed to send email to %s. status=%s response=%s",
            recipient,
            response.status_code,
            response.text,
        )
        return SendResult(
            recipient=recipient,
            success=False,
            detail=f"status={response.status_code} body={response.text}",
        )

    def send_all(
        self,
        recipients: Sequence[str],
        subject: str,
        html_body: str,
        attachments: Sequence[ImageAttachment] = (),
    ) -> List[SendResult]:
        encoded = build_attachments(attachments)
        if encoded:
            logger.info("Attaching %s inline image(s)", len(encoded))
        results: List[SendResult] = []
        for idx, recipient in enumerate(recipients, start=1):
            logger.info("Sending to recipient %s/%s: %s", idx, len(recipients), recipient)
            results.append(self.send(recipient, subject, html_body, encoded))
        _log_delivery_counts(results)
        return results


def _message_id(response: httpx.Response) -> str | None:
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict) and data.get("id"):
        return str(data["id"])
    return None


def _log_delivery_counts(results: List[SendResult]) -> None:
    success = len([r for r in results if r.success])
    logger.info(
        "Delivery completed. Total=%s Success=%s Failure=%s",
        len(results),
        success,
        len(results) - success,
    )
