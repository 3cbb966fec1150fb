"""Patient notification sender.

Records every notification as a Notification row and, when the patient has a
phone number, also texts it through Twilio. Delivery is best effort:
send() never raises, it logs and reports False instead.

Twilio credentials come from the environment:
  - TWILIO_ACCOUNT_SID
  - TWILIO_AUTH_TOKEN
  - TWILIO_FROM_NUMBER
If they are not set, SMS runs in dry-run mode (logged, not sent).
"""

import logging
import os
import re
from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Session
from twilio.rest import Client

from app.models.notification import Notification
from app.models.patient import Patient
from app.utils.messages import notification_content

logger = logging.getLogger(__name__)

SMS_DEFAULT_COUNTRY = os.getenv("SMS_DEFAULT_COUNTRY", "966")


def format_e164(phone: str, default_country: str = SMS_DEFAULT_COUNTRY) -> str:
    """
    Normalize a phone number to E.164 format.

    Accepts:
      - +966501234567  (already E.164)
      - 966501234567   (missing +)
      - 0501234567     (local, leading trunk zero)
      - 050 123 4567 / 050-123-4567

    Raises:
      - ValueError if phone can't be parsed
    """
    if not phone or not phone.strip():
        raise ValueError("Phone number is empty")

    digits = re.sub(r"[^\d]", "", phone)

    if phone.strip().startswith("+") and len(digits) >= 8:
        return f"+{digits}"
    elif digits.startswith(default_country) and len(digits) >= len(default_country) + 8:
        return f"+{digits}"
    elif digits.startswith("0") and len(digits) >= 9:
        return f"+{default_country}{digits[1:]}"
    else:
        raise ValueError(f"Cannot parse phone number: '{phone}'. Expected local or E.164 format.")


def validate_e164(phone: str) -> bool:
    """Check if a phone number is valid E.164 format."""
    return bool(re.match(r"^\+[1-9]\d{6,14}$", phone))


class SmsGateway:
    """
    Wrapper around the Twilio REST API for sending SMS.

    Operates in dry-run mode when credentials are not configured.
    """

    def __init__(self):
        self.account_sid = os.getenv("TWILIO_ACCOUNT_SID", "")
        self.auth_token = os.getenv("TWILIO_AUTH_TOKEN", "")
        self.from_number = os.getenv("TWILIO_FROM_NUMBER", "")
        self.client: Optional[Client] = None
        self.dry_run = True

        if self.account_sid and self.auth_token and self.from_number:
            self.client = Client(self.account_sid, self.auth_token)
            self.dry_run = False
            logger.info("Twilio client initialized successfully.")
        else:
            logger.warning(
                "Twilio credentials not configured. SMS running in dry-run mode. "
                "Set TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN, TWILIO_FROM_NUMBER."
            )

    def send_sms(self, to: str, body: str) -> dict:
        """
        Send a single SMS message.

        Returns:
            dict with keys: sid, status, error
        """
        if not validate_e164(to):
            return {"sid": None, "status": "failed", "error": f"Invalid phone number format: {to}"}

        # Twilio max is 1600 chars
        if len(body) > 1600:
            body = body[:1597] + "..."

        if self.dry_run:
            logger.info(f"[DRY RUN] SMS to {to}: {body[:80]}...")
            return {
                "sid": f"DRY_RUN_{datetime.now(timezone.utc).isoformat()}",
                "status": "dry_run",
                "error": None,
            }

        try:
            message = self.client.messages.create(body=body, from_=self.from_number, to=to)
            logger.info(f"SMS sent to {to}: SID={message.sid}, status={message.status}")
            return {"sid": message.sid, "status": message.status, "error": None}
        except Exception as e:
            logger.error(f"Failed to send SMS to {to}: {e}")
            return {"sid": None, "status": "failed", "error": str(e)}

    @property
    def is_configured(self) -> bool:
        return not self.dry_run


class NotificationService:
    """Default notification sender used by reconciliation."""

    def __init__(self, sms: Optional[SmsGateway] = None):
        self._sms = sms

    @property
    def sms(self) -> SmsGateway:
        if self._sms is None:
            self._sms = SmsGateway()
        return self._sms

    def send(
        self,
        session: Session,
        recipient: Patient,
        appointment_details: dict,
        kind: str,
        language: str,
    ) -> bool:
        """Record and deliver one notification. Returns False on failure, never raises."""
        try:
            title, body = notification_content(kind, language, appointment_details)
            notification = Notification(
                recipient_patient_id=recipient.id,
                appointment_id=appointment_details.get("appointment_id"),
                kind=kind,
                language=language,
                title=title,
                message=body,
            )

            if recipient.phone:
                notification.delivery_method = "sms"
                try:
                    result = self.sms.send_sms(format_e164(recipient.phone), f"{title}\n{body}")
                except ValueError as e:
                    result = {"status": "failed", "error": str(e)}
                notification.delivery_status = result["status"]
                notification.error_message = result.get("error")
                if result["status"] == "failed":
                    logger.warning(
                        f"SMS to patient {recipient.id} failed ({result.get('error')}); kept in-app notification"
                    )
                    notification.delivery_method = "in_app"
                    notification.delivery_status = "pending"

            session.add(notification)
            session.commit()
            return True
        except Exception as e:
            session.rollback()
            logger.error(f"Failed to notify patient {getattr(recipient, 'id', None)} ({kind}): {e}")
            return False


# Singleton instance
_notification_service: Optional[NotificationService] = None


def get_notification_service() -> NotificationService:
    """Get or create the singleton NotificationService instance."""
    global _notification_service
    if _notification_service is None:
        _notification_service = NotificationService()
    return _notification_service
