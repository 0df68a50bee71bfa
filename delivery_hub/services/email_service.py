"""
Email service for two-factor code delivery.

Sends through Resend by default, or AWS SES when EMAIL_PROVIDER=ses.
"""

import logging
from typing import Optional
import boto3
import resend
from resend.exceptions import ResendError
from botocore.exceptions import ClientError, BotoCoreError
from delivery_hub.core.config import settings

logger = logging.getLogger(__name__)

TWO_FACTOR_SUBJECT = "Your 2FA Verification Code"


class EmailService:
    """
    Mail dispatcher used by the two-factor flow.

    send_email never raises: provider errors are logged and reported as False
    so the caller can surface a dispatch failure.
    """

    def __init__(self, provider: Optional[str] = None):
        self.provider = provider or settings.EMAIL_PROVIDER
        self._ses_client = None

        if self.provider == "resend":
            resend.api_key = settings.RESEND_API_KEY

    @property
    def sender(self) -> str:
        return f"{settings.EMAIL_FROM_NAME} <{settings.EMAIL_FROM_ADDRESS}>"

    @property
    def ses_client(self):
        """Lazily create the SES client (uses IAM role when no keys are configured)."""
        if self._ses_client is None:
            session_kwargs = {'region_name': settings.AWS_REGION}
            if settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
                session_kwargs['aws_access_key_id'] = settings.AWS_ACCESS_KEY_ID
                session_kwargs['aws_secret_access_key'] = settings.AWS_SECRET_ACCESS_KEY
            self._ses_client = boto3.client('ses', **session_kwargs)
        return self._ses_client

    def send_email(self, to_email: str, subject: str, html_body: str) -> bool:
        """
        Send an HTML email.

        Args:
            to_email: Recipient email address
            subject: Subject line
            html_body: HTML content

        Returns:
            bool: True if the provider accepted the message, False otherwise
        """
        if self.provider == "ses":
            return self._send_with_ses(to_email, subject, html_body)
        return self._send_with_resend(to_email, subject, html_body)

    def _send_with_resend(self, to_email: str, subject: str, html_body: str) -> bool:
        try:
            response = resend.Emails.send({
                "from": self.sender,
                "to": [to_email],
                "subject": subject,
                "html": html_body,
            })
            logger.info(f"Email sent to {to_email} via Resend (id: {response.get('id')})")
            return True

        except ResendError as e:
            logger.error(f"Resend error sending to {to_email}: {e}")
            return False

        except Exception as e:
            logger.error(f"Unexpected error sending email via Resend: {str(e)}")
            return False

    def _send_with_ses(self, to_email: str, subject: str, html_body: str) -> bool:
        try:
            response = self.ses_client.send_email(
                Source=self.sender,
                Destination={'ToAddresses': [to_email]},
                Message={
                    'Subject': {'Data': subject, 'Charset': 'UTF-8'},
                    'Body': {'Html': {'Data': html_body, 'Charset': 'UTF-8'}}
                }
            )
            logger.info(f"Email sent to {to_email} via SES (MessageId: {response.get('MessageId')})")
            return True

        except ClientError as e:
            error_code = e.response['Error']['Code']
            error_message = e.response['Error']['Message']
            logger.error(f"AWS SES ClientError: {error_code} - {error_message}")
            return False

        except BotoCoreError as e:
            logger.error(f"AWS BotoCoreError: {str(e)}")
            return False

        except Exception as e:
            logger.error(f"Unexpected error sending email via SES: {str(e)}")
            return False


def build_two_factor_html(code: str, expires_in_minutes: int) -> str:
    """Render the two-factor code email body."""
    return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <h1 style="color: #333;">Two-Factor Authentication</h1>
    <p style="font-size: 16px; color: #666;">Your verification code is:</p>
    <div style="background-color: #f4f4f4; padding: 20px; text-align: center; margin: 20px 0;">
        <h2 style="color: #333; font-size: 32px; letter-spacing: 8px; margin: 0;">{code}</h2>
    </div>
    <p style="font-size: 14px; color: #999;">This code will expire in {expires_in_minutes} minutes.</p>
    <p style="font-size: 14px; color: #999;">If you didn't request this code, please ignore this email.</p>
</div>
"""


# Singleton instance
email_service = EmailService()
