"""
Email Service
Sends account and HR workflow emails using Twilio SendGrid
"""
from flask import current_app
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail, Email, To, Content


class EmailService:
    """Service for sending emails via Twilio SendGrid"""

    def _get_client(self):
        api_key = current_app.config.get('SENDGRID_API_KEY')
        if not api_key:
            return None
        return SendGridAPIClient(api_key)

    def _send(self, to_email, subject, text_content, html_content=None):
        """
        Send one email

        Returns:
            bool: True if SendGrid accepted the message, False otherwise
        """
        client = self._get_client()
        if not client:
            current_app.logger.info(f"Skipping email send to {to_email} (SendGrid not configured)")
            return False

        if html_content is None:
            html_content = '<p>' + text_content.replace('\n\n', '</p><p>').replace('\n', '<br>') + '</p>'

        try:
            message = Mail(
                from_email=Email(current_app.config.get('MAIL_DEFAULT_SENDER'),
                                 current_app.config.get('MAIL_SENDER_NAME')),
                to_emails=To(to_email),
                subject=subject,
                plain_text_content=Content("text/plain", text_content),
                html_content=Content("text/html", html_content)
            )

            response = client.send(message)

            if response.status_code in [200, 201, 202]:
                current_app.logger.info(f"Email '{subject}' sent to {to_email}")
                return True

            current_app.logger.warning(f"Failed to send email to {to_email}: Status {response.status_code}")
            return False

        except Exception as e:
            current_app.logger.error(f"Error sending email to {to_email}: {e}")
            return False

    def _frontend_url(self, path):
        base = (current_app.config.get('FRONTEND_URL') or '').rstrip('/')
        return f"{base}{path}"

    def send_verification_email(self, user, token):
        """Email the link that confirms a new account's address"""
        link = self._frontend_url(f"/auth/new-verification?token={token}")
        hours = current_app.config.get('VERIFICATION_TOKEN_HOURS', 24)
        text = (
            f"Hi {user.full_name},\n\n"
            f"Please confirm your email address to activate your HR account:\n{link}\n\n"
            f"This link expires in {hours} hours."
        )
        return self._send(user.email, "Confirm your email address", text)

    def send_password_reset_email(self, user, token):
        link = self._frontend_url(f"/auth/new-password?token={token}")
        text = (
            f"Hi {user.full_name},\n\n"
            f"A password reset was requested for your account. Choose a new password here:\n{link}\n\n"
            "If you did not request this, you can ignore this email."
        )
        return self._send(user.email, "Reset your password", text)

    def send_leave_decision_email(self, leave_request):
        """Tell the employee that their leave request was approved or rejected"""
        employee = leave_request.employee
        if not employee or not employee.email:
            return False

        text = (
            f"Hi {employee.first_name},\n\n"
            f"Your {leave_request.leave_type} leave request from {leave_request.start_date.isoformat()} "
            f"to {leave_request.end_date.isoformat()} ({leave_request.days} days) has been {leave_request.status}."
        )
        if leave_request.status == 'rejected' and leave_request.rejection_reason:
            text += f"\n\nReason: {leave_request.rejection_reason}"
        if leave_request.status == 'approved' and leave_request.approval_comments:
            text += f"\n\nComments: {leave_request.approval_comments}"

        return self._send(employee.email, f"Leave request {leave_request.status}", text)

    def send_concurrency_review_email(self, form):
        employee = form.employee
        if not employee or not employee.email:
            return False

        status_label = form.status.replace('_', ' ')
        text = (
            f"Hi {employee.first_name},\n\n"
            f"Your concurrency declaration #{form.id} has been reviewed: {status_label}."
        )
        if form.reviewer_notes:
            text += f"\n\nReviewer notes: {form.reviewer_notes}"

        return self._send(employee.email, f"Concurrency declaration {status_label}", text)


# Singleton instance
email_service = EmailService()
