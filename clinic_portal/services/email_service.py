"""
Email Service for account notifications
"""
import smtplib
import logging
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from flask import current_app

logger = logging.getLogger(__name__)


def _send(to_email, subject, text, html):
    """
    Send a multipart message through the configured SMTP server.

    Returns:
        bool: True if sent, False if email is not configured or sending failed
    """
    mail_server = current_app.config.get('MAIL_SERVER')
    mail_port = current_app.config.get('MAIL_PORT')
    mail_use_tls = current_app.config.get('MAIL_USE_TLS')
    mail_username = current_app.config.get('MAIL_USERNAME')
    mail_password = current_app.config.get('MAIL_PASSWORD')
    mail_sender = current_app.config.get('MAIL_DEFAULT_SENDER')

    if not mail_username or not mail_password:
        logger.warning("Email not configured. Skipping '%s' to %s", subject, to_email)
        return False

    msg = MIMEMultipart('alternative')
    msg['Subject'] = subject
    msg['From'] = mail_sender
    msg['To'] = to_email
    msg.attach(MIMEText(text, 'plain'))
    msg.attach(MIMEText(html, 'html'))

    try:
        with smtplib.SMTP(mail_server, mail_port) as server:
            if mail_use_tls:
                server.starttls()
            server.login(mail_username, mail_password)
            server.sendmail(mail_sender, [to_email], msg.as_string())
        logger.info("Email '%s' sent to %s", subject, to_email)
        return True
    except (smtplib.SMTPException, OSError) as e:
        logger.error("Failed to send email to %s: %s", to_email, e)
        return False


def send_signup_confirmation_email(email, full_name, redirect_url):
    """
    Welcome a newly registered patient and point them back to the portal.

    Args:
        email: Patient's email address
        full_name: Name entered at sign up
        redirect_url: Where the portal lives (FRONTEND_BASE_URL)
    """
    text = f"""
Hello {full_name},

Your patient account has been created.

You can now sign in to book appointments and see your prescriptions:
{redirect_url}

If you did not create this account, please contact the clinic.
    """

    html = f"""
<!DOCTYPE html>
<html>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
    <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
        <h2>Welcome, {full_name}!</h2>
        <p>Your patient account has been created.</p>
        <p>
            <a href="{redirect_url}" style="display: inline-block; background: #27ae60; color: white; padding: 12px 32px; text-decoration: none; border-radius: 5px;">Sign in</a>
        </p>
        <p style="font-size: 12px; color: #666;">Or copy this link: {redirect_url}</p>
        <p style="font-size: 12px; color: #666;">If you did not create this account, please contact the clinic.</p>
    </div>
</body>
</html>
    """

    return _send(email, 'Confirm your patient account', text, html)
