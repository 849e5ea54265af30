import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from cookwho.utils.logger import get_logger
from cookwho.settings.config import settings

logger = get_logger("Email_Service")

def send_cook_alert(cook_email: str, item_name: str, cook_display_name: str | None = None) -> dict:
    """
    Tells a cook that one of their dishes was added to a basket.
    Never raises; returns {"success": bool, "message": str}.
    """
    if not settings.SMTP_USER or not settings.SMTP_PASSWORD:
        message = "SMTP credentials are not set; cook alert not sent."
        logger.error(message)
        return {"success": False, "message": message}

    try:
        msg = MIMEMultipart()
        msg["From"] = settings.FROM_EMAIL
        msg["To"] = cook_email
        msg["Subject"] = f'Cook Alert! Potential Sale for "{item_name}"'

        body = f"""
        <p>Hi {cook_display_name or 'Cook'},</p>
        <p>Great news! A customer has just added your dish "<strong>{item_name}</strong>" to their basket.</p>
        <p>Get ready, a sale might be coming through soon.</p>
        <p>Best,</p>
        <p>The CookWho Team</p>
        """

        msg.attach(MIMEText(body, "html"))

        server = smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT)
        server.starttls()
        server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
        server.sendmail(settings.FROM_EMAIL, cook_email, msg.as_string())
        server.quit()

        message = f"Successfully sent email alert to {cook_email} for item {item_name}."
        logger.info(message, extra={"email": cook_email})
        return {"success": True, "message": message}

    except (smtplib.SMTPException, OSError) as e:
        message = f"Failed to send email alert. Reason: {e}"
        logger.error(message, exc_info=e)
        return {"success": False, "message": message}
