"""Best-effort email notifications to the store administrator."""

import smtplib
import socket
from email.message import EmailMessage
from html import escape
from typing import Any, Dict, Optional

import structlog

import settings
from errors import NotificationFailure

logger = structlog.get_logger(__name__)


class Mailer:
    def __init__(
        self,
        host: Optional[str],
        port: int = 587,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_ssl: bool = False,
        sender: Optional[str] = None,
        recipient: Optional[str] = None,
        timeout: float = 10.0,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_ssl = use_ssl
        self.sender = sender or f"no-reply@{socket.gethostname()}"
        self.recipient = recipient
        self.timeout = timeout

    @classmethod
    def from_settings(cls) -> "Mailer":
        return cls(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.SMTP_USER,
            password=settings.SMTP_PASS,
            use_ssl=settings.SMTP_SECURE,
            sender=settings.FROM_EMAIL,
            recipient=settings.ADMIN_NOTIFICATION_EMAIL,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.host and self.recipient)

    def send(self, subject: str, html: str) -> None:
        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = self.sender
        message["To"] = self.recipient
        message.set_content("This message requires an HTML-capable mail client.")
        message.add_alternative(html, subtype="html")

        smtp_class = smtplib.SMTP_SSL if self.use_ssl else smtplib.SMTP
        try:
            with smtp_class(self.host, self.port, timeout=self.timeout) as smtp:
                if not self.use_ssl:
                    smtp.ehlo()
                    if smtp.has_extn("starttls"):
                        smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password or "")
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationFailure(f"SMTP delivery failed: {e}")

    def _deliver(self, kind: str, order: Dict[str, Any], subject: str, html: str) -> bool:
        if not self.enabled:
            return False
        try:
            self.send(subject, html)
        except NotificationFailure as e:
            logger.warning("admin_notification_failed", kind=kind, order_id=order.get("id"), error=e.message)
            return False
        logger.info("admin_notified", kind=kind, order_id=order.get("id"))
        return True

    def notify_new_order(self, order: Dict[str, Any]) -> bool:
        items = "".join(
            f"<li>{line['qty']}&times; {escape(line['title'])} @ {line['unit_price']}</li>"
            for line in order.get("items", [])
        )
        html = (
            f"<p>New order received (ID: {order['id']})</p>"
            f"<p><strong>Total:</strong> {escape(order['total'])}</p>"
            f"<p><strong>Customer:</strong> {escape(order['customer_name'])} "
            f"({escape(order['customer_phone'])})</p>"
            f"<p><strong>Address:</strong> {escape(order['customer_address'])}</p>"
            f"<p><strong>Items:</strong></p><ul>{items}</ul>"
        )
        return self._deliver("new_order", order, f"New Order #{order['id']} ({order['total']})", html)

    def notify_status_change(self, order: Dict[str, Any]) -> bool:
        html = (
            f"<p>Order #{order['id']} status updated to <strong>{escape(order['status'])}</strong></p>"
            f"<p><strong>Customer:</strong> {escape(order['customer_name'])} "
            f"({escape(order['customer_phone'])})</p>"
            f"<p><strong>Total:</strong> {escape(order['total'])}</p>"
        )
        return self._deliver("status_change", order, f"Order #{order['id']} status: {order['status']}", html)
