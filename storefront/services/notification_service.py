"""
Сервис отправки email-уведомлений в фоновом режиме.

Письма ставятся в очередь после коммита заказа и отправляются отдельной
задачей. Вызывающий код никогда не ждет отправки, а ошибка отправки
только логируется и не влияет на заказ.
"""

import asyncio
import logging
from email.message import EmailMessage
from typing import Any, Dict, Optional, Protocol

import aiosmtplib

from storefront.core.config import settings
from storefront.services.email_templates import (
    OrderEmailData,
    RenderedEmail,
    render_order_confirmation,
    render_status_update,
)

logger = logging.getLogger(__name__)


class MailTransport(Protocol):
    async def send(self, email: RenderedEmail) -> None:
        ...


class SmtpTransport:
    """Отправка писем через SMTP (aiosmtplib)."""

    def __init__(self, config=settings):
        self.config = config

    def build_message(self, email: RenderedEmail) -> EmailMessage:
        message = EmailMessage()
        message["From"] = f'"{self.config.STORE_NAME}" <{self.config.mail_from}>'
        message["To"] = email.to
        message["Subject"] = email.subject
        message.set_content("This email requires an HTML capable client.")
        message.add_alternative(email.html, subtype="html")
        return message

    async def send(self, email: RenderedEmail) -> None:
        await aiosmtplib.send(
            self.build_message(email),
            hostname=self.config.SMTP_HOST,
            port=self.config.SMTP_PORT,
            username=self.config.SMTP_USER,
            password=self.config.SMTP_PASS,
            use_tls=self.config.SMTP_SECURE,
            start_tls=None,  # STARTTLS, если сервер его предлагает
            timeout=self.config.SMTP_TIMEOUT,
        )


class NotificationDispatcher:
    """Очередь писем с фоновым обработчиком."""

    def __init__(self, transport: Optional[MailTransport] = None, config=settings):
        self.config = config
        self.transport = transport or SmtpTransport(config)
        self.queue: Optional[asyncio.Queue] = None
        self.is_running = False
        self.sent_count = 0
        self.failed_count = 0
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._background_task: Optional[asyncio.Task] = None

    async def start(self):
        """Запустить обработчик очереди."""
        if self.is_running:
            return

        self._loop = asyncio.get_running_loop()
        self.queue = asyncio.Queue()
        self.is_running = True
        self._background_task = asyncio.create_task(self._process_queue())
        logger.info("Notification dispatcher started")

    async def stop(self):
        """Остановить обработчик; неотправленные письма теряются."""
        if not self.is_running:
            return

        self.is_running = False
        if self._background_task:
            self._background_task.cancel()
            try:
                await self._background_task
            except asyncio.CancelledError:
                pass
        self._background_task = None
        logger.info(
            f"Notification dispatcher stopped, {self.queue.qsize()} email(s) dropped"
        )

    def submit(self, email: RenderedEmail) -> bool:
        """
        Поставить письмо в очередь и сразу вернуть управление.

        Можно вызывать из любого потока, в том числе из синхронных эндпоинтов.

        Returns:
            bool: True, если письмо принято в очередь
        """
        if not self.config.smtp_configured:
            logger.info(
                f"[Email] SMTP not configured. Skipping '{email.subject}' to {email.to}"
            )
            return False
        if not self.is_running or self._loop is None:
            logger.warning(
                f"[Email] Dispatcher is not running. Dropping '{email.subject}'"
            )
            return False

        self._loop.call_soon_threadsafe(self.queue.put_nowait, email)
        return True

    def order_confirmation(self, data: OrderEmailData) -> bool:
        return self.submit(render_order_confirmation(data))

    def status_update(self, data: OrderEmailData) -> bool:
        return self.submit(render_status_update(data))

    async def _process_queue(self):
        """Основной цикл обработки очереди."""
        while self.is_running:
            try:
                email = await asyncio.wait_for(self.queue.get(), timeout=1.0)
            except asyncio.TimeoutError:
                continue

            await self._deliver(email)
            self.queue.task_done()

    async def _deliver(self, email: RenderedEmail):
        try:
            await self.transport.send(email)
            self.sent_count += 1
            logger.info(f"[Email] '{email.subject}' sent to {email.to}")
        except Exception as e:
            self.failed_count += 1
            logger.error(f"[Email] Failed to send '{email.subject}' to {email.to}: {e}")

    def get_queue_status(self) -> Dict[str, Any]:
        """Получить статус очереди."""
        return {
            "queue_size": self.queue.qsize() if self.queue else 0,
            "is_running": self.is_running,
            "sent": self.sent_count,
            "failed": self.failed_count,
        }


# Глобальный экземпляр диспетчера
notification_dispatcher = NotificationDispatcher()


def get_notifier() -> NotificationDispatcher:
    """Dependency для получения диспетчера уведомлений."""
    return notification_dispatcher


# Функции для интеграции с FastAPI
async def start_notification_dispatcher():
    await notification_dispatcher.start()


async def stop_notification_dispatcher():
    await notification_dispatcher.stop()
