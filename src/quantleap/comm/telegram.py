"""Telegram bot client for outbound alert messages."""

from typing import Optional

import aiohttp

from ..config.logging import get_logger

logger = get_logger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org"


class TelegramBot:
    """Telegram Bot client sending HTML-formatted messages to one chat."""

    def __init__(
        self,
        bot_token: Optional[str],
        chat_id: Optional[str],
        timeout_seconds: float = 10.0,
    ):
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.timeout_seconds = timeout_seconds
        self.base_url = f"{TELEGRAM_API_URL}/bot{self.bot_token}"
        self.logger = logger.bind(channel="telegram")

    @property
    def is_configured(self) -> bool:
        return bool(self.bot_token and self.chat_id)

    async def send_message(self, text: str, chat_id: Optional[str] = None) -> bool:
        """
        Send a message to a Telegram chat.

        Args:
            text: Message text (Telegram HTML subset)
            chat_id: Target chat ID (uses default if not provided)

        Returns:
            True if message sent successfully, False otherwise
        """
        target_chat_id = chat_id or self.chat_id

        if not self.bot_token or not target_chat_id:
            self.logger.warning("Telegram bot token or chat ID not configured")
            return False

        url = f"{self.base_url}/sendMessage"
        data = {
            "chat_id": target_chat_id,
            "text": text,
            "parse_mode": "HTML",
            "disable_web_page_preview": True,
        }
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(url, json=data) as response:
                    if response.status == 200:
                        self.logger.info("Message sent", chat_id=target_chat_id)
                        return True

                    error_text = await response.text()
                    self.logger.error(
                        "Failed to send message",
                        status=response.status,
                        error=error_text[:200],
                    )
                    return False
        except Exception as e:
            self.logger.error(
                "Error sending Telegram message", error=str(e), exc_info=True
            )
            return False
