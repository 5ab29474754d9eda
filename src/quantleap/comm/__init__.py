"""Outbound communication transports."""

from .telegram import TelegramBot

__all__ = ["TelegramBot"]
