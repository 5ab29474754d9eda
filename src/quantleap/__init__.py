"""Quant Leap - equity watchlist monitor with composite signals and Telegram alerts."""

__version__ = "1.0.0"
