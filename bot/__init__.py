"""Rowbot Telegram bot."""
