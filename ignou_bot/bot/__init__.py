"""Telegram bot package.

Chat handlers, the portal query engine, report formatting and message
templates.
"""
