"""IGNOU Portal Bot Application Package.

A Telegram bot that looks up IGNOU assignment submission status, grade cards
and assignment marks by querying the university's public portals and turning
their loosely structured HTML into readable reports.

The application follows a modular architecture with separate concerns for:
- Bot handlers and the per-chat conversation
- Portal transport, soft-error classification and data extraction
- Report formatting and message chunking
"""
