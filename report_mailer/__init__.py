"""Render a directory of Markdown reports and email it through Resend."""

__all__ = [
    "config",
    "models",
    "log",
    "collector",
    "renderer",
    "email_formatter",
    "mailer",
    "orchestrator",
]
