from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import httpx

from . import config
from .collector import collect_content
from .email_formatter import build_email_html, build_email_subject
from .mailer import ResendMailer
from .models import RenderedReport, SendResult
from .renderer import render_markdown

logger = logging.getLogger(__name__)


def build_report(settings: config.Settings, now: Optional[datetime] = None) -> Optional[RenderedReport]:
    """Collect and render the report; None when there is nothing to send."""
    generated_at = now or datetime.now()
    directory = settings.report_dir
    logger.info("Collecting %s report content from %s", settings.report_period, directory)
    content = collect_content(directory)
    if content.is_empty:
        return None

    rendered = render_markdown(content.text, directory)
    logger.info("Rendered %s chars of HTML with %s attachment(s)", len(rendered.html), len(rendered.attachments))
    return RenderedReport(
        subject=build_email_subject(settings.report_period, generated_at),
        html_body=build_email_html(rendered.html, settings.report_period, generated_at),
        attachments=rendered.attachments,
    )


def run(
    settings: config.Settings,
    *,
    transport: httpx.BaseTransport | None = None,
    dry_run: bool = False,
    dry_run_output: Optional[Path] = None,
    now: Optional[datetime] = None,
) -> List[SendResult]:
    report = build_report(settings, now=now)
    if report is None:
        logger.warning("No report content found; nothing to send.")
        return []

    if dry_run:
        if dry_run_output is not None:
            dry_run_output.write_text(report.html_body, encoding="utf-8")
            logger.info("Dry run: wrote %s to %s", report.subject, dry_run_output)
        else:
            logger.info("Dry run: skipping delivery of %s (%s chars)", report.subject, len(report.html_body))
        return []

    mailer = ResendMailer(
        settings.api_key,
        settings.sender_email,
        base_url=settings.api_base_url,
        timeout=settings.request_timeout,
        transport=transport,
    )
    logger.info("Using mail provider=%s recipients=%s", mailer.provider, len(settings.recipients))
    return mailer.send_all(settings.recipients, report.subject, report.html_body, report.attachments)
