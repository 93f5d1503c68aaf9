from __future__ import annotations

import argparse
import dataclasses
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from report_mailer import config
from report_mailer.log import configure_logging, log_success
from report_mailer.orchestrator import run

logger = logging.getLogger("report_mailer")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render Markdown reports and email them via Resend.")
    parser.add_argument("--dry-run", action="store_true", help="render only; do not send email")
    parser.add_argument("--output", default=None, help="write the rendered HTML here (requires --dry-run)")
    parser.add_argument("--reports-dir", default=None, help="overrides REPORTS_DIR")
    parser.add_argument("--period", default=None, help="overrides REPORT_PERIOD")
    args = parser.parse_args(argv)
    if args.output and not args.dry_run:
        parser.error("--output requires --dry-run")
    return args


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    load_dotenv(override=False)
    configure_logging(debug=config.is_truthy(os.getenv("DEBUG")))

    logger.info("Starting Email Report Generator")
    try:
        settings = config.Settings.from_env()
    except config.ConfigurationError as exc:
        logger.error("Missing configuration: %s", exc)
        return 1

    overrides = {}
    if args.reports_dir:
        overrides["reports_root"] = Path(args.reports_dir)
    if args.period:
        overrides["report_period"] = args.period
    if overrides:
        settings = dataclasses.replace(settings, **overrides)
    log_success(logger, "Configuration validated successfully!")

    try:
        results = run(
            settings,
            dry_run=args.dry_run,
            dry_run_output=Path(args.output) if args.output else None,
        )
    except Exception as exc:  # noqa: BLE001
        if settings.debug:
            logger.exception("Fatal error: %s", exc)
        else:
            logger.error("Fatal error: %s", exc)
        return 1

    # Delivery is best-effort: failed recipients do not change the exit code.
    if results and all(not r.success for r in results):
        logger.warning("All %s deliveries failed.", len(results))
    log_success(logger, "Process completed!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
