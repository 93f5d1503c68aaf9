from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from .config import REPORT_EXTENSIONS
from .models import CollectedContent

logger = logging.getLogger(__name__)


def list_report_files(directory: Path) -> List[Path]:
    if not directory.is_dir():
        return []
    files = [
        path
        for path in directory.iterdir()
        if path.is_file() and path.suffix.lower() in REPORT_EXTENSIONS
    ]
    return sorted(files, key=lambda p: p.name)


def collect_content(directory: Path) -> CollectedContent:
    """
    Read every .md/.html file directly inside ``directory``.

    Files are concatenated in name order, separated by a blank line. A missing
    directory or one without report files yields empty content.
    """
    if not directory.is_dir():
        logger.warning("Report directory not found: %s", directory)
        return CollectedContent()

    files = list_report_files(directory)
    if not files:
        logger.warning("No report files (%s) in %s", ", ".join(REPORT_EXTENSIONS), directory)
        return CollectedContent()

    parts: List[str] = []
    for path in files:
        logger.info("Reading %s", path.name)
        parts.append(path.read_text(encoding="utf-8", errors="replace"))
    content = CollectedContent(files=files, text="\n\n".join(parts))
    if content.is_empty:
        logger.warning("Report files in %s are blank", directory)
    else:
        logger.info("Collected %s file(s), %s chars", len(files), len(content.text))
    return content
