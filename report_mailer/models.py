from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List


@dataclass(frozen=True)
class ImageAttachment:
    path: Path
    mime_type: str
    content_id: str

    @property
    def filename(self) -> str:
        return self.path.name


@dataclass
class CollectedContent:
    files: List[Path] = field(default_factory=list)
    text: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.files or not self.text.strip()


@dataclass
class RenderedMarkdown:
    html: str
    attachments: List[ImageAttachment] = field(default_factory=list)


@dataclass
class RenderedReport:
    subject: str
    html_body: str
    attachments: List[ImageAttachment] = field(default_factory=list)


@dataclass
class SendResult:
    recipient: str
    success: bool
    detail: str = ""
