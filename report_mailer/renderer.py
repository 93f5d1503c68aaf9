from __future__ import annotations

import html
import logging
import mimetypes
import xml.etree.ElementTree as etree
from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import unquote

import markdown
from markdown.extensions import Extension
from markdown.inlinepatterns import InlineProcessor, SimpleTagInlineProcessor
from markdown.treeprocessors import Treeprocessor
from markdown.util import AtomicString

from .config import CONTENT_ID_DOMAIN
from .models import ImageAttachment, RenderedMarkdown

logger = logging.getLogger(__name__)

# \x02 / \x03 delimit Python-Markdown placeholders and must never end up in a URL.
BARE_URL_RE = r"(?<![\w/=\"'<])(https?://[^\s<>\"'\[\]\x02\x03]*[^\s<>\"'\[\]\x02\x03.,;:!?)])"
STRIKETHROUGH_RE = r"(~{2})(.+?)~{2}"

MARKDOWN_EXTENSIONS = ["tables", "fenced_code"]


def is_remote_url(link: str) -> bool:
    return link.startswith(("http://", "https://"))


class BareUrlInlineProcessor(InlineProcessor):
    """Turn bare http(s) URLs in text into links."""

    ANCESTOR_EXCLUDES = ("a",)

    def handleMatch(self, m, data):  # noqa: N802
        url = m.group(1)
        el = etree.Element("a")
        el.set("href", url)
        el.text = AtomicString(url)
        return el, m.start(0), m.end(0)


class ImagePolicyTreeprocessor(Treeprocessor):
    """
    Keep remote images inline and swap local ones for a text note.

    Local files that exist are collected as attachments so the mailer can ship
    them alongside the message. Missing files only get a "not found" note.
    """

    def __init__(self, md: markdown.Markdown, base_dir: Path):
        super().__init__(md)
        self.base_dir = base_dir
        self._attachments: Dict[Path, ImageAttachment] = {}

    @property
    def attachments(self) -> List[ImageAttachment]:
        return list(self._attachments.values())

    def run(self, root: etree.Element) -> None:
        for el in list(root.iter("img")):
            src = el.get("src", "")
            alt = el.get("alt", "")
            if is_remote_url(src):
                logger.info("Processing URL image: %s", src)
                continue
            _replace_with_note(el, self._local_image_note(src, alt))

    def _local_image_note(self, link: str, alt: str) -> str:
        # Local images always resolve under base_dir, like a path join.
        image_path = self.base_dir / unquote(link).lstrip("/\\")
        try:
            if not _is_within(image_path, self.base_dir):
                logger.warning("Image outside report directory: %s", link)
                return f"[Image not found: {alt}]"
            if not image_path.is_file():
                logger.warning("Image not found: %s", link)
                return f"[Image not found: {alt}]"
            attachment = self._attachments.get(image_path)
            if attachment is None:
                attachment = build_attachment(image_path)
                self._attachments[image_path] = attachment
        except OSError as exc:
            logger.error("Failed to process image %s: %s", link, exc)
            return f"[Error loading image: {alt}]"
        logger.info("Replacing inline image with text note for %s", attachment.filename)
        return f"[Image: {alt} - see attached file: {attachment.filename}]"


def _is_within(path: Path, directory: Path) -> bool:
    return path.resolve().is_relative_to(directory.resolve())


def _replace_with_note(el: etree.Element, note: str) -> None:
    el.tag = "em"
    el.attrib.clear()
    el.text = AtomicString(note)


def build_attachment(path: Path) -> ImageAttachment:
    mime_type, _ = mimetypes.guess_type(path.name)
    return ImageAttachment(
        path=path,
        mime_type=mime_type or "application/octet-stream",
        content_id=f"{path.name}@{CONTENT_ID_DOMAIN}",
    )


class ReportExtension(Extension):
    def __init__(self, base_dir: Path, **kwargs):
        self.base_dir = base_dir
        self.image_policy: Optional[ImagePolicyTreeprocessor] = None
        super().__init__(**kwargs)

    def extendMarkdown(self, md: markdown.Markdown) -> None:  # noqa: N802
        # Before emphasis so underscores inside URLs are left alone.
        md.inlinePatterns.register(BareUrlInlineProcessor(BARE_URL_RE, md), "bare_url", 85)
        md.inlinePatterns.register(SimpleTagInlineProcessor(STRIKETHROUGH_RE, "del"), "strikethrough", 65)
        self.image_policy = ImagePolicyTreeprocessor(md, self.base_dir)
        # After "inline" (20) has created the <img> elements.
        md.treeprocessors.register(self.image_policy, "image_policy", 15)


def render_markdown(text: str, base_dir: Path) -> RenderedMarkdown:
    """Render Markdown/HTML report text, resolving local images against ``base_dir``."""
    extension = ReportExtension(base_dir=base_dir)
    md = markdown.Markdown(extensions=[*MARKDOWN_EXTENSIONS, extension])
    try:
        body = md.convert(text)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Markdown rendering failed; falling back to preformatted text: %s", exc)
        return RenderedMarkdown(html=simple_render(text))
    attachments = extension.image_policy.attachments if extension.image_policy else []
    return RenderedMarkdown(html=body, attachments=attachments)


def simple_render(text: str) -> str:
    return f"<pre>{html.escape(text)}</pre>"
