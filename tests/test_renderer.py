from __future__ import annotations

import markdown

from report_mailer.renderer import render_markdown


def test_remote_image_is_kept_inline(tmp_path):
    result = render_markdown("![alt](https://example.com/a.png)", tmp_path)
    assert "<img" in result.html
    assert 'src="https://example.com/a.png"' in result.html
    assert 'alt="alt"' in result.html
    assert result.attachments == []


def test_remote_image_keeps_title(tmp_path):
    result = render_markdown('![alt](http://example.com/a.png "Chart")', tmp_path)
    assert 'title="Chart"' in result.html


def test_missing_local_image_becomes_not_found_placeholder(tmp_path):
    result = render_markdown("![chart](missing.png)", tmp_path)
    assert "<p><em>[Image not found: chart]</em></p>" in result.html
    assert "<img" not in result.html
    assert result.attachments == []


def test_local_image_is_attached_and_replaced_with_note(tmp_path):
    (tmp_path / "chart.png").write_bytes(b"\x89PNG")
    result = render_markdown("Intro\n\n![Sales chart](chart.png)", tmp_path)

    assert "<p><em>[Image: Sales chart - see attached file: chart.png]</em></p>" in result.html
    assert len(result.attachments) == 1
    attachment = result.attachments[0]
    assert attachment.path == tmp_path / "chart.png"
    assert attachment.mime_type == "image/png"
    assert attachment.content_id == "chart.png@example.com"


def test_local_image_referenced_twice_is_attached_once(tmp_path):
    (tmp_path / "chart.png").write_bytes(b"\x89PNG")
    result = render_markdown("![a](chart.png)\n\n![b](chart.png)", tmp_path)
    assert result.html.count("see attached file: chart.png") == 2
    assert len(result.attachments) == 1


def test_local_image_with_encoded_name(tmp_path):
    (tmp_path / "my chart.jpg").write_bytes(b"jpg")
    result = render_markdown("![c](my%20chart.jpg)", tmp_path)
    assert result.attachments[0].mime_type == "image/jpeg"


def test_attachments_do_not_leak_between_renders(tmp_path):
    (tmp_path / "chart.png").write_bytes(b"\x89PNG")
    first = render_markdown("![a](chart.png)", tmp_path)
    second = render_markdown("no images here", tmp_path)
    assert len(first.attachments) == 1
    assert second.attachments == []


def test_tables_and_fenced_code(tmp_path):
    text = "| a | b |\n|---|---|\n| 1 | 2 |\n\n```python\nprint(1)\n```\n"
    result = render_markdown(text, tmp_path)
    assert "<table>" in result.html
    assert "<td>1</td>" in result.html
    assert "<pre><code" in result.html


def test_bare_urls_are_autolinked(tmp_path):
    result = render_markdown("See https://example.com/docs for details.", tmp_path)
    assert '<a href="https://example.com/docs">https://example.com/docs</a>' in result.html


def test_existing_links_are_not_linked_twice(tmp_path):
    result = render_markdown("[https://example.com](https://example.com)", tmp_path)
    assert result.html.count("<a ") == 1


def test_strikethrough(tmp_path):
    result = render_markdown("~~old~~ new", tmp_path)
    assert "<del>old</del>" in result.html


def test_html_content_passes_through(tmp_path):
    result = render_markdown("<div class=\"note\">raw</div>\n\n# Title", tmp_path)
    assert '<div class="note">raw</div>' in result.html
    assert "<h1>Title</h1>" in result.html


def test_rendering_is_idempotent(tmp_path):
    (tmp_path / "chart.png").write_bytes(b"\x89PNG")
    text = "# Report\n\n![a](chart.png)\n\n![b](https://example.com/b.png)\n\n| x |\n|---|\n| 1 |"
    assert render_markdown(text, tmp_path) == render_markdown(text, tmp_path)


def test_malformed_markdown_does_not_raise(tmp_path):
    text = "| broken | table\n```\nunterminated fence\n*dangling [link](\n![img]("
    result = render_markdown(text, tmp_path)
    assert isinstance(result.html, str)


def test_conversion_failure_falls_back_to_preformatted_text(tmp_path, monkeypatch):
    def boom(self, source):
        raise RuntimeError("boom")

    monkeypatch.setattr(markdown.Markdown, "convert", boom)
    result = render_markdown("# <Title>", tmp_path)
    assert result.html == "<pre># &lt;Title&gt;</pre>"
    assert result.attachments == []


def test_absolute_local_path_stays_inside_base_dir(tmp_path):
    base = tmp_path / "reports"
    base.mkdir()
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "secret.png").write_bytes(b"\x89PNG")

    result = render_markdown(f"![s]({outside / 'secret.png'})", base)

    assert result.attachments == []
    assert "<p><em>[Image not found: s]</em></p>" in result.html


def test_absolute_local_path_resolves_under_base_dir(tmp_path):
    (tmp_path / "chart.png").write_bytes(b"\x89PNG")
    result = render_markdown("![c](/chart.png)", tmp_path)
    assert [a.path for a in result.attachments] == [tmp_path / "chart.png"]


def test_parent_directory_image_is_not_attached(tmp_path):
    base = tmp_path / "reports"
    base.mkdir()
    (tmp_path / "secret.png").write_bytes(b"\x89PNG")

    result = render_markdown("![s](../secret.png)", base)

    assert result.attachments == []
    assert "[Image not found: s]" in result.html
