from __future__ import annotations

import html
from datetime import datetime

_STYLE = """
  body { font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Helvetica, Arial, sans-serif; background: #f7f8fb; color: #1c1d21; line-height: 1.6; margin: 0; padding: 0; }
  .container { max-width: 760px; margin: 0 auto; padding: 24px 20px 40px; background: #ffffff; }
  .title { font-size: 20px; font-weight: 700; margin: 0 0 16px 0; }
  h1, h2, h3, h4 { color: #111; line-height: 1.3; margin: 1.4em 0 0.5em; }
  a { color: #2d6cdf; text-decoration: none; }
  table { border-collapse: collapse; width: 100%; margin: 12px 0; }
  th, td { border: 1px solid #d8dbe4; padding: 6px 10px; text-align: left; }
  th { background: #f0f2f7; }
  code { font-family: SFMono-Regular, Consolas, "Liberation Mono", Menlo, monospace; background: #f3f4f8; border-radius: 4px; padding: 1px 4px; font-size: 90%; }
  pre { background: #f3f4f8; border-radius: 6px; padding: 12px; overflow-x: auto; }
  pre code { background: none; padding: 0; }
  blockquote { border-left: 4px solid #d8dbe4; color: #5b6071; margin: 12px 0; padding: 4px 14px; }
  img { max-width: 100%; height: auto; }
  .footer { color: #7a7f92; font-size: 12px; margin-top: 24px; border-top: 1px solid #e6e8f0; padding-top: 12px; }
"""


def format_timestamp(dt: datetime) -> str:
    return dt.strftime("%Y-%m-%d %H:%M:%S")


def build_email_subject(report_period: str, now: datetime) -> str:
    return f"Your {report_period} Report for {now.strftime('%Y-%m-%d')}"


def build_email_html(body_html: str, report_period: str, generated_at: datetime) -> str:
    """Wrap a rendered fragment in a standalone document with embedded CSS."""
    label = html.escape(report_period)
    return f"""<!doctype html>
<html>
<head>
<meta charset="UTF-8" />
<meta name="viewport" content="width=device-width, initial-scale=1.0" />
<title>{label} Report</title>
<style>{_STYLE}</style>
</head>
<body>
  <div class="container">
    <p class="title">{label} Report</p>
{body_html}
    <div class="footer">Generated on {format_timestamp(generated_at)}</div>
  </div>
</body>
</html>"""
