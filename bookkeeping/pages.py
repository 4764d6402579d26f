from __future__ import annotations

_PAGE = """<!doctype html>
<html>
  <head><meta charset="utf-8"><title>{title}</title></head>
  <body style="font-family: sans-serif; max-width: 720px; margin: 40px auto;">
{body}
  </body>
</html>"""

_RESTRICTED = "Access restricted to authorized company employees only."
_BACK_LINK = '<a href="/">Back to launch page</a>'


def render_page(title: str, *paragraphs: str) -> str:
    lines = [f"    <h1>{title}</h1>"]
    lines.extend(f"    <p>{text}</p>" for text in paragraphs)
    return _PAGE.format(title=title, body="\n".join(lines))


LANDING_PAGE = _PAGE.format(
    title="Bookkeeping AI",
    body="""    <h1>Bookkeeping AI - Company Internal Only</h1>
    <p>This endpoint is for authorized company staff only and is not intended for external/public use.</p>
    <ul>
      <li><a href="/connect">Connect to Intuit</a></li>
      <li><a href="/disconnect">Disconnect from Intuit</a></li>
    </ul>""",
)

CONNECTED_PAGE = render_page(
    "Connected",
    "OAuth connection completed successfully.",
    _RESTRICTED,
    _BACK_LINK,
)

DISCONNECTED_PAGE = render_page(
    "Disconnected",
    "Intuit token revoked successfully.",
    _RESTRICTED,
    _BACK_LINK,
)
