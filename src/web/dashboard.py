"""Read-only dashboard that renders the persisted player-count payload."""

# ===== IMPORTS & DEPENDENCIES =====
import asyncio
import html
import json
import logging
import os
from datetime import datetime
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from aiohttp import web

from src.config import (
    LOG_LEVEL, PLAYERS_FILE, WEB_HOST, WEB_PORT,
    REFRESH_INTERVAL_SECONDS, DISPLAY_TIMEZONE, DASHBOARD_TITLE
)

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

PLAYERS_FILE_KEY = web.AppKey("players_file", str)
PLACEHOLDER = "--"


class PayloadUnavailable(Exception):
    """The payload document could not be read."""


# ===== FORMATTING =====

def format_count(value: Optional[int]) -> str:
    """30905 -> '30,905'; None -> '--'."""
    if not isinstance(value, int) or isinstance(value, bool):
        return PLACEHOLDER
    return f"{value:,}"


def format_updated_at(iso: Optional[str], tz_name: str = DISPLAY_TIMEZONE) -> str:
    """'2026-02-12T00:00:00.000Z' -> '2026/02/12 09:00:00 JST' for Asia/Tokyo."""
    if not iso or not isinstance(iso, str):
        return PLACEHOLDER
    try:
        moment = datetime.fromisoformat(iso.replace('Z', '+00:00'))
    except ValueError:
        return PLACEHOLDER
    local = moment.astimezone(ZoneInfo(tz_name))
    return f"{local:%Y/%m/%d %H:%M:%S} {local.tzname()}"


# ===== DATA ACCESS =====

def read_payload(path: str) -> dict:
    """Loads the payload document, raising PayloadUnavailable with a short reason."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            payload = json.load(f)
    except FileNotFoundError:
        raise PayloadUnavailable("not found")
    except (OSError, ValueError) as e:
        logger.warning(f"⚠️ Could not read payload {path}: {e}")
        raise PayloadUnavailable("invalid document")

    if not isinstance(payload, dict) or not isinstance(payload.get('items'), list):
        raise PayloadUnavailable("invalid document")
    return payload


# ===== RENDERING =====

def render_error(reason: str) -> str:
    return f'<p class="message error" role="alert">データの取得に失敗しました ({html.escape(reason)})</p>'


def _render_title(item: dict) -> str:
    name = html.escape(str(item.get('name', '')))
    store_url = item.get('storeUrl')
    if store_url:
        return f'<a href="{html.escape(store_url)}" target="_blank" rel="noreferrer">{name}</a>'
    return name


def render_row(item: dict) -> str:
    on_sale = item.get('isOnSale') is True
    row_class = ' class="sale-row"' if on_sale else ''
    badge = ''
    if on_sale:
        discount = item.get("discountPercent")
        if not isinstance(discount, int) or isinstance(discount, bool):
            discount = 0
        badge = f' <span class="sale-badge">SALE -{discount}%</span>'
    return (
        f'<tr{row_class} data-id="{html.escape(str(item.get("id", "")))}">'
        f'<td>{_render_title(item)}{badge}</td>'
        f'<td class="count">{format_count(item.get("playerCount"))}</td>'
        f'</tr>'
    )


def render_table(payload: dict) -> str:
    rows = "\n".join(render_row(item) for item in payload['items'] if isinstance(item, dict))
    return f"""<p class="updated">最終更新: {format_updated_at(payload.get('updatedAt'))}</p>
<div class="table-wrap">
  <table>
    <thead>
      <tr><th>タイトル</th><th>同接数</th></tr>
    </thead>
    <tbody>
{rows}
    </tbody>
  </table>
</div>"""


def render_page(body: str, refresh_seconds: int = REFRESH_INTERVAL_SECONDS) -> str:
    return f"""<!DOCTYPE html>
<html lang="ja">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{html.escape(DASHBOARD_TITLE)}</title>
<style>
  body {{ font-family: system-ui, sans-serif; background: #0f1923; color: #c7d5e0; max-width: 720px; margin: 40px auto; padding: 0 16px; }}
  h1 {{ color: #66c0f4; font-size: 1.5rem; }}
  .updated {{ color: #8f98a0; font-size: 0.85rem; }}
  .message.error {{ background: #4a1c1c; color: #ffb4b4; padding: 0.6rem 0.8rem; border-radius: 4px; }}
  table {{ width: 100%; border-collapse: collapse; }}
  th, td {{ padding: 0.5rem; border-bottom: 1px solid #2a475e; text-align: left; }}
  td.count {{ text-align: right; font-variant-numeric: tabular-nums; }}
  tr.sale-row {{ background: #1e3a1e; }}
  .sale-badge {{ color: #beee11; font-size: 0.75rem; font-weight: 700; margin-left: 0.4rem; }}
  a {{ color: #c7d5e0; }}
</style>
</head>
<body>
<h1>{html.escape(DASHBOARD_TITLE)}</h1>
<div id="error"></div>
<div id="content">
{body}
</div>
<script>
  // Keep the last good table on failure; only the banner changes.
  async function refreshTable() {{
    const error = document.getElementById('error');
    try {{
      const response = await fetch('/table?t=' + Date.now(), {{ cache: 'no-store' }});
      const text = await response.text();
      if (!response.ok) {{
        error.innerHTML = text;
        return;
      }}
      document.getElementById('content').innerHTML = text;
      error.innerHTML = '';
    }} catch (err) {{
      error.innerHTML = '<p class="message error" role="alert">データの取得に失敗しました</p>';
    }}
  }}
  setInterval(refreshTable, {int(refresh_seconds) * 1000});
</script>
</body>
</html>"""


def _load_body(path: str) -> Tuple[str, int]:
    try:
        payload = read_payload(path)
        return render_table(payload), 200
    except PayloadUnavailable as e:
        return render_error(str(e)), 503
    except (TypeError, ValueError, AttributeError) as e:
        logger.warning(f"⚠️ Could not render payload {path}: {e}")
        return render_error("invalid document"), 503


# ===== HANDLERS =====

async def index(request: web.Request) -> web.Response:
    body, _ = _load_body(request.app[PLAYERS_FILE_KEY])
    return web.Response(text=render_page(body), content_type='text/html', headers={'Cache-Control': 'no-cache'})


async def table(request: web.Request) -> web.Response:
    body, status = _load_body(request.app[PLAYERS_FILE_KEY])
    return web.Response(text=body, status=status, content_type='text/html', headers={'Cache-Control': 'no-cache'})


async def players_json(request: web.Request) -> web.Response:
    path = request.app[PLAYERS_FILE_KEY]
    try:
        with open(path, 'rb') as f:
            body = f.read()
    except FileNotFoundError:
        return web.json_response({"error": "not found"}, status=404)
    return web.Response(body=body, content_type='application/json', charset='utf-8', headers={'Cache-Control': 'no-cache'})


async def health(request: web.Request) -> web.Response:
    return web.json_response({"status": "ok"})


# ===== INITIALIZATION & STARTUP =====

def create_app(players_file: str = PLAYERS_FILE) -> web.Application:
    app = web.Application()
    app[PLAYERS_FILE_KEY] = players_file
    app.router.add_get('/', index)
    app.router.add_get('/table', table)
    app.router.add_get('/data/players.json', players_json)
    app.router.add_get('/health', health)
    return app


if __name__ == "__main__":
    logging.basicConfig(
        level=LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    if os.name == 'nt':
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
    logger.info(f"Serving dashboard for {PLAYERS_FILE} on {WEB_HOST}:{WEB_PORT}")
    web.run_app(create_app(), host=WEB_HOST, port=WEB_PORT)
