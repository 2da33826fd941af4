# ===== IMPORTS & DEPENDENCIES =====
import logging
from datetime import datetime, timezone
from types import MappingProxyType
from typing import List, Mapping, Optional

from src.models.game import (
    Game, PlayerItem, PlayerPayload, PlayerFetcher, SaleFetcher,
    FetchOk, FetchFailed, FetchResult
)
from src.utils.url_utils import to_link_data

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# ===== HELPERS =====

def _index_previous(previous: Optional[PlayerPayload]) -> Mapping[str, dict]:
    """Maps item id -> previous item. Read-only for the whole run."""
    if not previous:
        return MappingProxyType({})
    items = previous.get('items') if isinstance(previous, dict) else None
    if not isinstance(items, list):
        return MappingProxyType({})
    return MappingProxyType({
        item['id']: item
        for item in items
        if isinstance(item, dict) and isinstance(item.get('id'), str)
    })


def _utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2026-02-12T00:00:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


async def _attempt(fetch, appid: int) -> FetchResult:
    """Runs a fetch capability; an exception counts as a failed fetch."""
    try:
        result = await fetch(appid)
    except Exception as e:
        return FetchFailed(f"{type(e).__name__}: {e}")
    if isinstance(result, (FetchOk, FetchFailed)):
        return result
    return FetchFailed(f"unexpected fetch result: {result!r}")

# ===== CORE BUSINESS LOGIC =====

async def build_player_payload(
    games: List[Game],
    previous: Optional[PlayerPayload],
    fetch_players: PlayerFetcher,
    fetch_sale: SaleFetcher,
) -> PlayerPayload:
    """
    Builds a fresh payload for the catalog, one entry at a time and in catalog order.

    Disabled entries and entries without an app ID get an all-null row and
    trigger no fetches. For the others, a failed player-count fetch falls back
    to the previous run's `playerCount` for the same id, and a failed sale
    fetch falls back to that same previous row's `isOnSale`/`discountPercent`
    pair. Missing history yields None. Fetch failures are logged and never
    abort the run.
    """
    previous_by_id = _index_previous(previous)
    items: List[PlayerItem] = []

    for game in games:
        appid = game['appid']
        if not game['enabled'] or not appid:
            items.append({
                'id': game['id'],
                'name': game['name'],
                'appid': appid,
                'playerCount': None,
                'isOnSale': None,
                'discountPercent': None,
                'storeUrl': None,
                'runUrl': None,
            })
            continue

        link_data = to_link_data(appid)

        fallback = previous_by_id.get(game['id'], {})

        players = await _attempt(fetch_players, appid)
        if isinstance(players, FetchOk):
            player_count = players.value
        else:
            player_count = fallback.get('playerCount')
            logger.warning(f"⚠️ Failed to fetch players for appid={appid} ({game['id']}): {players.reason}. Using previous value: {player_count}")

        sale = await _attempt(fetch_sale, appid)
        if isinstance(sale, FetchOk):
            is_on_sale = sale.value['isOnSale']
            discount_percent = sale.value['discountPercent']
        else:
            is_on_sale = fallback.get('isOnSale')
            discount_percent = fallback.get('discountPercent')
            logger.warning(f"⚠️ Failed to fetch sale info for appid={appid} ({game['id']}): {sale.reason}. Using previous value: {is_on_sale}/{discount_percent}")

        items.append({
            'id': game['id'],
            'name': game['name'],
            'appid': appid,
            'playerCount': player_count,
            'isOnSale': is_on_sale,
            'discountPercent': discount_percent,
            **link_data,
        })

    return {
        'updatedAt': _utc_timestamp(),
        'items': items,
    }
