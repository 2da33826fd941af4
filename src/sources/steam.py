# ===== IMPORTS & DEPENDENCIES =====
import logging
import aiohttp
from typing import Any

from src.core.base_client import BaseWebClient
from src.models.game import FetchOk, FetchFailed, FetchResult, SaleInfo
from src.config import (
    STEAM_PLAYERS_API_URL, STEAM_APPDETAILS_API_URL, STEAM_COUNTRY_CODE, REQUEST_TIMEOUT
)

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# ===== CORE BUSINESS LOGIC =====
class SteamClient(BaseWebClient):
    """Reads current player counts and sale status from the public Steam APIs."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        timeout: float = REQUEST_TIMEOUT,
        country: str = STEAM_COUNTRY_CODE,
        players_url: str = STEAM_PLAYERS_API_URL,
        appdetails_url: str = STEAM_APPDETAILS_API_URL,
    ):
        super().__init__(session=session, timeout=timeout)
        self._country = country
        self._players_url = players_url
        self._appdetails_url = appdetails_url

    async def get_current_players(self, appid: int) -> FetchResult:
        """Returns FetchOk(player_count) for the app, or FetchFailed."""
        url = self._players_url.format(app_id=appid)
        result = await self._fetch_json(url, error_label="Steam API error")
        if isinstance(result, FetchFailed):
            return result

        body = result.value
        response = body.get('response') if isinstance(body, dict) else None
        count = response.get('player_count') if isinstance(response, dict) else None
        # bool is an int subclass, but never a valid count
        if not isinstance(count, int) or isinstance(count, bool):
            logger.warning(f"⚠️ [{self.__class__.__name__}] Player count missing in response for App ID {appid}.")
            return FetchFailed("Steam API response missing player_count")

        logger.debug(f"[{self.__class__.__name__}] App ID {appid}: {count} current players.")
        return FetchOk(count)

    def _parse_sale_info(self, appid: int, response_data: Any) -> FetchResult:
        """Parses an appdetails response filtered to `price_overview`."""
        entry = response_data.get(str(appid)) if isinstance(response_data, dict) else None
        if not isinstance(entry, dict) or not entry.get('success'):
            logger.warning(f"⚠️ [{self.__class__.__name__}] Store API response for App ID {appid} was unsuccessful or empty.")
            return FetchFailed("Store API response unsuccessful")

        # Free titles come back with `data: []` instead of an object
        data = entry.get('data')
        price = data.get('price_overview') if isinstance(data, dict) else None
        discount = price.get('discount_percent') if isinstance(price, dict) else None
        if not isinstance(discount, (int, float)) or isinstance(discount, bool):
            discount = 0

        discount_percent = max(0, min(100, int(discount)))
        sale: SaleInfo = {'isOnSale': discount_percent > 0, 'discountPercent': discount_percent}
        return FetchOk(sale)

    async def get_sale_info(self, appid: int) -> FetchResult:
        """Returns FetchOk(SaleInfo) for the app, or FetchFailed."""
        url = self._appdetails_url.format(app_id=appid, country=self._country)
        result = await self._fetch_json(url, error_label="Store API error")
        if isinstance(result, FetchFailed):
            return result
        return self._parse_sale_info(appid, result.value)
