# ===== IMPORTS & DEPENDENCIES =====
from typing import Optional

from src.models.game import LinkData
from src.config import STEAM_STORE_URL, STEAM_RUN_URL

# ===== UTILITY FUNCTIONS =====

def to_link_data(appid: Optional[int]) -> LinkData:
    """
    Builds the store page URL and the `steam://` launch URI for an app ID.
    A missing or zero app ID yields no links.
    """
    if not appid:
        return {'storeUrl': None, 'runUrl': None}
    return {
        'storeUrl': STEAM_STORE_URL.format(app_id=appid),
        'runUrl': STEAM_RUN_URL.format(app_id=appid),
    }
