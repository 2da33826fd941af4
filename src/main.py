# ===== IMPORTS & DEPENDENCIES =====
import asyncio
import logging
import os
import sys
import aiohttp

# --- Configuration ---
from src.config import LOG_LEVEL, GAMES_FILE, PLAYERS_FILE, COMMON_HEADERS, REQUEST_TIMEOUT

# --- Core Components ---
from src.core.payload_builder import build_player_payload
from src.core.storage import load_catalog, load_previous_payload, write_payload

# --- Data Models ---
from src.models.game import PlayerPayload

# --- Data Sources ---
from src.sources.steam import SteamClient

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

# ===== CORE BUSINESS LOGIC =====

async def run(games_path: str = GAMES_FILE, players_path: str = PLAYERS_FILE) -> PlayerPayload:
    """Fetches fresh numbers for every catalog entry and persists the payload."""
    logger.info("🚀 Starting Steam player count update")

    # Catalog errors are fatal and propagate to the caller
    games = load_catalog(games_path)
    previous = load_previous_payload(players_path)

    async with aiohttp.ClientSession(headers=COMMON_HEADERS) as session:
        steam = SteamClient(session, timeout=REQUEST_TIMEOUT)
        payload = await build_player_payload(games, previous, steam.get_current_players, steam.get_sale_info)

    write_payload(players_path, payload)
    logger.info(f"✅ Wrote {len(payload['items'])} items to {os.path.relpath(players_path)}")
    return payload

# ===== INITIALIZATION & STARTUP =====

def main() -> int:
    """Runs one update. Returns the process exit code."""
    configure_logging()
    try:
        asyncio.run(run(GAMES_FILE, PLAYERS_FILE))
    except Exception as e:
        logger.critical(f"🔥 Steam player count update failed: {e}", exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    if os.name == 'nt':
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
    sys.exit(main())
