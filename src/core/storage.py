# ===== IMPORTS & DEPENDENCIES =====
import json
import logging
import os
import tempfile
from typing import Any, List, Optional

from src.models.game import Game, PlayerPayload

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)


class TrackerError(Exception):
    """Base class for errors raised by the tracker."""


class CatalogError(TrackerError):
    """The catalog file is missing, unreadable or structurally invalid."""


# ===== CATALOG =====

def _validate_game(index: int, entry: Any) -> Game:
    if not isinstance(entry, dict):
        raise CatalogError(f"Catalog entry #{index} is not an object")

    game_id = entry.get('id')
    if not isinstance(game_id, str) or not game_id:
        raise CatalogError(f"Catalog entry #{index} has no valid 'id'")
    if not isinstance(entry.get('name'), str):
        raise CatalogError(f"Catalog entry '{game_id}' has no valid 'name'")

    appid = entry.get('appid')
    if appid is not None and (not isinstance(appid, int) or isinstance(appid, bool)):
        raise CatalogError(f"Catalog entry '{game_id}' has a non-integer 'appid': {appid!r}")
    if not isinstance(entry.get('enabled'), bool):
        raise CatalogError(f"Catalog entry '{game_id}' has no boolean 'enabled'")

    return {'id': game_id, 'name': entry['name'], 'appid': appid, 'enabled': entry['enabled']}


def load_catalog(path: str) -> List[Game]:
    """
    Loads and validates the ordered game catalog.
    Raises CatalogError for anything that is not a list of well-formed, uniquely keyed entries.
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw = json.load(f)
    except (OSError, ValueError) as e:
        raise CatalogError(f"Could not read catalog {path}: {e}") from e

    if not isinstance(raw, list):
        raise CatalogError(f"Catalog {path} must contain a JSON array")

    games = [_validate_game(i, entry) for i, entry in enumerate(raw)]
    seen = set()
    for game in games:
        if game['id'] in seen:
            raise CatalogError(f"Duplicate catalog id: '{game['id']}'")
        seen.add(game['id'])

    logger.info(f"Loaded {len(games)} catalog entries from {path}")
    return games


# ===== PAYLOAD =====

def load_previous_payload(path: str) -> Optional[PlayerPayload]:
    """Reads the last persisted payload. Any problem means 'no previous payload'."""
    if not os.path.exists(path):
        logger.info(f"No previous payload at {path}. Starting without fallback values.")
        return None

    try:
        with open(path, 'r', encoding='utf-8') as f:
            payload = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"⚠️ Could not read previous payload {path}: {e}. Ignoring it.")
        return None

    if not isinstance(payload, dict) or not isinstance(payload.get('items'), list):
        logger.warning(f"⚠️ Previous payload {path} has an unexpected shape. Ignoring it.")
        return None
    return payload


def write_payload(path: str, payload: PlayerPayload) -> None:
    """Writes the payload to a temp file next to `path`, then atomically replaces `path`."""
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(prefix='.players-', suffix='.json.tmp', dir=directory)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
            f.write('\n')
        # mkstemp creates 0600 files; the document is served publicly
        os.chmod(tmp_path, 0o644)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
