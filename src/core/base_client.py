# ===== IMPORTS & DEPENDENCIES =====
import logging
import asyncio
import aiohttp
from typing import Optional, Dict

from src.config import COMMON_HEADERS, REQUEST_TIMEOUT
from src.models.game import FetchOk, FetchFailed, FetchResult

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# ===== CORE BUSINESS LOGIC =====
class BaseWebClient:
    """A base class for web clients providing a single, time-bounded JSON fetch."""

    def __init__(self, session: aiohttp.ClientSession, timeout: float = REQUEST_TIMEOUT):
        self._session = session
        self._timeout = timeout
        logger.debug(f"[{self.__class__.__name__}] Initialized with request timeout: {self._timeout}s")

    async def _fetch_json(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        error_label: str = "HTTP error",
    ) -> FetchResult:
        """
        Fetches a URL once and decodes the body as JSON.

        Never raises for transport problems: non-2xx statuses, timeouts,
        connection errors and undecodable bodies all come back as FetchFailed.
        The timeout covers the whole request, and expiry aborts the underlying
        connection.
        """
        logger.debug(f"[{self.__class__.__name__}] Fetching from network: {url}")
        request_headers = headers or COMMON_HEADERS
        client_timeout = aiohttp.ClientTimeout(total=self._timeout)

        try:
            async with self._session.get(url, headers=request_headers, timeout=client_timeout) as response:
                if response.status < 200 or response.status >= 300:
                    logger.warning(f"⚠️ [{self.__class__.__name__}] HTTP error on {url}: Status {response.status}")
                    return FetchFailed(f"{error_label} ({response.status})")
                # content_type=None handles non-standard API content-types
                content = await response.json(content_type=None)
                return FetchOk(content)
        except asyncio.TimeoutError:
            logger.warning(f"⚠️ [{self.__class__.__name__}] Request to {url} timed out after {self._timeout:g}s")
            return FetchFailed(f"timeout after {self._timeout:g}s")
        except ValueError as e:
            # json.JSONDecodeError is a ValueError
            logger.warning(f"⚠️ [{self.__class__.__name__}] Invalid JSON from {url}: {e}")
            return FetchFailed(f"invalid JSON: {e}")
        except aiohttp.ClientError as e:
            logger.warning(f"⚠️ [{self.__class__.__name__}] Network error on {url}: {type(e).__name__}")
            return FetchFailed(f"{type(e).__name__}: {e}")
        except Exception as e:
            logger.error(f"❌ [{self.__class__.__name__}] Unexpected error fetching {url}: {e}", exc_info=True)
            return FetchFailed(f"{type(e).__name__}: {e}")
