# ===== TYPES & INTERFACES =====

from typing import Any, Awaitable, Callable, List, NamedTuple, Optional, TypedDict, Union


class Game(TypedDict):
    """
    One entry of the static catalog (`games.json`).

    Attributes:
        id (str): Unique, stable key of the title. Used to match rows across runs.
        name (str): Display name.
        appid (Optional[int]): Steam application ID, or None when unknown.
        enabled (bool): False keeps the row in the table but skips all fetches.
    """
    id: str
    name: str
    appid: Optional[int]
    enabled: bool


class SaleInfo(TypedDict):
    """Sale status of a title as reported by the Steam store."""
    isOnSale: bool
    discountPercent: int


class LinkData(TypedDict):
    storeUrl: Optional[str]
    runUrl: Optional[str]


class PlayerItem(TypedDict):
    """
    One row of the persisted payload. Keys are camelCase because the
    document is consumed as-is by the dashboard.

    Attributes:
        id, name, appid: Copied verbatim from the catalog entry.
        playerCount (Optional[int]): Current players, or the previous run's value on failure.
        isOnSale (Optional[bool]): Sale flag, falls back together with discountPercent.
        discountPercent (Optional[int]): Discount in percent (0-100).
        storeUrl (Optional[str]): Steam store page.
        runUrl (Optional[str]): `steam://` launch URI.
    """
    id: str
    name: str
    appid: Optional[int]
    playerCount: Optional[int]
    isOnSale: Optional[bool]
    discountPercent: Optional[int]
    storeUrl: Optional[str]
    runUrl: Optional[str]


class PlayerPayload(TypedDict):
    updatedAt: str
    items: List[PlayerItem]


# --- Fetch results ---

class FetchOk(NamedTuple):
    """A fetch that produced a value."""
    value: Any


class FetchFailed(NamedTuple):
    """A fetch that failed; `reason` is a short human-readable explanation."""
    reason: str


FetchResult = Union[FetchOk, FetchFailed]

PlayerFetcher = Callable[[int], Awaitable[FetchResult]]
SaleFetcher = Callable[[int], Awaitable[FetchResult]]
