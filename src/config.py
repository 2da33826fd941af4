# ===== CONFIGURATION & CONSTANTS =====
import os

# --- General Settings ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DATA_DIR = os.getenv("DATA_DIR", os.path.join("public", "data"))
GAMES_FILE = os.getenv("GAMES_FILE", os.path.join(DATA_DIR, "games.json"))
PLAYERS_FILE = os.getenv("PLAYERS_FILE", os.path.join(DATA_DIR, "players.json"))

# --- HTTP Settings ---
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "10"))  # seconds, per request
COMMON_HEADERS = {
    'User-Agent': 'Mozilla/5.0 (compatible; SteamPlayerTracker/1.0)',
    'Accept-Language': 'ja,en-US;q=0.9,en;q=0.8',
    'Accept': 'application/json, text/plain, */*',
}

# --- Steam APIs ---
STEAM_COUNTRY_CODE = os.getenv("STEAM_COUNTRY_CODE", "jp")
STEAM_PLAYERS_API_URL = "https://api.steampowered.com/ISteamUserStats/GetNumberOfCurrentPlayers/v1/?appid={app_id}"
STEAM_APPDETAILS_API_URL = "https://store.steampowered.com/api/appdetails?appids={app_id}&cc={country}&filters=price_overview"

# --- Steam Links ---
STEAM_STORE_URL = "https://store.steampowered.com/app/{app_id}/"
STEAM_RUN_URL = "steam://run/{app_id}"

# --- Dashboard ---
WEB_HOST = os.getenv("WEB_HOST", "0.0.0.0")
WEB_PORT = int(os.getenv("WEB_PORT", "8080"))
REFRESH_INTERVAL_SECONDS = int(os.getenv("REFRESH_INTERVAL_SECONDS", "60"))
DISPLAY_TIMEZONE = os.getenv("DISPLAY_TIMEZONE", "Asia/Tokyo")
DASHBOARD_TITLE = "FGC Steam 同時接続ダッシュボード"
