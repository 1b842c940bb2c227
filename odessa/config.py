import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

REPO_ROOT = Path(__file__).resolve().parents[1]
DATA_DIR = REPO_ROOT / "data"
DJ_DATA_PATH = DATA_DIR / "djs.json"
DJ_CSV_PATH = REPO_ROOT / "Musical_Facilitators.csv"
GROUPS_PATH = Path(os.environ.get("GROUPS_PATH") or DATA_DIR / "groups.json")
LOG_PATH = DATA_DIR / "bot-log.txt"
LOG_RETENTION_DAYS = 14

TIMEZONE = "Europe/Amsterdam"

VENUE_NAME = "ODESSA - The Boat"
VENUE_LATITUDE = 52.4012
VENUE_LONGITUDE = 4.8917

HIPSY_API_KEY = os.environ.get("HIPSY_API_KEY")
HIPSY_BASE_URL = "https://api.hipsy.nl/v1"
HIPSY_ORGANISATION = os.environ.get("HIPSY_ORGANISATION") or "odessa-amsterdam-ecstatic-dance"
HIPSY_PUBLIC_URL = "https://hipsy.nl"
TICKETS_URL = f"{HIPSY_PUBLIC_URL}/{HIPSY_ORGANISATION}"
HIPSY_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
    "Accept": "application/json",
}
HIPSY_PAGE_HEADERS = {
    "User-Agent": HIPSY_HEADERS["User-Agent"],
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "nl-NL,nl;q=0.9,en;q=0.8",
}
HIPSY_TIMEOUT = 30
HIPSY_MAX_PAGES = 5
HIPSY_PAGE_DELAY = 0.5

WIX_API_KEY = os.environ.get("WIX_API_KEY")
WIX_SITE_ID = os.environ.get("WIX_SITE_ID")
WIX_BASE_URL = "https://www.wixapis.com/wix-data/v1"
WIX_COLLECTION = "Team"
WIX_CACHE_DURATION = int(os.environ.get("WIX_CACHE_DURATION") or "3600")
WIX_MEDIA_URL = "https://static.wixstatic.com/media"

TELEGRAM_BOT_TOKEN = os.environ.get("TELEGRAM_BOT_TOKEN")
TELEGRAM_GROUP_CHAT_ID = os.environ.get("TELEGRAM_GROUP_CHAT_ID", "")
TELEGRAM_API_URL = "https://api.telegram.org"
TELEGRAM_CAPTION_LIMIT = 1024
TELEGRAM_POLL_TIMEOUT = 30

WEEKLY_VIDEO_FILE_ID = (
    os.environ.get("WEEKLY_VIDEO_FILE_ID")
    or "BAACAgQAAxkBAANIaIyYDXy2RFmnv6EZy2nsU2WqAsgAAmsYAAIvy2hQIXfzFx9DIcY2BA"
)

RATE_LIMIT_SECONDS = int(os.environ.get("RATE_LIMIT_SECONDS") or "60")
RATE_LIMITED_COMMANDS = {"/whosplaying", "/schedule"}
