from pathlib import Path
from dotenv import load_dotenv
import os
import pytz

load_dotenv(Path(__file__).parent.parent / '.env', override=True)

def env_bool(name: str, default: bool = False) -> bool:
    return str(os.getenv(name, str(default))).strip().lower() in {"1", "true", "yes", "on", "y", "t"}

def env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value and value.strip().lstrip("-").isdigit() else default

def env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except (TypeError, ValueError):
        return default

class Settings:
    # ECB reference rate feeds
    ECB_HIST_URL = os.getenv(
        'ECB_HIST_URL', 'https://www.ecb.europa.eu/stats/eurofxref/eurofxref-hist.xml')
    ECB_LAST90_URL = os.getenv(
        'ECB_LAST90_URL', 'https://www.ecb.europa.eu/stats/eurofxref/eurofxref-hist-90d.xml')
    ECB_DAILY_URL = os.getenv(
        'ECB_DAILY_URL', 'https://www.ecb.europa.eu/stats/eurofxref/eurofxref-daily.xml')
    FETCH_TIMEOUT = env_float('FETCH_TIMEOUT', 30.0)
    FETCH_RETRIES = env_int('FETCH_RETRIES', 4)

    # Directories
    BASE_DIR = Path(os.getenv('BASE_DIR', '/app'))
    STORAGE_DIR = BASE_DIR / "storage"

    # Snapshot store
    DB_PATH = Path(os.getenv('DB_PATH', str(STORAGE_DIR / "rates.sqlite3")))

    # Logs
    LOGS_DIR = STORAGE_DIR / "logs"
    LOG_FILE = LOGS_DIR / "errors.log"
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
    LOG_TO_FILE = env_bool("LOG_TO_FILE", True)

    # Timezone
    SERVER_TZ = pytz.timezone(os.getenv('SERVER_TZ')) if os.getenv('SERVER_TZ') else pytz.UTC

    # Cron (ECB publishes around 16:00 CET)
    UPDATE_CRON = os.getenv('UPDATE_CRON', '*/30 15-18 * * 1-5')
    UPDATE_TIMEOUT = env_float('UPDATE_TIMEOUT', 300.0)
