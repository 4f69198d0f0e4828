"""Sync configuration with defaults for the Lliga Padel tournament pages."""

from dataclasses import dataclass

SETTEO_BASE_URL = "https://www.setteo.com"

DEFAULT_ROSTER_URL = (
    SETTEO_BASE_URL
    + "/torneos/lliga-padel-guinotprunera-18-19-a-fase-2w07/equipo/200081/"
)
DEFAULT_SCHEDULE_URL = (
    SETTEO_BASE_URL
    + "/torneos/lliga-padel-guinotprunera-18-19-a-fase-2w07/calendario/"
    "?categorias%5B%5D=162079&equipo=200081"
)


@dataclass
class SyncConfig:
    """Configuration for fetching and reconciling tournament pages.

    Timing values are in seconds.
    """

    # Remote pages (team roster with scores, team schedule)
    roster_url: str = DEFAULT_ROSTER_URL
    schedule_url: str = DEFAULT_SCHEDULE_URL

    # Total timeout for one GET, connect + read
    request_timeout: float = 30.0

    # Browser family for the User-Agent header
    user_agent_browser: str = "Chrome"

    # Persistent data storage
    data_dir: str = "data"
    db_path: str = "data/padelcat.db"

    # Archive every fetched page as gzip under {data_dir}/raw/
    save_html: bool = True

    # bcrypt work factor for password hashes
    bcrypt_rounds: int = 10
