"""Configuration loaded from the process environment."""

__version__ = "0.1.0"

import os
from dataclasses import dataclass
from typing import List, Mapping, Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_PORT = 10000
DEFAULT_MONGO_DB = "modmail_db"
DEFAULT_MONGO_COLLECTION = "messages"
DEFAULT_LOG_QUEUE_SIZE = 1000

REQUIRED_VARS = ("DISCORD_TOKEN", "STAFF_GUILD_ID", "CATEGORY_ID", "MONGO_URI")


class ConfigError(Exception):
    """Raised when required settings are missing or malformed"""

    def __init__(self, problems: List[str]):
        self.problems = problems
        super().__init__("Invalid configuration: " + "; ".join(problems))


@dataclass
class ModmailConfig:
    """Typed settings for the relay bot."""

    discord_token: str
    staff_guild_id: int
    category_id: int
    mongo_uri: str
    port: int = DEFAULT_PORT
    mongo_db: str = DEFAULT_MONGO_DB
    mongo_collection: str = DEFAULT_MONGO_COLLECTION
    log_queue_size: int = DEFAULT_LOG_QUEUE_SIZE

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ModmailConfig":
        """Create ModmailConfig from environment variables.

        Every problem is collected before raising so the operator sees the
        whole list at once.
        """
        env = os.environ if env is None else env
        problems: List[str] = []

        values = {}
        for name in REQUIRED_VARS:
            raw = env.get(name, "").strip()
            if not raw:
                problems.append(f"{name} is not set")
            values[name] = raw

        def _int(name: str, raw: str) -> Optional[int]:
            if not raw:
                return None
            try:
                return int(raw)
            except ValueError:
                problems.append(f"{name} must be an integer, got {raw!r}")
                return None

        guild_id = _int("STAFF_GUILD_ID", values["STAFF_GUILD_ID"])
        category_id = _int("CATEGORY_ID", values["CATEGORY_ID"])
        port = _int("PORT", env.get("PORT", "").strip())
        queue_size = _int("LOG_QUEUE_SIZE", env.get("LOG_QUEUE_SIZE", "").strip())
        if queue_size is not None and queue_size < 1:
            problems.append("LOG_QUEUE_SIZE must be at least 1")

        if problems:
            raise ConfigError(problems)

        return cls(
            discord_token=values["DISCORD_TOKEN"],
            staff_guild_id=guild_id,
            category_id=category_id,
            mongo_uri=values["MONGO_URI"],
            port=DEFAULT_PORT if port is None else port,
            mongo_db=env.get("MONGO_DB", "").strip() or DEFAULT_MONGO_DB,
            mongo_collection=env.get("MONGO_COLLECTION", "").strip() or DEFAULT_MONGO_COLLECTION,
            log_queue_size=DEFAULT_LOG_QUEUE_SIZE if queue_size is None else queue_size,
        )
