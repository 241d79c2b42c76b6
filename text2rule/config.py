"""Runtime settings and logging setup."""

import os
import logging
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


@dataclass
class Settings:
    """Settings read from the environment (and a .env file, if present)."""
    log_level: str = "INFO"
    lead_policy_id: Optional[str] = None
    json_indent: int = 2

    @classmethod
    def from_env(cls, dotenv_path: str = None) -> "Settings":
        load_dotenv(dotenv_path)

        indent = os.getenv("TEXT2RULE_JSON_INDENT", "2")
        try:
            json_indent = int(indent)
        except ValueError:
            logging.getLogger(__name__).warning(f"Invalid TEXT2RULE_JSON_INDENT={indent!r}, using 2")
            json_indent = 2

        return cls(
            log_level=os.getenv("TEXT2RULE_LOG_LEVEL", "INFO").upper(),
            lead_policy_id=os.getenv("TEXT2RULE_LEAD_POLICY_ID") or None,
            json_indent=json_indent,
        )


def setup_logging(level: str = "INFO"):
    """Configure root logging in the package's format."""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
    )
