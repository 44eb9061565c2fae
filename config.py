"""Application configuration settings."""
from dataclasses import dataclass, field
from typing import List
import logging
import os

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass(frozen=True)
class Settings:
    """
    Process-wide configuration.

    Built once at startup and handed to the services that need it. Nothing
    mutates it afterwards.
    """
    secret_key: str = "your-secret-key-here-change-in-production"
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = "coze-chat-backend"
    access_token_expire_hours: int = 72
    coze_api_base: str = "https://api.coze.ai"
    coze_bot_id: str = "7563218003241058343"
    coze_token_file: str = "coze_token"
    coze_timeout: float = 30.0
    allowed_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables (and a .env file if present)."""
        load_dotenv()
        return cls(
            secret_key=os.getenv("SECRET_KEY", cls.secret_key),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", cls.jwt_algorithm),
            jwt_issuer=os.getenv("JWT_ISSUER", cls.jwt_issuer),
            access_token_expire_hours=int(os.getenv("ACCESS_TOKEN_EXPIRE_HOURS", cls.access_token_expire_hours)),
            coze_api_base=os.getenv("COZE_API_BASE", cls.coze_api_base).rstrip("/"),
            coze_bot_id=os.getenv("COZE_BOT_ID", cls.coze_bot_id),
            coze_token_file=os.getenv("COZE_TOKEN_FILE", cls.coze_token_file),
            coze_timeout=float(os.getenv("COZE_TIMEOUT", cls.coze_timeout)),
            allowed_origins=os.getenv("ALLOWED_ORIGINS", "*").split(","),
            log_level=os.getenv("LOG_LEVEL", cls.log_level),
        )

    def load_coze_token(self) -> str:
        """
        Read the provider credential from ``coze_token_file``.

        A missing or unreadable file yields an empty credential; provider calls
        will then be rejected upstream instead of failing here.
        """
        try:
            with open(self.coze_token_file, "r", encoding="utf-8") as f:
                return f.read().strip()
        except OSError as e:
            logger.warning(f"Could not read Coze token from {self.coze_token_file}: {e}")
            return ""


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger once for the whole process."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
