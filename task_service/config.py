import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 3000
    redis_host: str = "redis"
    redis_port: int = 6379
    redis_db: int = 0
    user_service_base: Optional[str] = None
    api_prefix: str = "/api/v1"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            redis_host=os.getenv("REDIS_HOST", "redis"),
            redis_port=int(os.getenv("REDIS_PORT", "6379")),
            redis_db=int(os.getenv("REDIS_DB", "0")),
            # empty string means "not configured", same as unset
            user_service_base=os.getenv("USER_SERVICE_BASE") or None,
            api_prefix=os.getenv("API_PREFIX", "/api/v1").rstrip("/"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
