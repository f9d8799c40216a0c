import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Upstream
    upstream_base_url: str = os.getenv("UPSTREAM_BASE_URL", "https://indodax.com")
    upstream_domain: str = os.getenv("UPSTREAM_DOMAIN", "indodax.com")
    upstream_timeout: float = float(os.getenv("UPSTREAM_TIMEOUT", "8"))
    upstream_retry_timeout: float = float(os.getenv("UPSTREAM_RETRY_TIMEOUT", "10"))
    upstream_probe_timeout: float = float(os.getenv("UPSTREAM_PROBE_TIMEOUT", "5"))
    upstream_probe_path: str = os.getenv("UPSTREAM_PROBE_PATH", "/api/ticker/btc_idr")
    proxy_timeout: float = float(os.getenv("PROXY_TIMEOUT", "10"))
    # ⚠️ Certificate verification is off unless UPSTREAM_VERIFY_TLS=true
    upstream_verify_tls: bool = _env_bool("UPSTREAM_VERIFY_TLS", "false")

    # Cache (seconds)
    cache_ttl_ticker: float = float(os.getenv("CACHE_TTL_TICKER", "3"))
    cache_ttl_history: float = float(os.getenv("CACHE_TTL_HISTORY", "5"))
    cache_ttl_depth: float = float(os.getenv("CACHE_TTL_DEPTH", "2"))
    cache_single_flight: bool = _env_bool("CACHE_SINGLE_FLIGHT", "false")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "3000"))
    api_reload: bool = _env_bool("API_RELOAD", "false")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def cache_ttls(self) -> dict[str, float]:
        """TTL in seconds keyed by TTL class name."""
        return {
            "ticker": self.cache_ttl_ticker,
            "history": self.cache_ttl_history,
            "depth": self.cache_ttl_depth,
        }

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        for name, ttl in self.cache_ttls.items():
            if ttl <= 0:
                raise ValueError(f"CACHE_TTL_{name.upper()} must be positive, got {ttl}")

        for name in ("upstream_timeout", "upstream_retry_timeout", "upstream_probe_timeout", "proxy_timeout"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name.upper()} must be positive")

        if not self.upstream_base_url.startswith(("http://", "https://")):
            raise ValueError(f"UPSTREAM_BASE_URL must be an http(s) URL, got {self.upstream_base_url!r}")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once for the service process."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
