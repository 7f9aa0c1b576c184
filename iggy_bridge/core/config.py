# iggy_bridge/core/config.py
import json
from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from iggy_bridge.domain.models.topology import Topology


class Settings(BaseSettings):
    """
    Central application settings loaded from environment variables (and .env).

    Notes
    -----
    - Broker variables keep the names used by existing deployments:
        IGGY_HOST, IGGY_PORT, IGGY_USERNAME, IGGY_PASSWORD
    - Stream/topic/partition values are fixed per deployment; the client
      never re-creates or resizes a topic once it exists.
    - `cors_allow_origins` accepts JSON array or comma-separated string.
    - Settings are frozen: supplied once at construction, immutable after.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # ---------- Iggy broker (TCP transport) ----------
    iggy_host: str = Field("127.0.0.1")
    iggy_port: int = Field(8090, ge=1, le=65535)
    iggy_username: str = "iggy"
    iggy_password: str = "iggy"

    # ---------- Topology ----------
    stream_name: str = Field("demo-stream", min_length=1)
    topic_name: str = Field("demo-topic", min_length=1)
    partition_count: int = Field(1, ge=1)
    partition_id: int = Field(1, ge=1)
    consumer_group: str = Field("demo-consumer-group", min_length=1)

    # ---------- Polling (HTTP layer policy) ----------
    poll_default_count: int = Field(10, ge=0)
    poll_max_count: int = Field(1000, ge=1)

    # ---------- Logging ----------
    log_level: str = "INFO"

    # ---------- CORS ----------
    cors_allow_origins: Annotated[list[str] | None, NoDecode] = None

    # ---------- Metrics (feature-flagged; default OFF) ----------
    metrics_enabled: bool = Field(
        default=False,
        description="Expose broker stats as Prometheus gauges on /metrics."
    )

    @field_validator("cors_allow_origins", mode="before")
    def _parse_cors_origins(cls, v):
        """Accept JSON array or comma-separated string."""
        if v is None:
            return None
        if isinstance(v, str):
            try:
                parsed = json.loads(v)  # JSON array
                if isinstance(parsed, list):
                    return [str(s).strip() for s in parsed if str(s).strip()]
            except ValueError:
                pass
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @property
    def iggy_address(self) -> str:
        """`host:port` form expected by the Iggy TCP client."""
        return f"{self.iggy_host}:{self.iggy_port}"

    def topology(self) -> Topology:
        """Build the deployment's fixed topology."""
        return Topology(
            stream=self.stream_name,
            topic=self.topic_name,
            partition_count=self.partition_count,
            partition_id=self.partition_id,
        )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()
