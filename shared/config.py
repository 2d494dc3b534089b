# shared/config.py
import os
from dataclasses import dataclass

STORAGE_BACKENDS = ("memory", "postgres")
ENGINE_MODES = ("per_request", "shared")

def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"

@dataclass(frozen=True)
class Settings:
    """Runtime settings read from the environment"""
    log_level: str = "INFO"
    json_logs: bool = True
    storage_backend: str = "memory"
    database_url: str = "postgresql://localhost:5432/request_workflow"
    engine_mode: str = "per_request"
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    def __post_init__(self):
        if self.storage_backend not in STORAGE_BACKENDS:
            raise ValueError(f"Unsupported STORAGE_BACKEND: {self.storage_backend}")
        if self.engine_mode not in ENGINE_MODES:
            raise ValueError(f"Unsupported ENGINE_MODE: {self.engine_mode}")

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            json_logs=_env_flag("JSON_LOGS", "true"),
            storage_backend=os.getenv("STORAGE_BACKEND", "memory").lower(),
            database_url=os.getenv("DATABASE_URL", "postgresql://localhost:5432/request_workflow"),
            engine_mode=os.getenv("ENGINE_MODE", "per_request").lower(),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            reload=_env_flag("RELOAD", "false"),
        )
