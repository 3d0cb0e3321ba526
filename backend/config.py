import os
from pydantic_settings import BaseSettings

# verified iff score >= PASS_THRESHOLD; a skill test passes on the same mark
PASS_THRESHOLD = 60


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ORIGINS env var as comma-separated string or JSON list."""
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseSettings):
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    oracle_timeout_seconds: float = 45.0
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]
    debug: bool = False

    # Issuance rules
    question_count: int = 10

    # Record store
    database_url: str = "sqlite:///./credentials.db"

    # Blob store (Pinata IPFS pinning). Empty keys -> local content-addressed store.
    pinata_api_key: str = ""
    pinata_secret_key: str = ""
    pinata_api_url: str = "https://api.pinata.cloud"
    pinata_gateway_url: str = "https://gateway.pinata.cloud/ipfs"
    blob_timeout_seconds: float = 20.0

    # Rate limiting (request layer only)
    rate_limit_enabled: bool = True
    rate_limit_storage_uri: str = "memory://"
    rate_limit_verification: str = "10/hour"
    rate_limit_ai: str = "20/hour"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
