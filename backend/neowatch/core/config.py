from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    PROJECT_NAME: str = "NeoWatch"
    API_V1_STR: str = "/api/v1"

    NASA_API_KEY: str = "DEMO_KEY"
    NEOWS_BASE_URL: str = "https://api.nasa.gov/neo/rest/v1"

    # Concurrent in-flight requests; depends on where the app is running
    FETCH_MAX_WORKERS: int = 10
    FETCH_TIMEOUT_SECONDS: float = 30.0
    FETCH_DEADLINE_SECONDS: Optional[float] = None

    DEFAULT_LIMIT: int = 10
    LOG_LEVEL: str = "INFO"

    class Config:
        case_sensitive = True
        env_file = ".env"

settings = Settings()
