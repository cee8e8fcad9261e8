# config.py
"""
Service Settings
- Listening address
- Log level
- CORS origins
"""

from typing import List
from pydantic import Field
from pydantic_settings import BaseSettings

class ServiceSettings(BaseSettings):
    HOST: str = Field(
        default="0.0.0.0",
        description="Interface the API binds to"
    )
    PORT: int = Field(
        default=3000,
        description="Listening port"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level"
    )
    CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Allowed browser origins (JSON list in the environment)"
    )

settings = ServiceSettings()
