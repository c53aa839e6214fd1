from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # The listening address is the only thing read from the environment.
    host: str = Field(default="0.0.0.0", alias="DEMO_HOST")
    port: int = Field(default=8080, alias="DEMO_PORT")

    @property
    def addr(self) -> str:
        return f"{self.host}:{self.port}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
