from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "pushgate"
    debug: bool = False
    log_level: str = "INFO"

    # Outbound webhook delivery
    request_timeout: float = 10
    ssrf_protection: bool = True

    # CORS — comma-separated allowed origins (empty = allow all for dev)
    cors_origins: str = ""

    model_config = {"env_file": ".env", "env_prefix": "PUSHGATE_", "extra": "ignore"}


settings = Settings()
