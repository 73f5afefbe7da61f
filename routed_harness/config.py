from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    routed_host: str = "http://127.0.0.1:5000"
    routed_profile: str = "car"
    routed_timeout_seconds: float = 2.0

    model_config = {"env_prefix": "", "case_sensitive": False}


settings = Settings()
