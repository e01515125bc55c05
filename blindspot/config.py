from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="BLINDSPOT_LLM__",
        env_file=".env",
        extra="ignore",
    )

    api_key: str = ""
    base_url: str = ""
    model: str = "gpt-4o-mini"
    max_tokens: int = 3000
    timeout_s: float = 60.0


class MatrixConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="BLINDSPOT_MATRIX__",
        env_file=".env",
        extra="ignore",
    )

    size: float = 400.0
    margin: float = 50.0
    inset: float = 10.0
    jitter: int = 15


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    llm: LLMConfig = LLMConfig()
    matrix: MatrixConfig = MatrixConfig()


settings = Settings()
