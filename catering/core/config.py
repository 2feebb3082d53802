from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    MICROSOFT_APP_ID: str | None = None
    MICROSOFT_APP_PASSWORD: str | None = None
    MICROSOFT_APP_TENANT: str = "botframework.com"
    TOKEN_SERVICE_URL: str = "https://api.botframework.com"

    NOMINAL_CONNECTION_NAME: str = "NonSSOBotApp"
    SSO_CONNECTION_NAME: str = "BotApp"

    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL_RECOGNIZE: str = "gpt-4o-mini"
    OPENAI_TEMPERATURE_RECOGNIZE: float = 0.0

    DISPLAY_TIMEZONE: str = "America/Los_Angeles"
    RECENT_ORDERS_LIMIT: int = 10
    WELCOME_CHANNELS: list[str] = ["directline", "webchat"]
    ORDER_FLOW_ENABLED: bool = True
    REPLIES_ENABLED: bool = True

    DATA_DIR: str = "./data"
    CARDS_DIR: str | None = None

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"


settings = Settings()
