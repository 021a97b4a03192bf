from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # App
    APP_NAME: str = "NovaSettle Loan Marketplace"
    DEBUG: bool = False  # Safe default for production; set DEBUG=True in .env for local dev
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    # Marketplace view freshness (seconds between polls of GET /listings)
    POLL_INTERVAL_SECONDS: float = 3.0

    # Simulated KYC. When KYC_ENFORCED is False the gate is checked by the
    # client-side actions only.
    KYC_DELAY_SECONDS: float = 2.0
    KYC_ENFORCED: bool = False

    # Demo data loaded into a fresh store at startup
    SEED_EXAMPLE_LISTINGS: bool = True

    # Ledger: "simulated" or "rpc" (balance + health from a Solana RPC node)
    LEDGER_BACKEND: str = "simulated"
    SOLANA_RPC_URL: str = "https://api.devnet.solana.com"
    LEDGER_TIMEOUT_SECONDS: float = 10.0


settings = Settings()
