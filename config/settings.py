from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Upstream providers (keys stay server-side, injected by the gateway)
    nansen_api_key: str = ""
    nansen_base_url: str = "https://api.nansen.ai/api/v1"
    moralis_api_key: str = ""
    moralis_base_url: str = "https://deep-index.moralis.io/api/v2.2"

    # Gateway
    gateway_host: str = "0.0.0.0"
    gateway_port: int = 3001
    gateway_url: str = "http://localhost:3001/api"
    cors_origins: str = "*"  # Comma-separated
    analysis_rate_limit: str = "60/minute"
    shutdown_timeout_sec: int = 5

    # Logging
    log_dir: str = "logs"

    # HTTP clients
    http_timeout_sec: float = 30.0
    nansen_max_rps: float = 10.0
    moralis_max_rps: float = 10.0

    # Chain identifiers (Nansen and Moralis name BSC differently)
    chain: str = "bnb"
    moralis_chain: str = "bsc"

    # Token analysis
    max_tokens: int = 5
    leaderboard_lookback_days: int = 7
    leaderboard_limit: int = 10
    leaderboard_min_realised_pnl_usd: float = 100.0
    leaderboard_min_holding_usd: float = 0.0
    holders_min_value_usd: float = 50.0

    # Wallet detail
    wallet_lookback_days: int = 90
    wallet_batch_size: int = 10
    portfolio_min_value_usd: float = 1.0
    moralis_token_limit: int = 100
    moralis_min_pair_liquidity_usd: float = 500.0

    # Cross-token views
    top_tokens_limit: int = 5
    cross_nodes_limit: int = 15


settings = Settings()
