from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Reasoning model (Anthropic) used for planning and stack validation
    anthropic_api_key: str = ""
    planner_model: str = "claude-sonnet-4-5"
    planner_max_tokens: int = 4096
    validation_max_tokens: int = 2048

    # Search-augmented model (Perplexity, OpenAI-compatible API)
    perplexity_api_key: str = ""
    perplexity_base_url: str = "https://api.perplexity.ai"
    research_model: str = "sonar-pro"
    research_max_tokens: int = 2048
    research_temperature: float = 0.2

    # Pipeline bounds
    planner_timeout_seconds: float = 30.0
    research_timeout_seconds: float = 20.0
    max_research_queries: int = 20
    max_json_response_size: int = 50_000
    research_max_concurrency: int = 0  # 0 = unbounded fan-out

    # Supabase (auth + conversation store)
    supabase_url: str = ""
    supabase_anon_key: str = ""
    auth_disabled: bool = False

    # Rate limiting
    rate_limit_enabled: bool = True

    # App
    cors_origins: str = "http://localhost:3000"
    app_log_level: str = "INFO"
    noisy_log_level: str = "WARNING"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",")]


settings = Settings()
