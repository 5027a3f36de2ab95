import os

from pathlib import Path
from typing import Any, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def model_post_init(self, __context: Any) -> None:
        """Ensure we pick up legacy environment variable aliases."""

        super().model_post_init(__context)

        if not self.nodit_api_key:
            fallback = os.getenv("NODIT_KEY")
            if fallback:
                object.__setattr__(self, "nodit_api_key", fallback)

    # Server Settings
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, description="Server port")
    log_level: str = Field(default="INFO", description="Logging level")

    # LLM Provider Settings
    llm_provider: str = Field(default="anthropic", description="Default LLM provider")
    anthropic_api_key: str = Field(default="", description="Anthropic API key")
    llm_model: str = Field(default="claude-sonnet-4-20250514", description="Default LLM model")
    max_tokens: int = Field(default=4000, description="Maximum tokens for LLM response")
    temperature: float = Field(default=0.7, description="LLM temperature setting")

    # Nodit Web3 Data API
    nodit_api_key: str = Field(
        default="",
        description="Nodit Web3 Data API key",
    )
    nodit_base_url: str = Field(
        default="https://web3.nodit.io/v1",
        description="Base URL for the Nodit Web3 Data API",
    )
    nodit_timeout_seconds: float = Field(default=20.0, description="Timeout for a single Nodit request")

    # Agent wallet
    agent_private_key: str = Field(
        default="",
        description="Hex private key of the agent wallet used for contract reads and writes",
    )
    default_chain_id: int = Field(default=84532, description="Chain used when a chat request omits chainId")
    contracts_file: Optional[str] = Field(
        default=None,
        description="Optional JSON file mapping chain id -> contract name -> {address, abi}",
    )

    # Auth
    jwt_secret: str = Field(default="", description="Secret used to sign session tokens")
    access_token_expire_minutes: int = Field(default=60, description="Access token lifetime")
    nonce_expire_minutes: int = Field(default=10, description="Sign-in nonce lifetime")
    nonce_store_max_entries: int = Field(default=10000, ge=1, description="Cap on outstanding sign-in nonces")

    # Chat
    chat_max_steps: int = Field(default=5, ge=1, description="Maximum model/tool rounds per chat request")
    chat_max_duration_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Upper bound on the wall-clock time of one chat request",
    )

    # Export
    export_dir: Optional[str] = Field(
        default=None,
        description="Directory where CLI exports are written (defaults to the working directory)",
    )

    @property
    def has_anthropic_key(self) -> bool:
        return bool(self.anthropic_api_key)

    @property
    def has_nodit_key(self) -> bool:
        return bool(self.nodit_api_key)

    @property
    def has_agent_wallet(self) -> bool:
        return bool(self.agent_private_key)

    @property
    def has_llm_key(self) -> bool:
        """Check if we have an API key for the configured LLM provider"""
        if self.llm_provider.lower() in ["anthropic", "claude"]:
            return self.has_anthropic_key
        return False


# Global settings instance
settings = Settings()
