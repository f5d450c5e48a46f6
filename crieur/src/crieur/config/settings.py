"""
Configuration management for Crieur.

Hybrid configuration system using YAML files and environment variables.
Priority: Environment variables > YAML config > Pydantic defaults
"""

import os
from pathlib import Path
from typing import List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PROFILES = ("admin", "seller", "customer")


class Settings(BaseSettings):
    """
    Crieur configuration schema.

    Loads configuration from:
    1. Environment variables (highest priority)
    2. YAML configuration files
    3. Pydantic defaults (lowest priority)

    Configuration files:
        - config/default.yaml: Base defaults
        - config/production.yaml: Production overrides
        - config/development.yaml: Development overrides
        - config/test.yaml: Test overrides
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",
    )

    # Application
    APP_NAME: str = "Crieur"
    APP_VERSION: str = "0.1.0"
    ENV: str = Field(default="production", description="Environment name")
    DEBUG: bool = Field(default=False, description="Debug mode")

    # Backend
    server_url: str = Field(
        default="http://localhost:3000",
        description="Backend base URL (socket endpoint and REST root)",
    )
    namespace: str = Field(
        default="/notifications", description="Socket.IO namespace"
    )
    refresh_path: str = Field(
        default="/api/auth/refresh", description="REST token refresh path"
    )
    transports: List[str] = Field(default_factory=lambda: ["websocket"])
    connect_timeout: float = Field(
        default=10.0, gt=0, description="Seconds to wait for the handshake"
    )
    http_timeout: float = Field(
        default=15.0, gt=0, description="REST request timeout in seconds"
    )

    # Credentials
    access_token_key: str = Field(default="auth_token")
    refresh_token_key: str = Field(default="refresh_token")
    credential_file: Optional[str] = Field(
        default="~/.crieur/credentials.json",
        description="JSON credential file (None = in-memory store)",
    )
    expiry_leeway_seconds: int = Field(
        default=30,
        ge=0,
        description="Refresh tokens expiring within this margin",
    )
    reconnect_on_token_rotation: bool = Field(
        default=True,
        description="Reconnect the channel when a refresh rotates the token",
    )

    # Reconciliation
    profile: str = Field(default="admin", description="admin, seller or customer")
    notification_limit: int = Field(default=100, ge=1)
    notice_history: int = Field(default=50, ge=1)

    # Logging
    log_level: str = Field(default="info")
    log_dir: Optional[str] = Field(default=None)
    verbose: int = Field(default=1, ge=0, le=3)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = ["debug", "info", "warning", "error", "critical"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"Invalid log_level. Must be one of: {allowed}")
        return v_lower

    @field_validator("namespace")
    @classmethod
    def validate_namespace(cls, v: str) -> str:
        """Namespace must be a path."""
        if not v.startswith("/"):
            raise ValueError("namespace must start with '/'")
        return v.rstrip("/") or "/"

    @field_validator("transports")
    @classmethod
    def validate_transports(cls, v: List[str]) -> List[str]:
        """Only the websocket transport is supported (no polling fallback)."""
        if v != ["websocket"]:
            raise ValueError("transports must be ['websocket']")
        return v

    @field_validator("profile")
    @classmethod
    def validate_profile(cls, v: str) -> str:
        """Validate client profile."""
        v_lower = v.lower()
        if v_lower not in PROFILES:
            raise ValueError(f"Invalid profile. Must be one of: {list(PROFILES)}")
        return v_lower


def load_config(
    config_file: Optional[str] = None,
    env_file: Optional[str] = None,
    env: Optional[str] = None,
) -> Settings:
    """
    Load configuration from YAML files and environment variables.

    Priority: ENV vars > environment-specific YAML > default YAML > defaults

    Args:
        config_file: Optional YAML config filename override
        env_file: Optional .env filename (e.g., ".env.development")
        env: Optional environment name override

    Returns:
        Settings instance

    Raises:
        ValidationError: If a value fails validation
    """
    # Find component root (4 levels up from this file)
    current_file = Path(__file__).resolve()
    project_root = current_file.parent.parent.parent.parent
    config_dir = project_root / "config"

    # Determine environment (explicit parameter > ENV var > default)
    environment = env or os.getenv("ENV", "production")

    env_map = {
        "production": (".env.production", "production.yaml"),
        "development": (".env.development", "development.yaml"),
        "test": (".env.development", "test.yaml"),
    }

    default_env_file, default_config_file = env_map.get(
        environment, (".env.production", "production.yaml")
    )
    if env_file is None:
        env_file = default_env_file
    if config_file is None:
        config_file = default_config_file

    # Load .env file FIRST (before Settings initialization)
    env_file_path = project_root / env_file
    if env_file_path.exists():
        load_dotenv(env_file_path, override=True)

    merged_config = {}

    default_config_path = config_dir / "default.yaml"
    if default_config_path.exists():
        with open(default_config_path, "r") as f:
            loaded = yaml.safe_load(f)
            if loaded:
                merged_config = loaded

    # Environment-specific config overrides defaults, including None values
    env_config_path = config_dir / config_file
    if env_config_path.exists():
        with open(env_config_path, "r") as f:
            loaded = yaml.safe_load(f)
            if loaded:
                for key, value in loaded.items():
                    merged_config[key] = value

    merged_config.setdefault("ENV", environment)

    # Environment variables beat YAML (init kwargs would win otherwise)
    for key in list(merged_config):
        if key in os.environ:
            merged_config.pop(key)
    if env:
        merged_config["ENV"] = env

    return Settings(**merged_config)


# Global settings singleton (lazy initialization)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get or initialize global settings singleton.

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def override_settings(new_settings: Settings) -> None:
    """
    Override global settings (for testing).

    Args:
        new_settings: New Settings instance to use
    """
    global _settings
    _settings = new_settings


def reset_settings() -> None:
    """
    Reset settings to force re-initialization (for testing).

    This allows tests to change environment variables and reload config.
    """
    global _settings
    _settings = None
