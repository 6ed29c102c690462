# =============================================================================
# Clipboard VLM Chat - Centralized Configuration
# =============================================================================
# Provides a single Config dataclass holding the connection and sampling
# defaults for the clipboard chat client. Parameters are overridable via
# environment variables with the CLIPCHAT_ prefix (e.g., CLIPCHAT_SERVER_PORT=8080).
# Command-line flags take precedence over both.
# =============================================================================

import os
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Config:
    """
    Centralized configuration for the clipboard chat client.

    All fields can be overridden via environment variables prefixed with CLIPCHAT_.
    """

    # -- Networking (llama.cpp server) --
    server_host: str = "127.0.0.1"
    server_port: int = 7001
    request_timeout: float = 0.0  # 0 = no timeout, wait for generation

    # -- Sampling --
    temperature: float = 0.5
    n_predict: int = 1024

    # -- Derived (computed post-init) --
    server_url: str = field(init=False)

    def __post_init__(self):
        """Apply environment variable overrides and compute derived fields."""
        self._apply_env_overrides()
        self.server_url = f"http://{self.server_host}:{self.server_port}"

    def _apply_env_overrides(self):
        """
        Override config fields from environment variables.

        Looks for CLIPCHAT_<FIELD_NAME_UPPERCASE> environment variables and
        applies them with appropriate type conversion.
        """
        field_types = {
            "server_host": str,
            "server_port": int,
            "request_timeout": float,
            "temperature": float,
            "n_predict": int,
        }
        for field_name, field_type in field_types.items():
            env_key = f"CLIPCHAT_{field_name.upper()}"
            env_value = os.environ.get(env_key)
            if env_value is not None:
                try:
                    setattr(self, field_name, field_type(env_value))
                except ValueError:
                    raise ValueError(
                        f"invalid {field_type.__name__} in {env_key}: {env_value!r}"
                    ) from None


# ---------------------------------------------------------------------------
# Singleton accessor
# ---------------------------------------------------------------------------
_config_instance: Optional[Config] = None


def get_config() -> Config:
    """
    Return the singleton Config instance, creating it on first call.

    Returns:
        Config: The global configuration object.
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance


def reset_config() -> None:
    """Drop the cached Config so the next get_config() re-reads the environment."""
    global _config_instance
    _config_instance = None
