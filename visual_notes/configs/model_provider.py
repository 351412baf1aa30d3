"""
Generative model provider settings.

Connection details for the OpenAI-compatible chat-completions service
(OpenRouter by default) that backs every pipeline stage.

Dependencies: pydantic, pydantic_settings
System role: Outbound model service configuration
"""

from pydantic import Field

from visual_notes.configs.base import BaseSettings, settings_config


class ModelProviderSettings(BaseSettings):
    """Chat-completions provider configuration."""

    model_config = settings_config("OPENROUTER_")

    api_key: str | None = Field(default=None, description="Provider API key")
    model: str = Field(
        default="anthropic/claude-sonnet-4",
        description="Model identifier sent with every completion request",
    )
    base_url: str = Field(
        default="https://openrouter.ai/api/v1",
        description="Base URL of the chat-completions API",
    )
    app_url: str = Field(
        default="http://localhost:5173",
        description="Sent as HTTP-Referer for provider attribution",
    )
    app_title: str = Field(
        default="Visual Notes",
        description="Sent as X-Title for provider attribution",
    )
