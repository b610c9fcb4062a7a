"""Configuration management for the HR agent.

This module provides centralized configuration using Pydantic Settings.
All services should use get_settings() instead of os.getenv() directly.
Configuration is loaded from environment variables and .env files.

Example:
    >>> from hr_agent_config import get_settings
    >>> settings = get_settings()
    >>> limit = settings.agent.recursion_limit
    >>> model_name = settings.llm.chat_model_name
"""

from enum import Enum
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment enum."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"


class DatabaseConfig(BaseSettings):
    """PostgreSQL database configuration for conversation checkpoints.

    Loads configuration from environment variables with POSTGRES_ prefix.
    Provides a computed connection string for SQLAlchemy.

    Attributes:
        host: Database host address
        port: Database port number
        db: Database name
        user: Database username
        password: Database password (required)
    """

    model_config = SettingsConfigDict(env_prefix="POSTGRES_")

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    db: str = Field(default="hr_database", description="Database name")
    user: str = Field(default="hragent", description="Database username")
    password: str = Field(description="Database password (required)")

    @property
    def connection_string(self) -> str:
        """Build PostgreSQL connection URL.

        Returns:
            PostgreSQL connection string for SQLAlchemy
        """
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.db}"


class QdrantConfig(BaseSettings):
    """Qdrant vector database configuration for the employee index.

    Loads configuration from environment variables with QDRANT_ prefix.

    Attributes:
        host: Qdrant host address
        port: Qdrant port number
        collection_name: Name of the employee vector collection
        text_key: Payload field holding the embedded text of a record
        vector_name: Named vector to search (None for the default vector)
    """

    model_config = SettingsConfigDict(env_prefix="QDRANT_")

    host: str = Field(default="localhost", description="Qdrant host")
    port: int = Field(default=6333, description="Qdrant port")
    collection_name: str = Field(
        default="employees",
        description="Employee vector collection name"
    )
    text_key: str = Field(
        default="embedding_text",
        description="Payload field with the text that was embedded"
    )
    vector_name: str | None = Field(
        default=None,
        description="Named vector to query (default vector if unset)"
    )

    @property
    def url(self) -> str:
        """Build Qdrant connection URL.

        Returns:
            Qdrant HTTP API URL
        """
        return f"http://{self.host}:{self.port}"


class LLMConfig(BaseSettings):
    """LLM configuration with environment-aware model selection.

    Automatically switches between Ollama (development) and OpenAI (production)
    based on the environment setting.

    Attributes:
        environment: Current application environment
        ollama_base_url: Ollama API base URL
        ollama_model: Ollama chat model name
        ollama_embedding_model: Ollama embedding model name
        openai_api_key: OpenAI API key (optional, required for production)
        openai_model: OpenAI chat model name
        openai_embedding_model: OpenAI embedding model name
    """

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment"
    )

    # Ollama configuration (development)
    ollama_base_url: str = Field(
        default="http://localhost:11434",
        description="Ollama API base URL"
    )
    ollama_model: str = Field(
        default="llama3.1",
        description="Ollama chat model (must support tool calling)"
    )
    ollama_embedding_model: str = Field(
        default="nomic-embed-text",
        description="Ollama embedding model"
    )

    # OpenAI configuration (production)
    openai_api_key: str | None = Field(
        default=None,
        description="OpenAI API key"
    )
    openai_model: str = Field(
        default="gpt-4o-mini",
        description="OpenAI chat model"
    )
    openai_embedding_model: str = Field(
        default="text-embedding-ada-002",
        description="OpenAI embedding model"
    )

    @property
    def is_local(self) -> bool:
        """Check if using local Ollama models.

        Returns:
            True if environment is development, False otherwise
        """
        return self.environment == Environment.DEVELOPMENT

    @property
    def chat_model_name(self) -> str:
        """Get the appropriate chat model name for current environment."""
        return self.ollama_model if self.is_local else self.openai_model

    @property
    def embedding_model_name(self) -> str:
        """Get the appropriate embedding model name for current environment."""
        return (
            self.ollama_embedding_model
            if self.is_local
            else self.openai_embedding_model
        )


class AgentSettings(BaseSettings):
    """Agent loop configuration.

    Loads configuration from environment variables with AGENT_ prefix.

    Attributes:
        recursion_limit: Maximum number of AGENT/TOOLS alternations per run
        temperature: Sampling temperature for the reasoning model
        system_message: Role description injected into the system prompt
    """

    model_config = SettingsConfigDict(env_prefix="AGENT_")

    recursion_limit: int = Field(
        default=15,
        ge=1,
        le=100,
        description="Maximum AGENT/TOOLS alternations before forced termination"
    )
    temperature: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="LLM temperature for the reasoning step"
    )
    system_message: str = Field(
        default="You are helpful HR Chatbot Agent.",
        description="Role description for the agent"
    )


class CheckpointSettings(BaseSettings):
    """Conversation checkpoint storage configuration.

    Loads configuration from environment variables with CHECKPOINT_ prefix.

    Attributes:
        backend: "postgres" for durable storage, "memory" for a process-local store
    """

    model_config = SettingsConfigDict(env_prefix="CHECKPOINT_")

    backend: Literal["postgres", "memory"] = Field(
        default="postgres",
        description="Checkpoint storage backend"
    )


class Settings(BaseSettings):
    """Master configuration class for the HR agent.

    Aggregates all configuration sections and provides access to them
    through properties. Loads configuration from environment variables
    and .env file.

    Attributes:
        environment: Current application environment (DEVELOPMENT/PRODUCTION)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow"
    )

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment"
    )

    @property
    def database(self) -> DatabaseConfig:
        """Get database configuration.

        Returns:
            DatabaseConfig instance with PostgreSQL settings
        """
        return DatabaseConfig()

    @property
    def qdrant(self) -> QdrantConfig:
        """Get Qdrant configuration.

        Returns:
            QdrantConfig instance with vector database settings
        """
        return QdrantConfig()

    @property
    def llm(self) -> LLMConfig:
        """Get LLM configuration.

        Returns:
            LLMConfig instance with environment-aware model settings
        """
        return LLMConfig(environment=self.environment)

    @property
    def agent(self) -> AgentSettings:
        """Get agent loop configuration."""
        return AgentSettings()

    @property
    def checkpoint(self) -> CheckpointSettings:
        """Get checkpoint storage configuration."""
        return CheckpointSettings()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns a singleton Settings instance that is cached after first call.
    This ensures configuration is loaded only once and reused across the
    application.

    Returns:
        Settings instance with all configuration sections

    Example:
        >>> settings = get_settings()
        >>> backend = settings.checkpoint.backend
        >>> is_dev = settings.llm.is_local
    """
    return Settings()


__all__ = [
    "Environment",
    "DatabaseConfig",
    "QdrantConfig",
    "LLMConfig",
    "AgentSettings",
    "CheckpointSettings",
    "Settings",
    "get_settings",
]
