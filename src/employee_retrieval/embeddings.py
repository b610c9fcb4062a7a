"""Environment-aware embedding model selection.

The agent only depends on the LangChain ``Embeddings`` interface
(``embed_query`` for a single text, ``embed_documents`` for a batch), so tests
can substitute ``DeterministicFakeEmbedding`` without touching the graph.
"""

import logging

from langchain_core.embeddings import Embeddings
from langchain_ollama import OllamaEmbeddings
from langchain_openai import OpenAIEmbeddings

from hr_agent_config import Settings, get_settings

logger = logging.getLogger(__name__)


def build_embeddings(settings: Settings | None = None) -> Embeddings:
    """Create the embedding model for the current environment.

    Uses Ollama in development and OpenAI in production. Query vectors and
    indexed document vectors must come from the same model, so both the
    employee_lookup tool and the indexer go through this function.

    Args:
        settings: Optional settings override (defaults to get_settings())

    Returns:
        LangChain Embeddings instance
    """
    settings = settings or get_settings()

    if settings.llm.is_local:
        logger.info("Using Ollama embeddings for development")
        return OllamaEmbeddings(
            base_url=settings.llm.ollama_base_url,
            model=settings.llm.embedding_model_name
        )

    logger.info("Using OpenAI embeddings for production")
    return OpenAIEmbeddings(
        api_key=settings.llm.openai_api_key,
        model=settings.llm.embedding_model_name
    )
