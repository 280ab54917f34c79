"""
AI service module

Contains AI/LLM configuration and resource ranking logic.
"""

from app.services.ai.config import (
    get_openai_api_key,
    get_openai_client,
    get_default_model,
    is_ai_enabled,
)

from app.services.ai.service import (
    AIMatchError,
    build_system_prompt,
    build_user_prompt,
    call_llm,
    parse_ranking,
    rank_resources_with_ai,
)

__all__ = [
    "get_openai_api_key",
    "get_openai_client",
    "get_default_model",
    "is_ai_enabled",
    "AIMatchError",
    "build_system_prompt",
    "build_user_prompt",
    "call_llm",
    "parse_ranking",
    "rank_resources_with_ai",
]
