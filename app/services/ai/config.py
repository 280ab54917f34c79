"""
AI Configuration

Handles configuration for the OpenAI client used to rank referral resources.
"""
import logging
import os
from typing import Optional
from pathlib import Path

from dotenv import load_dotenv
from openai import OpenAI

logger = logging.getLogger(__name__)

# Load .env regardless of how the app is started
project_root = Path(__file__).parent.parent.parent.parent
env_path = project_root / '.env'
if env_path.exists():
    load_dotenv(dotenv_path=env_path)
    logger.debug(f"[AI Config] .env loaded from {env_path}, OPENAI_API_KEY "
                 f"{'found' if os.getenv('OPENAI_API_KEY') else 'not found'}")


def get_openai_api_key() -> Optional[str]:
    """
    Get OpenAI API key from environment variable

    Returns:
        API key string or None if not set
    """
    return os.getenv("OPENAI_API_KEY")


def get_openai_client() -> OpenAI:
    """
    Get configured OpenAI client

    Raises:
        ValueError: If API key is not configured
    """
    api_key = get_openai_api_key()
    if not api_key:
        raise ValueError(
            "OPENAI_API_KEY environment variable not set. "
            "Please set it to use AI resource matching."
        )
    return OpenAI(api_key=api_key)


def get_default_model() -> str:
    return os.getenv("OPENAI_MODEL", "gpt-4o")


def is_ai_enabled() -> bool:
    """
    Check if AI features are enabled (API key configured)
    """
    return bool(get_openai_api_key())
