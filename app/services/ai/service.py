"""
AI Resource Matching Service

Constructs prompts and asks the LLM to rank referral resources for a
client's need. Any failure is raised to the caller, which falls back to
keyword matching.
"""
import json
import logging
import re
from typing import Dict, Any, Optional, List

from app.services.ai.config import get_openai_client, get_default_model

logger = logging.getLogger(__name__)

# Resources sent to the model per request
MAX_CANDIDATES = 20


class AIMatchError(Exception):
    """The model returned nothing usable"""


def build_system_prompt() -> str:
    return (
        "You are a social services case manager assistant for a community health nonprofit. "
        "Match a client to the most appropriate community resources. "
        "Only use the resources listed. Respond with a JSON array and nothing else."
    )


def build_user_prompt(service_needed: str, candidates: List[Dict[str, Any]],
                      client: Optional[Dict[str, Any]] = None, limit: int = 5) -> str:
    """
    Build the user prompt listing the need, client context and numbered resources

    Args:
        service_needed: Client need in plain words
        candidates: Active resources (numbered from 1 in the prompt)
        client: Optional stored client for language/location context
        limit: Maximum matches to request
    """
    lines = [f"CLIENT NEED: {service_needed}"]
    if client:
        lines.append(
            f"CLIENT INFO: Language: {client.get('primary_language') or 'English'}, "
            f"Location: SPA {client.get('spa') or 'Unknown'}, "
            f"Needs: {json.dumps(client.get('needs') or {})}"
        )

    lines.append("")
    lines.append("AVAILABLE RESOURCES:")
    for i, resource in enumerate(candidates, start=1):
        lines.append(
            f"{i}. {resource.get('resource_name')} - {resource.get('service_category') or ''} - "
            f"{resource.get('key_offerings') or ''} - Languages: {resource.get('languages_spoken') or ''} - "
            f"SPA: {resource.get('spa') or ''}"
        )

    lines.append("")
    lines.append(f"Return a JSON array of the top {limit} matches at most, with format:")
    lines.append('[{"index": 1, "score": 95, "reason": "Best match because..."}]')
    return "\n".join(lines)


def call_llm(system_prompt: str, user_prompt: str, model: Optional[str] = None) -> str:
    """
    Calls OpenAI with the constructed prompts

    Raises:
        ValueError: If the API key is not configured
        Exception: If the API call fails
    """
    client = get_openai_client()
    response = client.responses.create(
        model=model or get_default_model(),
        input=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt}
        ],
        max_output_tokens=600
    )
    return response.output_text.strip()


def parse_ranking(text: str, candidates: List[Dict[str, Any]], limit: int) -> List[Dict[str, Any]]:
    """
    Map the model's [{index, score, reason}] array back onto resources

    Entries pointing outside the candidate list are dropped.

    Raises:
        AIMatchError: If no JSON array is present or nothing maps
    """
    found = re.search(r"\[[\s\S]*\]", text or "")
    if not found:
        raise AIMatchError("AI response did not contain a JSON array")
    try:
        ranked = json.loads(found.group(0))
    except json.JSONDecodeError as exc:
        raise AIMatchError(f"AI response was not valid JSON: {exc}")

    matches = []
    for entry in ranked:
        if not isinstance(entry, dict):
            continue
        index = entry.get("index")
        if not isinstance(index, int) or index < 1 or index > len(candidates):
            continue
        resource = candidates[index - 1]
        matches.append({
            "resource_id": resource.get("id"),
            "resource_name": resource.get("resource_name") or "Unnamed resource",
            "match_score": float(entry.get("score") or 0),
            "match_reason": str(entry.get("reason") or ""),
        })
    if not matches:
        raise AIMatchError("AI response did not reference any listed resource")
    return matches[:limit]


def rank_resources_with_ai(service_needed: str, resources: List[Dict[str, Any]],
                           client: Optional[Dict[str, Any]] = None, limit: int = 5) -> List[Dict[str, Any]]:
    """
    Ask the model to rank active resources for a need

    Returns:
        Matches in the same shape as keyword matching
    """
    candidates = resources[:MAX_CANDIDATES]
    if not candidates:
        return []
    text = call_llm(build_system_prompt(), build_user_prompt(service_needed, candidates, client, limit))
    matches = parse_ranking(text, candidates, limit)
    logger.info(f"[AI MATCH] {len(matches)} matches for '{service_needed}'")
    return matches
