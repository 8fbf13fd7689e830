import json
import logging
import re
from typing import Any, Dict, Optional

# LangChain Imports
from langchain_ollama import ChatOllama
from langchain_openai import ChatOpenAI
from langchain_core.messages import HumanMessage, SystemMessage

# Configuration
from coachtrack.config import LLM_PROVIDER, LLM_API_KEY, LLM_MODEL as OVERRIDE_MODEL, OLLAMA_URL

logger = logging.getLogger(__name__)

# Vision-capable defaults; LLM_MODEL overrides
DEFAULT_MODELS = {
    "ollama": "llava:13b",
    "openrouter": "google/gemini-2.0-flash-001",
    "openai": "gpt-4o",
}

MODEL_NAME = OVERRIDE_MODEL if OVERRIDE_MODEL else DEFAULT_MODELS.get(LLM_PROVIDER, "gpt-4o")

# Base URLs for paid providers
PROVIDER_URLS = {
    "openrouter": "https://openrouter.ai/api/v1",
    "openai": None  # Uses default OpenAI URL
}


class LLMError(Exception):
    """The model could not be reached or returned something unusable."""


def get_llm(temperature: float = 0.2, max_tokens: int = 4000, json_mode: bool = False):
    """
    Factory function to get a configured LangChain Chat Model instance.
    Supports: Ollama (Local), OpenRouter, OpenAI
    """
    if LLM_PROVIDER in ["openrouter", "openai"]:
        if not LLM_API_KEY:
            logger.error(f"Missing API key for LLM provider {LLM_PROVIDER}")

        model_kwargs = {}
        if json_mode:
            model_kwargs["response_format"] = {"type": "json_object"}

        return ChatOpenAI(
            model=MODEL_NAME,
            api_key=LLM_API_KEY,
            base_url=PROVIDER_URLS.get(LLM_PROVIDER),
            temperature=temperature,
            max_tokens=max_tokens,
            model_kwargs=model_kwargs,
            timeout=60.0
        )

    if LLM_PROVIDER != "ollama":
        logger.warning(f"Unknown LLM provider '{LLM_PROVIDER}', defaulting to Ollama")

    return ChatOllama(
        base_url=OLLAMA_URL,
        model=MODEL_NAME,
        temperature=temperature,
        num_predict=max_tokens,
        format="json" if json_mode else "",
        timeout=120.0
    )


def strip_data_url(image: str) -> str:
    """Drop a data:image/...;base64, prefix if present."""
    return re.sub(r"^data:image/\w+;base64,", "", (image or "").strip())


def call_vision_json(system_prompt: str, user_prompt: str, image_base64: str) -> Dict[str, Any]:
    """Send one image plus instructions and parse the JSON object the model returns."""
    logger.info(f"Calling vision model {MODEL_NAME} ({LLM_PROVIDER})")

    llm = get_llm(json_mode=True)
    messages = [
        SystemMessage(content=system_prompt),
        HumanMessage(content=[
            {"type": "text", "text": user_prompt},
            {"type": "image_url", "image_url": {"url": f"data:image/jpeg;base64,{image_base64}"}},
        ]),
    ]

    try:
        response = llm.invoke(messages)
    except Exception as e:
        logger.exception(f"LLM call failed: {e}")
        raise LLMError("AI service unavailable") from e

    data = _parse_json_from_text(response.content or "")
    if data is None:
        logger.error(f"Unparseable LLM response: {str(response.content)[:500]}")
        raise LLMError("AI returned an invalid response")
    return data


def _parse_json_from_text(text: str) -> Optional[Dict]:
    """Extract the first JSON object from model output, tolerating code fences and trailing commas."""
    cleaned_text = text.strip()

    # Strip Markdown Code Blocks
    if "```json" in cleaned_text:
        parts = cleaned_text.split("```json")
        if len(parts) > 1:
            cleaned_text = parts[1].split("```")[0].strip()
    elif "```" in cleaned_text:
        cleaned_text = cleaned_text.replace("```", "").strip()

    start_idx = cleaned_text.find('{')
    end_idx = cleaned_text.rfind('}')

    if start_idx != -1 and end_idx != -1:
        cleaned_text = cleaned_text[start_idx:end_idx + 1]

    try:
        return json.loads(cleaned_text)
    except json.JSONDecodeError as e:
        logger.warning(f"Initial JSON parse failed ({e}), attempting repair")

    repaired_text = re.sub(r',\s*}', '}', cleaned_text)
    repaired_text = re.sub(r',\s*]', ']', repaired_text)
    repaired_text = re.sub(r"(?<=[{,\[])\s*'([^']+)'\s*:", r'"\1":', repaired_text)

    try:
        return json.loads(repaired_text)
    except json.JSONDecodeError:
        return None
