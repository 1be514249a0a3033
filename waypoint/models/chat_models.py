from langchain_openai import ChatOpenAI
import requests
import logging
from waypoint.config import settings

logger = logging.getLogger(__name__)


def get_llm():
    """Return the chat model used by both assistants (OpenAI, or a vLLM server when reachable)."""
    if settings.LLM_BACKEND in ("auto", "vllm") and settings.VLLM_ENDPOINT:
        try:
            response = requests.get(f"{settings.VLLM_ENDPOINT}/models", timeout=2)
            if response.status_code == 200:
                logger.info(f"vLLM server detected: {settings.VLLM_ENDPOINT}")
                return ChatOpenAI(
                    model=settings.VLLM_MODEL_NAME,
                    api_key="EMPTY",
                    base_url=settings.VLLM_ENDPOINT,
                    temperature=settings.LLM_TEMPERATURE,
                    streaming=True,
                )
        except requests.RequestException as e:
            logger.warning(f"vLLM server unreachable, falling back to OpenAI: {e}")

    return ChatOpenAI(
        model=settings.OPENAI_MODEL,
        temperature=settings.LLM_TEMPERATURE,
        api_key=settings.OPENAI_API_KEY or None,
        streaming=True,
    )
