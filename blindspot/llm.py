import logging

from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI

from blindspot.config import settings
from blindspot.credentials import get_api_key
from blindspot.errors import Timeout, UpstreamFailure

log = logging.getLogger(__name__)

_client: AsyncOpenAI | None = None

# Models that require max_completion_tokens instead of max_tokens.
_USES_MAX_COMPLETION_TOKENS = {"gpt-5", "gpt-5-mini", "gpt-5-nano", "gpt-5.1", "gpt-5.2",
                                "o1", "o1-mini", "o1-pro", "o3", "o3-mini", "o4-mini"}


def _needs_max_completion_tokens(model: str) -> bool:
    """Check if a model uses the newer max_completion_tokens parameter."""
    m = model.lower()
    for prefix in _USES_MAX_COMPLETION_TOKENS:
        if m == prefix or m.startswith(prefix + "-"):
            return True
    return False


def get_client() -> AsyncOpenAI:
    global _client
    if _client is None:
        cfg = settings.llm
        api_key = get_api_key()
        if not api_key:
            raise UpstreamFailure(
                "No LLM API key configured. Set BLINDSPOT_LLM__API_KEY or store one in the keychain."
            )
        _client = AsyncOpenAI(
            api_key=api_key,
            base_url=cfg.base_url or None,
            timeout=cfg.timeout_s,
            max_retries=0,
        )
    return _client


def reset_client() -> None:
    """Drop the cached client so the next call picks up a new key."""
    global _client
    _client = None


async def complete(prompt: str) -> str:
    """Send one user-role message and return the text of the reply.

    Exactly one request is made. Provider errors become UpstreamFailure,
    an expired wait becomes Timeout.
    """
    client = get_client()
    cfg = settings.llm

    kwargs: dict = {
        "model": cfg.model,
        "messages": [{"role": "user", "content": prompt}],
    }
    if _needs_max_completion_tokens(cfg.model):
        kwargs["max_completion_tokens"] = cfg.max_tokens
    else:
        kwargs["max_tokens"] = cfg.max_tokens

    try:
        resp = await client.chat.completions.create(**kwargs)
    except APITimeoutError as exc:
        raise Timeout(f"LLM request exceeded {cfg.timeout_s:g}s") from exc
    except APIStatusError as exc:
        raise UpstreamFailure(
            f"LLM request failed ({exc.status_code}): {exc.message}",
            status_code=exc.status_code,
        ) from exc
    except APIConnectionError as exc:
        raise UpstreamFailure(f"Failed to connect to LLM provider: {exc}") from exc

    if not resp.choices:
        raise UpstreamFailure("LLM returned no choices")
    choice = resp.choices[0]
    if choice.finish_reason == "length":
        log.warning("LLM reply hit the %d token limit", cfg.max_tokens)
    return choice.message.content or ""
