import logging
from typing import Any, Optional

import openai
from openai import OpenAI

logger = logging.getLogger(__name__)


class CompletionError(Exception):
    pass


def make_client(api_key: Optional[str], timeout: float = 120.0) -> OpenAI:
    # no retries: a failed request surfaces to the caller straight away
    try:
        return OpenAI(api_key=api_key, timeout=timeout, max_retries=0)
    except openai.OpenAIError as e:
        raise CompletionError(str(e)) from e


def generate_code(client: Any, prompt: str, model: str,
                  temperature: Optional[float] = None,
                  system: Optional[str] = None) -> str:
    """Send one chat completion request and return the first choice's text.

    ``temperature`` is left to the provider default when None.
    """
    messages = []
    if system:
        messages.append({"role": "system", "content": system})
    messages.append({"role": "user", "content": prompt})

    kwargs = {"model": model, "messages": messages}
    if temperature is not None:
        kwargs["temperature"] = temperature

    logger.info("Requesting completion from %s (temperature=%s)", model, temperature)
    try:
        r = client.chat.completions.create(**kwargs)
    except openai.OpenAIError as e:
        raise CompletionError(str(e)) from e

    if not r.choices:
        raise CompletionError("Completion response contained no choices")
    content = r.choices[0].message.content
    if content is None:
        raise CompletionError("Completion response contained no message content")
    return content.strip()
