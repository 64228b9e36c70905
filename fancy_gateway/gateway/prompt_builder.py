"""Persona injection for chat prompts.

Done once, centrally, so every provider receives the same instruction text
whatever its own API shape.
"""

from fancy_gateway.gateway.types import ChatMode

CODE_SYSTEM_PROMPT = "You are a senior expert software engineer."
DEFAULT_SYSTEM_PROMPT = "You are a powerful AI assistant."
SEPARATOR = "\n\n"


def system_prompt(mode: ChatMode) -> str:
    return CODE_SYSTEM_PROMPT if mode == ChatMode.CODE else DEFAULT_SYSTEM_PROMPT


def build_prompt(message: str, mode: ChatMode) -> str:
    return f"{system_prompt(mode)}{SEPARATOR}{message}"
