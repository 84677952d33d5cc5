"""Persona loading — builds the system instruction sent with every completion."""

import json
import logging
from dataclasses import dataclass

logger = logging.getLogger("wagemini.persona")

DEFAULT_NAME = "Assistant"
DEFAULT_DESCRIPTION = "You are a helpful assistant."
DEFAULT_BASE_PROMPT = (
    "You are a helpful and concise AI assistant replying in a WhatsApp chat. "
    "Do not use Markdown formatting. Keep your answers short, friendly, and easy to read. "
    "If your response is longer than 3 lines, split it into multiple messages using \\n every 3 lines. "
    "Each \\n means a new WhatsApp message. Avoid long paragraphs or unnecessary explanations."
)


@dataclass(frozen=True)
class Persona:
    name: str
    system_instruction: str


def default_persona() -> Persona:
    return Persona(
        name=DEFAULT_NAME,
        system_instruction=f"{DEFAULT_BASE_PROMPT}\n\n{DEFAULT_DESCRIPTION}",
    )


def load_persona(path: str) -> Persona:
    """Load a persona from a JSON file.

    Recognised keys: ``name``, ``description``, ``base_prompt`` (all
    optional). The system instruction is the base prompt followed by the
    description. Any problem with the file falls back to the default
    persona; this never raises.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.warning(f"Persona file not found at {path}. Using default persona.")
        return default_persona()
    except json.JSONDecodeError:
        logger.error(f"Error decoding JSON from {path}. Using default persona.")
        return default_persona()
    except Exception as e:
        logger.error(f"Unexpected error loading persona from {path}: {e}. Using default persona.")
        return default_persona()

    if not isinstance(data, dict):
        logger.error(f"Persona file {path} must contain a JSON object. Using default persona.")
        return default_persona()

    description = data.get("description") or DEFAULT_DESCRIPTION
    base_prompt = data.get("base_prompt") or DEFAULT_BASE_PROMPT
    persona = Persona(
        name=data.get("name") or DEFAULT_NAME,
        system_instruction=f"{base_prompt}\n\n{description}",
    )
    logger.info(f"Loaded persona: {persona.name}")
    return persona
