"""wagemini — WhatsApp ↔ Gemini relay with per-user conversation memory."""

__version__ = "0.1.0"
