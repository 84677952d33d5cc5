"""Tests for persona loading."""

import json

from wagemini.persona import load_persona, DEFAULT_BASE_PROMPT, DEFAULT_DESCRIPTION, DEFAULT_NAME


class TestLoadPersona:
    """Persona file handling — never raises."""

    def test_full_persona(self, tmp_path):
        path = tmp_path / "persona.json"
        path.write_text(json.dumps({
            "name": "Sam",
            "description": "You are Sam, a barista.",
            "base_prompt": "Reply briefly.",
        }), encoding="utf-8")

        persona = load_persona(str(path))

        assert persona.name == "Sam"
        assert persona.system_instruction == "Reply briefly.\n\nYou are Sam, a barista."

    def test_partial_persona_uses_default_base_prompt(self, tmp_path):
        path = tmp_path / "persona.json"
        path.write_text(json.dumps({"description": "Be kind."}), encoding="utf-8")

        persona = load_persona(str(path))

        assert persona.name == DEFAULT_NAME
        assert persona.system_instruction == f"{DEFAULT_BASE_PROMPT}\n\nBe kind."

    def test_missing_file(self, tmp_path):
        persona = load_persona(str(tmp_path / "nope.json"))
        assert persona.system_instruction.endswith(DEFAULT_DESCRIPTION)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "persona.json"
        path.write_text("{broken", encoding="utf-8")
        assert load_persona(str(path)).name == DEFAULT_NAME

    def test_non_object(self, tmp_path):
        path = tmp_path / "persona.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert load_persona(str(path)).name == DEFAULT_NAME

    def test_default_prompt_asks_for_literal_breaks(self):
        assert "\\n" in DEFAULT_BASE_PROMPT
