"""Prompt Builder - Construct the chat messages for commit message generation."""

from dataclasses import dataclass

from autocommit import COMMIT_TYPES


@dataclass
class PromptConfig:
    """User-provided context that shapes the prompt."""
    hint: str | None = None
    forced_type: str | None = None
    include_body: bool = True
    max_subject_length: int = 72


class PromptBuilder:
    """Builds the [system, user] message pair sent to the completion API."""

    def build(self, diff: str, config: PromptConfig | None = None) -> list[dict]:
        config = config or PromptConfig()
        return [
            {"role": "system", "content": self.build_system_message(config)},
            {"role": "user", "content": self.build_user_message(diff)},
        ]

    def build_system_message(self, config: PromptConfig) -> str:
        sections = [
            self._build_role_section(),
            self._build_format_section(config),
            self._build_hints_section(config),
            self._build_final_instructions(),
        ]
        return "\n\n".join(filter(None, sections))

    def build_user_message(self, diff: str) -> str:
        return f"Here is the git diff:\n\n{diff}"

    def _build_role_section(self) -> str:
        return """You are an expert at writing git commit messages. Generate a concise commit message in conventional commit format based on the provided diff. Focus on the main changes and their impact."""

    def _build_format_section(self, config: PromptConfig) -> str:
        max_len = config.max_subject_length
        if config.include_body:
            body_rule = ("- For large or mixed diffs, add a blank line and a short body of "
                         "\"- \" bullets, one per notable change")
        else:
            body_rule = "- Do NOT include a body or bullet points. Subject line only."

        return f"""<format>
type(scope): subject

Rules:
- Subject in imperative present tense ("add", not "added" or "adds")
- No trailing period on the subject
- Keep the whole first line within {max_len} characters
- Scope is ONE word naming the affected module or component
{body_rule}

{self._build_type_instruction(config.forced_type)}
</format>"""

    def _build_type_instruction(self, forced_type: str | None) -> str:
        if forced_type:
            return f"IMPORTANT: Use type '{forced_type}' for this commit."
        types_list = "\n".join(f"  - {t}: {desc}" for t, desc in COMMIT_TYPES.items())
        return f"Choose the most appropriate type:\n{types_list}"

    def _build_hints_section(self, config: PromptConfig) -> str:
        if not config.hint:
            return ""

        return f"""<context>
The developer provided this context about the changes:
"{config.hint}"

Use this to inform your message, but verify it matches what you see in the diff.
</context>"""

    def _build_final_instructions(self) -> str:
        return """<instructions>
- Start directly with the type(scope): subject line
- No markdown formatting (no ```, no bold)
- No preamble like "Here's a commit message:"
- No explanation after the message
</instructions>"""
