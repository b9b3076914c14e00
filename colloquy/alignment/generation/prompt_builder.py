"""Response rendering and LLM prompt assembly.

Guideline response templates and the system prompt are Jinja2 templates.
Templates see the session's context variables, the parameters extracted
for this turn and ``tool_outputs`` (tool name -> output).
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

from colloquy.alignment.models import Guideline
from colloquy.conversation.models import Context
from colloquy.observability.logging import get_logger
from colloquy.providers.llm import LLMMessage

logger = get_logger(__name__)

_TEMPLATES_DIR = Path(__file__).parent / "templates"
_SYSTEM_PROMPT_TEMPLATE = "system_prompt.jinja2"


class PromptBuilder:
    """Render guideline templates and build LLM message lists."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        """Initialize the prompt builder.

        Args:
            templates_dir: Directory holding system_prompt.jinja2
        """
        self._env = Environment(
            loader=FileSystemLoader(str(templates_dir or _TEMPLATES_DIR)),
            autoescape=select_autoescape(["html", "xml"], default_for_string=False),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
        )

    def render_response(self, template: str, variables: Mapping[str, Any]) -> str:
        """Render a response template.

        Missing variables render as empty strings. A template that fails
        to render is returned verbatim.
        """
        try:
            return self._env.from_string(template).render(**variables)
        except TemplateError as e:
            logger.warning("response_template_render_failed", error=str(e))
            return template

    def build_system_prompt(self, agent_name: str, agent_description: str | None) -> str:
        template = self._env.get_template(_SYSTEM_PROMPT_TEMPLATE)
        return template.render(
            agent_name=agent_name,
            agent_description=agent_description,
        ).strip()

    def build_messages(
        self,
        agent_name: str,
        agent_description: str | None,
        guideline: Guideline,
        context: Context,
        variables: Mapping[str, Any] | None = None,
    ) -> list[LLMMessage]:
        """Build the message list for the LLM.

        Order: agent system prompt, the guideline instruction, then the
        conversation history (which already holds the current user turn).
        """
        instruction = self.render_response(guideline.action.response_template, variables or {})
        messages = [
            LLMMessage(
                role="system",
                content=self.build_system_prompt(agent_name, agent_description),
            ),
            LLMMessage(role="system", content=f"Guideline: {instruction}"),
        ]
        messages.extend(
            LLMMessage(role=message.role.value, content=message.content)
            for message in context.messages
        )
        return messages
