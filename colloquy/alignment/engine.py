"""Agent: the orchestrator tying matching, tools, journeys and generation.

Processing a user message:
1. Load the session and append the user message
2. Match guidelines and select the best one (or the fallback)
3. Store extracted parameters as context variables
4. Run the guideline's tools with timeout and retry
5. Render the response template, or ask the LLM when required
6. Append the reply and write the session back

Message and journey processing for one session is serialized by a
per-session mutex; different sessions run concurrently.
"""

import json
import time
from typing import Any
from uuid import UUID, uuid4

from colloquy.alignment.generation import PromptBuilder
from colloquy.alignment.journeys import JourneyManager, advance_state
from colloquy.alignment.matching import GuidelineMatcher
from colloquy.alignment.models import (
    Guideline,
    GuidelineAction,
    GuidelineMatch,
    Journey,
    JourneyState,
    JourneyStep,
    LiteralCondition,
)
from colloquy.alignment.result import AgentResponse, ResponseExplanation, ToolExecution
from colloquy.config import Settings, get_settings
from colloquy.config.models.agent import AgentConfig
from colloquy.config.models.providers import LLMProviderConfig
from colloquy.conversation.models import Context, Message, Session
from colloquy.conversation.store import SessionStore
from colloquy.conversation.stores import InMemorySessionStore
from colloquy.exceptions import (
    ConfigurationError,
    ConflictError,
    GuidelineNotFoundError,
    NoActiveJourneyError,
    SessionAlreadyExistsError,
    SessionNotFoundError,
    ToolError,
    error_details,
)
from colloquy.observability.logging import bound_context, get_logger
from colloquy.providers.embedding import EmbeddingProvider
from colloquy.providers.factory import create_embedding_provider, create_llm_provider
from colloquy.providers.llm import LLMProvider
from colloquy.tools import Tool, ToolRegistry
from colloquy.utils.locks import AsyncReadWriteLock, SessionMutex

logger = get_logger(__name__)

FALLBACK_RELEVANCE = 0.5
FALLBACK_EXPLANATION = "No matching guideline found, using fallback"


def _tool_message_content(output: Any) -> str:
    """Serialize a tool output for the conversation history.

    Outputs json cannot encode (non-string keys, cycles) fall back to repr.
    """
    try:
        return json.dumps(output, default=str)
    except (TypeError, ValueError):
        logger.debug("tool_output_not_json", output_type=type(output).__name__)
        return repr(output)


class Agent:
    """Conversational agent.

    Build one with ``Agent.builder()``:

        agent = (
            Agent.builder()
            .name("Support Bot")
            .provider(OpenAIProvider())
            .build()
        )
        session_id = await agent.create_session()
        response = await agent.process_message(session_id, "Hello")
    """

    def __init__(
        self,
        *,
        name: str,
        provider: LLMProvider,
        description: str | None = None,
        config: AgentConfig | None = None,
        session_store: SessionStore | None = None,
        embedding_provider: EmbeddingProvider | None = None,
        tool_registry: ToolRegistry | None = None,
        prompt_builder: PromptBuilder | None = None,
    ) -> None:
        self._id = uuid4()
        self._name = name
        self._description = description
        self._provider = provider
        self._config = config or AgentConfig()
        self._session_store = session_store or InMemorySessionStore()
        self._matcher = GuidelineMatcher(embedding_provider)
        self._tools = tool_registry or ToolRegistry()
        self._journeys = JourneyManager()
        self._prompt_builder = prompt_builder or PromptBuilder()

        self._journey_states: dict[UUID, JourneyState] = {}
        self._journey_lock = AsyncReadWriteLock()
        self._session_mutex = SessionMutex()

        self._fallback_guideline = Guideline(
            condition=LiteralCondition(text=""),
            action=GuidelineAction(
                response_template=self._config.fallback_response,
                requires_llm=True,
            ),
            priority=-1,
        )

    @classmethod
    def builder(cls) -> "AgentBuilder":
        return AgentBuilder()

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str | None:
        return self._description

    @property
    def config(self) -> AgentConfig:
        return self._config

    @property
    def provider(self) -> LLMProvider:
        return self._provider

    @property
    def tool_registry(self) -> ToolRegistry:
        return self._tools

    @property
    def journey_manager(self) -> JourneyManager:
        return self._journeys

    @property
    def fallback_guideline(self) -> Guideline:
        return self._fallback_guideline

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    async def create_session(self) -> UUID:
        """Create a new conversation session.

        Raises:
            SessionAlreadyExistsError: If the store already holds the id
        """
        session = Session(
            agent_id=self._id,
            context=Context(max_messages=self._config.max_context_messages),
        )
        try:
            await self._session_store.create(session)
        except ConflictError as e:
            raise SessionAlreadyExistsError(session.id) from e

        logger.info("session_created", session_id=str(session.id), agent=self._name)
        return session.id

    async def get_session(self, session_id: UUID) -> Session | None:
        return await self._session_store.get(session_id)

    async def end_session(self, session_id: UUID) -> None:
        """Mark a session completed and drop its journey state.

        Raises:
            SessionNotFoundError: If the session does not exist
        """
        async with self._session_mutex.acquire(session_id):
            session = await self._require_session(session_id)
            session.complete()
            await self._session_store.update(session_id, session)
            async with self._journey_lock.write():
                self._journey_states.pop(session_id, None)

        logger.info("session_ended", session_id=str(session_id))

    async def _require_session(self, session_id: UUID) -> Session:
        session = await self._session_store.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    # ------------------------------------------------------------------
    # Guidelines and tools
    # ------------------------------------------------------------------

    async def add_guideline(self, guideline: Guideline) -> UUID:
        return await self._matcher.add_guideline(guideline)

    async def remove_guideline(self, guideline_id: UUID) -> bool:
        return await self._matcher.remove_guideline(guideline_id)

    def get_guidelines(self) -> list[Guideline]:
        return self._matcher.get_guidelines()

    def get_guideline(self, guideline_id: UUID) -> Guideline:
        """Look up one guideline.

        Raises:
            GuidelineNotFoundError: If the id is not registered
        """
        guideline = self._matcher.get_guideline(guideline_id)
        if guideline is None:
            raise GuidelineNotFoundError(guideline_id)
        return guideline

    async def register_tool(self, tool: Tool) -> UUID:
        return await self._tools.register(tool)

    # ------------------------------------------------------------------
    # Journeys
    # ------------------------------------------------------------------

    async def add_journey(self, journey: Journey) -> UUID:
        return await self._journeys.add_journey(journey)

    async def start_journey(self, session_id: UUID, journey_id: UUID) -> JourneyState:
        """Start (or restart) a journey for a session.

        Raises:
            SessionNotFoundError: If the session does not exist
            JourneyNotFoundError: If the journey is not registered
        """
        await self._require_session(session_id)
        state = await self._journeys.start_journey(session_id, journey_id)
        async with self._journey_lock.write():
            self._journey_states[session_id] = state
        return state.model_copy(deep=True)

    async def get_journey_state(self, session_id: UUID) -> JourneyState | None:
        async with self._journey_lock.read():
            state = self._journey_states.get(session_id)
            return state.model_copy(deep=True) if state is not None else None

    async def end_journey(self, session_id: UUID) -> bool:
        """Drop a session's journey state; returns whether one existed."""
        async with self._journey_lock.write():
            return self._journey_states.pop(session_id, None) is not None

    async def process_journey_step(self, session_id: UUID, message: str) -> JourneyStep:
        """Advance the session's journey with a user message.

        The step being left is recorded as completed. If no transition
        applies, the journey is marked complete and the current step is
        returned again.

        Raises:
            SessionNotFoundError: If the session does not exist
            NoActiveJourneyError: If no journey was started for the session
            JourneyError: If the journey or step cannot be resolved
        """
        async with self._session_mutex.acquire(session_id):
            with bound_context(session_id=str(session_id)):
                session = await self._require_session(session_id)

                async with self._journey_lock.write():
                    state = self._journey_states.get(session_id)
                    if state is None:
                        raise NoActiveJourneyError(session_id)

                    current_step_id = state.current_step
                    step = await self._journeys.process_step(
                        state.journey_id, current_step_id, message, session.context
                    )
                    advance_state(state, current_step_id, step)

                logger.info(
                    "journey_step_processed",
                    journey_id=str(state.journey_id),
                    step=step.name,
                    is_complete=state.is_complete,
                )
                return step

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    async def process_message(self, session_id: UUID, user_message: str) -> AgentResponse:
        """Process a user message and generate a response.

        Raises:
            SessionNotFoundError: If the session does not exist
            ProviderError: If the LLM call fails
        """
        async with self._session_mutex.acquire(session_id):
            with bound_context(session_id=str(session_id)):
                return await self._process_message(session_id, user_message)

    async def _process_message(self, session_id: UUID, user_message: str) -> AgentResponse:
        session = await self._require_session(session_id)

        user_msg = Message.user(user_message)
        session.context.add_message(user_msg)

        matches = await self._matcher.match_guidelines(user_message, session.context)
        best = self._matcher.select_best_match(matches)
        guideline = self._matcher.get_guideline(best.guideline_id) if best else None

        if best is None or guideline is None:
            guideline = self._fallback_guideline
            selected = GuidelineMatch(
                guideline_id=guideline.id,
                relevance_score=FALLBACK_RELEVANCE,
                matched_condition="fallback",
                explanation=FALLBACK_EXPLANATION,
            )
        else:
            selected = best

        logger.info(
            "guideline_applied",
            guideline_id=str(guideline.id),
            priority=guideline.priority,
            candidates=len(matches),
            fallback=guideline is self._fallback_guideline,
        )

        context_updates: dict[str, Any] = {}
        for name, value in selected.extracted_parameters.items():
            session.context.set_variable(name, value, source_message_id=user_msg.id)
            context_updates[name] = value

        tools_used, tool_outputs = await self._run_tools(guideline, session)

        variables = {
            **session.context.variable_values(),
            "tool_outputs": tool_outputs,
        }
        if guideline.action.requires_llm:
            messages = self._prompt_builder.build_messages(
                self._name, self._description, guideline, session.context, variables
            )
            response_text = await self._provider.complete(messages)
        else:
            response_text = self._prompt_builder.render_response(
                guideline.action.response_template, variables
            )

        session.context.add_message(
            Message.assistant(response_text, guideline_id=str(guideline.id))
        )
        session.touch()
        await self._session_store.update(session_id, session)

        journey_step = None
        async with self._journey_lock.read():
            state = self._journey_states.get(session_id)
            if state is not None:
                journey_step = state.current_step

        explanation = None
        if self._config.enable_explainability:
            if guideline is self._fallback_guideline:
                reasoning = FALLBACK_EXPLANATION
            else:
                reasoning = (
                    f"Selected guideline with priority {guideline.priority} "
                    f"({selected.matched_condition})"
                )
            explanation = ResponseExplanation(
                guideline_matches=matches,
                reasoning=reasoning,
                confidence=selected.relevance_score,
            )

        return AgentResponse(
            message=response_text,
            matched_guideline=selected,
            tools_used=tools_used,
            journey_step=journey_step,
            context_updates=context_updates,
            explanation=explanation,
        )

    async def _run_tools(
        self, guideline: Guideline, session: Session
    ) -> tuple[list[ToolExecution], dict[str, Any]]:
        """Run a guideline's tools in order.

        Tool failures never abort the turn: they are logged, recorded on
        the ToolExecution and the next tool runs. Successful outputs are
        appended to the conversation as tool messages.
        """
        executions: list[ToolExecution] = []
        outputs: dict[str, Any] = {}
        available = session.context.variable_values()

        for tool_id in guideline.tools:
            tool = await self._tools.get(tool_id)
            tool_name = tool.name if tool is not None else str(tool_id)
            if tool is not None and tool.parameters:
                params = {k: v for k, v in available.items() if k in tool.parameters}
            else:
                params = dict(available)

            start = time.perf_counter()
            output: Any = None
            error: str | None = None
            try:
                result = await self._tools.execute_with_retry(
                    tool_id,
                    params,
                    timeout=self._config.default_tool_timeout,
                    max_retries=self._config.tool_max_retries,
                    base_backoff_ms=self._config.tool_retry_backoff_ms,
                )
                output, error = result.output, result.error
            except ToolError as e:
                error = e.message
                logger.warning(
                    "tool_skipped",
                    tool_name=tool_name,
                    **error_details(e),
                )

            executions.append(
                ToolExecution(
                    tool_id=tool_id,
                    tool_name=tool_name,
                    duration=time.perf_counter() - start,
                    output=output,
                    error=error,
                )
            )
            if error is None:
                outputs[tool_name] = output
                session.context.add_message(
                    Message.tool(
                        _tool_message_content(output),
                        tool_id=str(tool_id),
                        tool_name=tool_name,
                    )
                )

        return executions, outputs


class AgentBuilder:
    """Fluent builder for Agent; ``name`` and ``provider`` are required."""

    def __init__(self) -> None:
        self._name: str | None = None
        self._description: str | None = None
        self._provider: LLMProvider | None = None
        self._config: AgentConfig | None = None
        self._session_store: SessionStore | None = None
        self._embedding_provider: EmbeddingProvider | None = None
        self._tool_registry: ToolRegistry | None = None
        self._prompt_builder: PromptBuilder | None = None

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "AgentBuilder":
        """Pre-fill config and providers from application settings.

        Uses the default LLM provider, falling back to an OpenAI provider
        with default parameters when none is configured, and the default
        embedding provider when one is configured.
        """
        settings = settings or get_settings()
        providers = settings.providers

        builder = cls().config(settings.agent)
        llm_config = providers.llm.get(providers.default_llm) or LLMProviderConfig()
        builder.provider(create_llm_provider(llm_config))

        embedding_config = providers.embedding.get(providers.default_embedding)
        if embedding_config is not None:
            builder.embedding_provider(create_embedding_provider(embedding_config))
        return builder

    def name(self, name: str) -> "AgentBuilder":
        self._name = name
        return self

    def description(self, description: str) -> "AgentBuilder":
        self._description = description
        return self

    def provider(self, provider: LLMProvider) -> "AgentBuilder":
        self._provider = provider
        return self

    def config(self, config: AgentConfig) -> "AgentBuilder":
        self._config = config
        return self

    def session_store(self, store: SessionStore) -> "AgentBuilder":
        self._session_store = store
        return self

    def embedding_provider(self, provider: EmbeddingProvider) -> "AgentBuilder":
        self._embedding_provider = provider
        return self

    def tool_registry(self, registry: ToolRegistry) -> "AgentBuilder":
        self._tool_registry = registry
        return self

    def prompt_builder(self, builder: PromptBuilder) -> "AgentBuilder":
        self._prompt_builder = builder
        return self

    def build(self) -> Agent:
        """Create the agent.

        Raises:
            ConfigurationError: If name or provider is missing
        """
        if not self._name:
            raise ConfigurationError("Agent name is required")
        if self._provider is None:
            raise ConfigurationError("LLM provider is required")

        return Agent(
            name=self._name,
            provider=self._provider,
            description=self._description,
            config=self._config,
            session_store=self._session_store,
            embedding_provider=self._embedding_provider,
            tool_registry=self._tool_registry,
            prompt_builder=self._prompt_builder,
        )
