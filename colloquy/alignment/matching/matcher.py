"""Guideline matching and best-match selection.

Literal and regex conditions are answered by a PatternIndex in one pass
over the message; semantic conditions compare the message embedding
with each guideline description embedding.
"""

from collections.abc import Sequence
from uuid import UUID

from colloquy.alignment.matching.pattern_index import PatternIndex, compile_guideline_pattern
from colloquy.alignment.models import Guideline, GuidelineMatch, SemanticCondition
from colloquy.conversation.models import Context
from colloquy.exceptions import GuidelineError, error_details
from colloquy.observability.logging import get_logger
from colloquy.providers.embedding import EmbeddingProvider
from colloquy.utils.locks import AsyncReadWriteLock
from colloquy.utils.vector import cosine_similarity

logger = get_logger(__name__)

LITERAL_SCORE = 1.0
REGEX_SCORE = 0.9


class GuidelineMatcher:
    """Holds the guideline set and answers match queries.

    Mutations take the write lock and rebuild the pattern index inside it,
    so concurrent ``match_guidelines`` calls never see a half-built index.

    Selection order is priority descending, then ``created_at`` descending,
    then insertion order descending: among otherwise equal guidelines the
    one added last wins.
    """

    def __init__(self, embedding_provider: EmbeddingProvider | None = None) -> None:
        """Initialize the matcher.

        Args:
            embedding_provider: Enables semantic conditions when set
        """
        self._embedding_provider = embedding_provider
        self._lock = AsyncReadWriteLock()
        self._guidelines: list[Guideline] = []
        self._sequence: dict[UUID, int] = {}
        self._next_sequence = 0
        self._index = PatternIndex.empty()
        self._description_embeddings: dict[UUID, list[float]] = {}

    @property
    def semantic_enabled(self) -> bool:
        return self._embedding_provider is not None

    async def add_guideline(self, guideline: Guideline) -> UUID:
        """Add a guideline and rebuild the index.

        Raises:
            GuidelineError: If a guideline with the same id exists
            GuidelineCompilationError: If its regex does not compile
        """
        compile_guideline_pattern(guideline)

        description_embedding = None
        if isinstance(guideline.condition, SemanticCondition) and self._embedding_provider:
            description_embedding = await self._embedding_provider.embed_single(
                guideline.condition.description
            )

        async with self._lock.write():
            if guideline.id in self._sequence:
                raise GuidelineError(f"Guideline already exists: {guideline.id}")

            guidelines = [*self._guidelines, guideline]
            self._index = PatternIndex.build(guidelines)
            self._guidelines = guidelines
            self._sequence[guideline.id] = self._next_sequence
            self._next_sequence += 1
            if description_embedding is not None:
                self._description_embeddings[guideline.id] = description_embedding

        logger.info(
            "guideline_added",
            guideline_id=str(guideline.id),
            condition=guideline.condition.describe(),
            priority=guideline.priority,
        )
        return guideline.id

    async def remove_guideline(self, guideline_id: UUID) -> bool:
        """Remove a guideline; returns False if the id was not present."""
        async with self._lock.write():
            if guideline_id not in self._sequence:
                return False

            guidelines = [g for g in self._guidelines if g.id != guideline_id]
            self._index = PatternIndex.build(guidelines)
            self._guidelines = guidelines
            del self._sequence[guideline_id]
            self._description_embeddings.pop(guideline_id, None)

        logger.info("guideline_removed", guideline_id=str(guideline_id))
        return True

    def get_guidelines(self) -> list[Guideline]:
        """Snapshot of the current guidelines in insertion order."""
        return list(self._guidelines)

    def get_guideline(self, guideline_id: UUID) -> Guideline | None:
        for guideline in self._guidelines:
            if guideline.id == guideline_id:
                return guideline
        return None

    async def match_guidelines(
        self,
        message: str,
        context: Context | None = None,  # noqa: ARG002
    ) -> list[GuidelineMatch]:
        """Evaluate every guideline against the message.

        Literal matches score 1.0, regex matches 0.9 and semantic matches
        their cosine similarity. Embedding failures are logged and leave
        only the literal and regex matches.
        """
        async with self._lock.read():
            guidelines = self._guidelines
            index = self._index
            description_embeddings = dict(self._description_embeddings)

            matches: list[GuidelineMatch] = []

            for idx in sorted(index.match_literal(message)):
                guideline = guidelines[idx]
                matches.append(
                    GuidelineMatch(
                        guideline_id=guideline.id,
                        relevance_score=LITERAL_SCORE,
                        matched_condition=guideline.condition.describe(),
                        explanation="Exact literal match",
                    )
                )

            for idx, params in sorted(index.match_regex(message).items()):
                guideline = guidelines[idx]
                matches.append(
                    GuidelineMatch(
                        guideline_id=guideline.id,
                        relevance_score=REGEX_SCORE,
                        matched_condition=guideline.condition.describe(),
                        extracted_parameters=dict(params),
                        explanation="Regex pattern match",
                    )
                )

            if self._embedding_provider is not None and description_embeddings:
                matches.extend(
                    await self._match_semantic(message, guidelines, description_embeddings)
                )

        logger.debug("guidelines_matched", match_count=len(matches))
        return matches

    async def _match_semantic(
        self,
        message: str,
        guidelines: Sequence[Guideline],
        description_embeddings: dict[UUID, list[float]],
    ) -> list[GuidelineMatch]:
        if self._embedding_provider is None:
            return []
        try:
            message_embedding = await self._embedding_provider.embed_single(message)
        except Exception as e:
            logger.warning("semantic_matching_skipped", **error_details(e))
            return []

        matches = []
        for guideline in guidelines:
            condition = guideline.condition
            if not isinstance(condition, SemanticCondition):
                continue
            description_embedding = description_embeddings.get(guideline.id)
            if description_embedding is None:
                continue

            similarity = cosine_similarity(message_embedding, description_embedding)
            if similarity < condition.threshold:
                continue

            score = min(1.0, max(0.0, similarity))
            matches.append(
                GuidelineMatch(
                    guideline_id=guideline.id,
                    relevance_score=score,
                    semantic_score=score,
                    matched_condition=condition.describe(),
                    explanation=(
                        f"Semantic similarity {similarity:.3f} >= threshold {condition.threshold}"
                    ),
                )
            )
        return matches

    def select_best_match(self, matches: Sequence[GuidelineMatch]) -> GuidelineMatch | None:
        """Pick the winning match.

        Matches whose guideline has since been removed are ignored.
        Returns None when no candidate remains.
        """
        by_id = {g.id: g for g in self._guidelines}
        best: GuidelineMatch | None = None
        best_key: tuple[int, float, int] | None = None

        for match in matches:
            guideline = by_id.get(match.guideline_id)
            if guideline is None:
                continue
            key = (
                guideline.priority,
                guideline.created_at.timestamp(),
                self._sequence.get(guideline.id, -1),
            )
            if best_key is None or key > best_key:
                best, best_key = match, key

        if best is not None:
            logger.debug(
                "guideline_selected",
                guideline_id=str(best.guideline_id),
                priority=best_key[0] if best_key else None,
                candidates=len(matches),
            )
        return best
