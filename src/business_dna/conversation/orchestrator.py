"""
Conversation orchestrator: one assistant turn from user message to stored reply.

Per turn: Idle -> ContextAssembled -> AwaitingProvider -> Completed | Failed.

Messages are never edited. A completed turn stores the user message and the
assistant message that replies to it. A failed turn stores only the user
message, flagged retryable; it stays pending until a later assistant message
replies to it.
"""

import asyncio
import logging
import weakref
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from business_dna.actions import ActionSuggestionExtractor
from business_dna.config import Settings, get_settings
from business_dna.conversation.prompts import build_system_prompt
from business_dna.errors import CacheBuildFailure, ConversationNotFoundError, ProviderError
from business_dna.memory_service import MemoryService
from business_dna.models import (
    BehavioralProfile,
    Conversation,
    Message,
    ProviderConfig,
    SuggestedAction,
)
from business_dna.profile.service import ProfileService
from business_dna.providers.gateway import ProviderGateway
from business_dna.providers.selection import ProviderSelector
from business_dna.storage.protocols import ConversationStore

logger = logging.getLogger(__name__)

FAILURE_NOTICE = (
    "The assistant could not answer this message. Your message was saved and can be retried."
)
TITLE_MAX_CHARS = 50

ProviderChoice = Union[str, ProviderConfig, None]


class TurnState(str, Enum):
    IDLE = "idle"
    CONTEXT_ASSEMBLED = "context_assembled"
    AWAITING_PROVIDER = "awaiting_provider"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class TurnResult:
    """Outcome of one conversational turn."""

    conversation_id: str
    state: TurnState
    user_message_id: str
    content: Optional[str] = None
    suggested_actions: List[SuggestedAction] = field(default_factory=list)
    model_used: Optional[str] = None
    tokens_used: Optional[int] = None
    confidence: Optional[int] = None
    failure_notice: Optional[str] = None
    error: Optional[ProviderError] = None
    transitions: List[TurnState] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.state == TurnState.COMPLETED


def pending_retry(messages: List[Message]) -> List[Message]:
    """Failed user messages that no assistant message has replied to yet."""
    answered = {m.reply_to for m in messages if m.role == "assistant" and m.reply_to}
    return [m for m in messages if m.role == "user" and m.retryable and m.id not in answered]


class ConversationOrchestrator:
    def __init__(
        self,
        profiles: ProfileService,
        memories: MemoryService,
        conversations: ConversationStore,
        gateway: ProviderGateway,
        selector: ProviderSelector,
        extractor: Optional[ActionSuggestionExtractor] = None,
        settings: Optional[Settings] = None,
    ):
        self.profiles = profiles
        self.memories = memories
        self.conversations = conversations
        self.gateway = gateway
        self.selector = selector
        self.extractor = extractor or ActionSuggestionExtractor()
        self.settings = settings or get_settings()
        # A lock lives only while a turn holds it or waits on it
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

    def _lock(self, conversation_id: str) -> asyncio.Lock:
        lock = self._locks.get(conversation_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[conversation_id] = lock
        return lock

    def _provider_config(self, operator_id: str, provider: ProviderChoice) -> ProviderConfig:
        if isinstance(provider, ProviderConfig):
            config = provider
        else:
            config = self.selector.resolve(operator_id, provider)
        # ConfigurationError surfaces here, before anything is stored
        self.gateway.validate(config)
        return config

    def _conversation(
        self, operator_id: str, conversation_id: Optional[str], first_message: str
    ) -> Conversation:
        if conversation_id is None:
            title = first_message.strip()[:TITLE_MAX_CHARS] or None
            return self.conversations.create_conversation(
                Conversation(operator_id=operator_id, title=title)
            )

        conversation = self.conversations.get_conversation(conversation_id)
        if conversation is None or conversation.operator_id != operator_id:
            raise ConversationNotFoundError(f"Conversation not found: {conversation_id}")
        return conversation

    async def _profile(
        self, operator_id: str, scope: Optional[str]
    ) -> Optional[BehavioralProfile]:
        try:
            return await self.profiles.get_or_build(operator_id, scope)
        except CacheBuildFailure as e:
            logger.warning(f"Continuing with cached profile: {e}")

        try:
            return self.profiles.get_cached(operator_id, scope)
        except Exception as e:
            logger.warning(f"Continuing without a profile, cache unavailable: {e}")
            return None

    def _history(self, conversation_id: str, exclude_id: Optional[str] = None) -> List[Message]:
        messages = self.conversations.list_messages(
            conversation_id, limit=self.settings.HISTORY_WINDOW
        )
        orphaned = {m.id for m in pending_retry(messages)}
        if exclude_id is not None:
            orphaned.add(exclude_id)
        return [m for m in messages if m.id not in orphaned]

    async def send(
        self,
        operator_id: str,
        message: str,
        conversation_id: Optional[str] = None,
        scope: Optional[str] = None,
        provider: ProviderChoice = None,
    ) -> TurnResult:
        """
        Run one assistant turn for a new user message.

        Args:
            operator_id: The operator ID
            message: The user's message
            conversation_id: Existing conversation, or None to start one
            scope: Optional profile scope
            provider: Provider name or config (default: resolved per operator)

        Returns:
            The turn result; a failed turn carries a failure notice and the error

        Raises:
            ConfigurationError: If no usable provider is configured
            ConversationNotFoundError: If the conversation is unknown to the operator
        """
        config = self._provider_config(operator_id, provider)
        conversation = self._conversation(operator_id, conversation_id, message)

        async with self._lock(conversation.id):
            user_message = Message(conversation_id=conversation.id, role="user", content=message)
            history = self._history(conversation.id)
            return await self._run_turn(
                operator_id, scope, config, user_message, history, stored=False
            )

    async def retry(
        self,
        operator_id: str,
        conversation_id: str,
        message_id: str,
        scope: Optional[str] = None,
        provider: ProviderChoice = None,
    ) -> TurnResult:
        """
        Re-run a failed turn for an already stored user message.

        Raises:
            ConfigurationError: If no usable provider is configured
            ConversationNotFoundError: If the conversation or message is unknown
            ValueError: If the message is not pending retry
        """
        config = self._provider_config(operator_id, provider)
        conversation = self._conversation(operator_id, conversation_id, "")
        user_message = self.conversations.get_message(message_id)
        if user_message is None or user_message.conversation_id != conversation.id:
            raise ConversationNotFoundError(f"Message not found: {message_id}")

        async with self._lock(conversation.id):
            pending = {m.id for m in pending_retry(self.conversations.list_messages(conversation.id))}
            if message_id not in pending:
                raise ValueError(f"Message {message_id} is not pending retry")

            history = self._history(conversation.id, exclude_id=message_id)
            return await self._run_turn(
                operator_id, scope, config, user_message, history, stored=True
            )

    async def send_with_fallback(
        self,
        operator_id: str,
        message: str,
        conversation_id: Optional[str] = None,
        scope: Optional[str] = None,
        provider: ProviderChoice = None,
    ) -> TurnResult:
        """
        Send on the primary provider, then retry on each fallback until one completes.

        Every attempt reuses the same stored user message. A configuration
        error stops the chain immediately.
        """
        primary = self._provider_config(operator_id, provider)
        result = await self.send(operator_id, message, conversation_id, scope, provider=primary)

        failed = primary
        for fallback in self.selector.fallbacks(primary):
            if result.succeeded:
                break
            logger.warning(f"Provider {failed.provider} failed, falling back to {fallback.provider}")
            result = await self.retry(
                operator_id,
                result.conversation_id,
                result.user_message_id,
                scope=scope,
                provider=fallback,
            )
            failed = fallback

        return result

    async def force_refresh_profile(
        self, operator_id: str, scope: Optional[str] = None
    ) -> BehavioralProfile:
        return await self.profiles.force_refresh_profile(operator_id, scope)

    async def _run_turn(
        self,
        operator_id: str,
        scope: Optional[str],
        config: ProviderConfig,
        user_message: Message,
        history: List[Message],
        stored: bool,
    ) -> TurnResult:
        result = TurnResult(
            conversation_id=user_message.conversation_id,
            state=TurnState.IDLE,
            user_message_id=user_message.id,
            transitions=[TurnState.IDLE],
        )

        def transition(state: TurnState) -> None:
            result.state = state
            result.transitions.append(state)

        def store_failed_user_message() -> None:
            if not stored:
                self.conversations.append_message(user_message.model_copy(update={"retryable": True}))

        profile = await self._profile(operator_id, scope)
        memories = self.memories.top_k(operator_id, self.settings.MEMORY_TOP_K)
        system_prompt = build_system_prompt(profile, memories)
        result.confidence = profile.confidence_score if profile is not None else None
        transition(TurnState.CONTEXT_ASSEMBLED)

        transition(TurnState.AWAITING_PROVIDER)
        timeout = self.settings.PROVIDER_TIMEOUT_SECONDS
        try:
            completion = await asyncio.wait_for(
                self.gateway.complete(config, system_prompt, history + [user_message]),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            error = ProviderError(config.provider, e, f"timed out after {timeout}s")
            return self._fail(result, transition, store_failed_user_message, error)
        except ProviderError as e:
            return self._fail(result, transition, store_failed_user_message, e)
        except asyncio.CancelledError:
            store_failed_user_message()
            logger.info(f"Turn cancelled in conversation {result.conversation_id}")
            raise

        if not stored:
            self.conversations.append_message(user_message)

        actions = self.extractor.extract(completion.content, profile)
        model_used = f"{config.provider}/{config.model}"
        self.conversations.append_message(
            Message(
                conversation_id=user_message.conversation_id,
                role="assistant",
                content=completion.content,
                model_used=model_used,
                tokens_used=completion.tokens_used,
                confidence=result.confidence,
                suggested_actions=actions,
                reply_to=user_message.id,
            )
        )
        self.memories.capture_preferences(operator_id, user_message, user_message.conversation_id)

        result.content = completion.content
        result.suggested_actions = actions
        result.model_used = model_used
        result.tokens_used = completion.tokens_used
        transition(TurnState.COMPLETED)

        logger.info(
            f"Turn completed in conversation {result.conversation_id}: "
            f"model={model_used}, tokens={completion.tokens_used}, actions={len(actions)}"
        )
        return result

    def _fail(self, result, transition, store_failed_user_message, error: ProviderError) -> TurnResult:
        store_failed_user_message()
        result.error = error
        result.failure_notice = FAILURE_NOTICE
        transition(TurnState.FAILED)
        logger.warning(f"Turn failed in conversation {result.conversation_id}: {error}")
        return result
