import uuid
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    field_validator,
    model_validator,
)

from business_dna.utils.timestamps import parse_timestamp, utcnow

RecordKind = Literal["feedback", "post", "question"]
Sentiment = Literal["positive", "negative", "neutral"]
GrowthTrend = Literal["growing", "stable", "declining"]

# Star ratings as some platform exports spell them
STAR_RATING_WORDS = {"ONE": 1, "TWO": 2, "THREE": 3, "FOUR": 4, "FIVE": 5}


def _new_id() -> str:
    return str(uuid.uuid4())


class InteractionRecord(BaseModel):
    """
    One normalized interaction record (feedback entry, post or question).

    Validated once at the record-source boundary. Raw platform rows may use
    any of the accepted aliases; nothing deeper in the pipeline looks at the
    raw shape again.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(
        default_factory=_new_id,
        validation_alias=AliasChoices("id", "review_id", "post_id", "question_id"),
    )
    kind: RecordKind
    score: Optional[float] = Field(
        default=None,
        ge=1,
        le=5,
        validation_alias=AliasChoices("score", "rating", "star_rating"),
        description="Numeric score on a 1-5 scale (feedback only)",
    )
    text: str = Field(
        default="",
        validation_alias=AliasChoices(
            "text", "review_text", "comment", "summary", "content", "question_text"
        ),
    )
    response: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("response", "reply_text", "response_text", "answer_text"),
        description="Operator's response text, if any",
    )
    responded: bool = Field(
        default=False,
        validation_alias=AliasChoices("responded", "has_reply"),
        description="Whether the operator responded (even if the text is unavailable)",
    )
    published_at: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices(
            "published_at", "review_date", "create_time", "created_at", "publish_time"
        ),
    )

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return _new_id() if value is None else str(value)

    @field_validator("score", mode="before")
    @classmethod
    def _coerce_score(cls, value: Any) -> Any:
        if isinstance(value, str):
            word = value.strip().upper()
            if word in STAR_RATING_WORDS:
                return STAR_RATING_WORDS[word]
            if word in ("", "STAR_RATING_UNSPECIFIED"):
                return None
        return value

    @field_validator("text", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return value or ""

    @field_validator("response", mode="before")
    @classmethod
    def _coerce_response(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("published_at", mode="before")
    @classmethod
    def _coerce_published_at(cls, value: Any) -> Optional[datetime]:
        return parse_timestamp(value)

    @model_validator(mode="after")
    def _derive_responded(self) -> "InteractionRecord":
        if self.response:
            self.responded = True
        return self


class OperatorIdentity(BaseModel):
    """The primary identity record of an operator (one business location)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    operator_id: str
    scope: Optional[str] = None
    name: str = Field(
        default="Unknown Business",
        validation_alias=AliasChoices("name", "location_name", "business_name"),
    )
    category: str = Field(default="", validation_alias=AliasChoices("category", "business_category"))
    primary_category: str = Field(
        default="Business", validation_alias=AliasChoices("primary_category", "business_type")
    )


class TopicSignal(BaseModel):
    topic: str
    mention_count: int = Field(..., ge=0)
    sentiment: Sentiment


class ReplyStyle(BaseModel):
    tone: Literal["professional", "friendly", "casual"] = "professional"
    length: Literal["short", "medium", "long"] = "medium"
    uses_emoji: bool = False
    formality_level: int = Field(default=7, ge=1, le=10)


class ContactTime(BaseModel):
    day: str
    hour: int = Field(..., ge=0, le=23)


class BehavioralProfile(BaseModel):
    """The derived, cached behavioral profile ("DNA") of an operator."""

    operator_id: str
    scope: Optional[str] = None

    # Identity
    name: str = "Unknown Business"
    category: str = ""
    primary_category: str = "Business"
    brand_voice: str = "professional"
    languages: List[str] = Field(default_factory=lambda: ["en", "ar"])

    # Derived signals
    topics: List[TopicSignal] = Field(default_factory=list)
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    reply_style: ReplyStyle = Field(default_factory=ReplyStyle)
    signature_phrases: List[str] = Field(default_factory=list)
    peak_days: List[str] = Field(default_factory=list)
    best_contact_times: List[ContactTime] = Field(default_factory=list)

    # Aggregate metrics
    average_rating: float = Field(default=0.0, ge=0, le=5)
    total_records: int = Field(default=0, ge=0, description="Number of feedback records analyzed")
    total_questions: int = Field(default=0, ge=0)
    response_rate: int = Field(default=0, ge=0, le=100)
    sentiment_score: int = Field(default=0, ge=-100, le=100)
    growth_trend: GrowthTrend = "stable"

    # Meta
    confidence_score: int = Field(default=0, ge=0, le=100)
    data_completeness: int = Field(default=0, ge=0, le=100)
    missing_facets: List[str] = Field(
        default_factory=list, description="Record types that could not be fetched in the last build"
    )
    last_computed_at: datetime = Field(default_factory=utcnow)

    @field_validator("scope", mode="before")
    @classmethod
    def _coerce_scope(cls, value: Any) -> Any:
        # An empty scope is the unscoped profile
        return value or None


class MemoryRecord(BaseModel):
    """An immutable, ranked fact about an operator."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    operator_id: str
    kind: str = Field(..., description="e.g. preference, fact, insight, correction")
    content: str
    importance_score: int = Field(default=50, ge=0, le=100)
    context: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utcnow)


class SuggestedAction(BaseModel):
    """A structured, non-authoritative recommendation extracted from assistant output."""

    type: str
    label: str
    data: Optional[Dict[str, Any]] = None


class Message(BaseModel):
    """One message of a conversation. Never edited once stored."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    conversation_id: str
    role: Literal["user", "assistant"]
    content: str
    created_at: datetime = Field(default_factory=utcnow)
    model_used: Optional[str] = None
    tokens_used: Optional[int] = None
    confidence: Optional[int] = None
    suggested_actions: List[SuggestedAction] = Field(default_factory=list)
    reply_to: Optional[str] = Field(
        default=None, description="For assistant messages: ID of the user message answered"
    )
    retryable: bool = Field(
        default=False, description="For user messages: the turn failed and may be retried"
    )


class Conversation(BaseModel):
    id: str = Field(default_factory=_new_id)
    operator_id: str
    title: Optional[str] = None
    status: Literal["active", "archived"] = "active"
    created_at: datetime = Field(default_factory=utcnow)


class ProviderConfig(BaseModel):
    """Provider selection for one call. The credential is never rendered in plain text."""

    provider: str
    model: str
    credential: Optional[SecretStr] = None
