"""
Error taxonomy for business-dna.

- ConfigurationError: fatal, raised before any network call, never retried
- ProviderError: a backend failed (transport, timeout, non-2xx, bad envelope)
- PartialDataError: one record-type fetch failed during a profile build
- CacheBuildFailure: a profile build failed; the cache is left unchanged
"""

from typing import Optional


class BusinessDNAError(Exception):
    """Base class for all business-dna errors."""


class ConfigurationError(BusinessDNAError):
    """Missing credential, unknown provider or other invalid setup."""


class ProviderError(BusinessDNAError):
    """A chat-completion backend call failed."""

    def __init__(self, provider: str, cause: Optional[BaseException] = None, message: str = ""):
        self.provider = provider
        self.cause = cause
        detail = message or (f"{type(cause).__name__}: {cause}" if cause else "unknown error")
        super().__init__(f"Provider '{provider}' failed: {detail}")


class PartialDataError(BusinessDNAError):
    """A single facet of the interaction corpus could not be fetched."""

    def __init__(self, facet: str, cause: BaseException):
        self.facet = facet
        self.cause = cause
        super().__init__(f"Fetching '{facet}' failed: {type(cause).__name__}: {cause}")


class CacheBuildFailure(BusinessDNAError):
    """Building a behavioral profile failed."""

    def __init__(self, operator_id: str, scope: Optional[str], cause: BaseException):
        self.operator_id = operator_id
        self.scope = scope
        self.cause = cause
        super().__init__(
            f"Profile build failed for operator={operator_id} scope={scope or '-'}: {cause}"
        )


class ConversationNotFoundError(BusinessDNAError):
    """A conversation or message does not exist for the given operator."""
