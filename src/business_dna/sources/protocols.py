"""
Record source protocol.

The record source is the boundary to the upstream listing platform sync.
Implementations return normalized InteractionRecord batches, newest first.
"""

from typing import List, Optional, Protocol

from business_dna.models import InteractionRecord, OperatorIdentity


class RecordSource(Protocol):
    """
    Protocol for the interaction record collaborator.

    All methods are async: a profile build fans out over them concurrently.
    """

    async def get_identity(
        self, operator_id: str, scope: Optional[str] = None
    ) -> Optional[OperatorIdentity]:
        """
        Get the primary identity record of an operator.

        Returns:
            The identity, or None if the operator has no identity record
        """
        ...

    async def list_feedback(
        self, operator_id: str, scope: Optional[str] = None, limit: int = 500
    ) -> List[InteractionRecord]:
        """
        List customer feedback records, newest first.
        """
        ...

    async def list_posts(
        self, operator_id: str, scope: Optional[str] = None, limit: int = 100
    ) -> List[InteractionRecord]:
        """
        List published posts, newest first.
        """
        ...

    async def list_questions(
        self, operator_id: str, scope: Optional[str] = None, limit: int = 100
    ) -> List[InteractionRecord]:
        """
        List customer questions, newest first.
        """
        ...
