"""
SQLAlchemy-based profile storage implementation.

Works with any SQLAlchemy-compatible database (PostgreSQL, SQLite, MySQL,
etc.). One row per (operator_id, scope); the profile body is stored as JSON.
"""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Optional

from sqlalchemy import Column, DateTime, Engine, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Session, declarative_base

from business_dna.models import BehavioralProfile

logger = logging.getLogger(__name__)

Base = declarative_base()

# NULL never equals NULL in a unique index, so the unscoped profile uses a
# sentinel. BehavioralProfile normalizes an empty scope to None.
UNSCOPED = ""


class ProfileDB(Base):
    """SQLAlchemy model for profile storage."""

    __tablename__ = "behavioral_profiles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    operator_id = Column(String, nullable=False, index=True)
    scope = Column(String, nullable=False, default=UNSCOPED)

    # Profile body (JSON serialized BehavioralProfile)
    profile_json = Column(Text, nullable=False)

    last_computed_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime, nullable=False, default=datetime.now)

    __table_args__ = (UniqueConstraint("operator_id", "scope", name="uq_profiles_operator_scope"),)

    def to_profile(self) -> BehavioralProfile:
        """Convert database model to BehavioralProfile."""
        return BehavioralProfile.model_validate_json(self.profile_json)


class SQLAlchemyProfileStore:
    """
    SQLAlchemy-based profile storage.

    Example:
        from sqlalchemy import create_engine
        engine = create_engine("sqlite:///business_dna.db")
        store = SQLAlchemyProfileStore(engine)
        store.create_tables()
    """

    def __init__(self, engine: Engine):
        """
        Initialize the SQLAlchemy profile store.

        Args:
            engine: SQLAlchemy engine for database connection
        """
        self.engine = engine
        logger.info(f"SQLAlchemyProfileStore initialized (engine={engine.url})")

    @contextmanager
    def _session(self):
        """Context manager for database sessions with automatic commit/rollback."""
        session = Session(self.engine)
        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            logger.error(f"Database error: {e}")
            raise
        finally:
            session.close()

    def create_tables(self):
        """Create database tables if they don't exist."""
        Base.metadata.create_all(self.engine)
        logger.info("Profile tables created/verified")

    def get(self, operator_id: str, scope: Optional[str] = None) -> Optional[BehavioralProfile]:
        """Retrieve the stored profile for an operator/scope."""
        with self._session() as session:
            row = (
                session.query(ProfileDB)
                .filter(ProfileDB.operator_id == operator_id, ProfileDB.scope == (scope or UNSCOPED))
                .first()
            )
            if not row:
                return None

            return row.to_profile()

    def upsert(self, profile: BehavioralProfile) -> None:
        """Insert or replace the profile."""
        with self._session() as session:
            row = (
                session.query(ProfileDB)
                .filter(
                    ProfileDB.operator_id == profile.operator_id,
                    ProfileDB.scope == (profile.scope or UNSCOPED),
                )
                .first()
            )
            if row is None:
                row = ProfileDB(operator_id=profile.operator_id, scope=profile.scope or UNSCOPED)
                session.add(row)

            row.profile_json = profile.model_dump_json()
            row.last_computed_at = profile.last_computed_at
            row.updated_at = datetime.now()

            logger.info(
                f"Upserted profile for operator {profile.operator_id} "
                f"(scope={profile.scope}, confidence={profile.confidence_score})"
            )

    def delete_operator(self, operator_id: str) -> int:
        """Remove every profile of an operator."""
        with self._session() as session:
            count = session.query(ProfileDB).filter(ProfileDB.operator_id == operator_id).delete()

            logger.info(f"Deleted {count} profiles for operator {operator_id}")

            return count
