from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum as SqlEnum,
    ForeignKey,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates
from sqlalchemy.sql import func

from hackhub.extensions import db, bcrypt

JSONType = JSON().with_variant(JSONB, 'postgresql')


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class TimestampedBase(db.Model):
    """Abstract base providing id/created/updated columns."""

    __abstract__ = True

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class ProfileRole(Enum):
    PARTICIPANT = "participant"
    ADMIN = "admin"


class ProblemType(Enum):
    LLM_AGENTS = "llm_agents"
    AI_FILMMAKING = "ai_filmmaking"


class ApplicationStatus(Enum):
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"


class NotificationType(Enum):
    PROBLEM_SELECTED = "problem_selected"
    SUBMISSION = "submission"


class Profile(TimestampedBase):
    __tablename__ = "profiles"

    user_id: Mapped[str] = mapped_column(
        String(36),
        nullable=False,
        unique=True,
        default=lambda: str(uuid.uuid4()),
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[ProfileRole] = mapped_column(
        SqlEnum(ProfileRole, name="profile_role", native_enum=False, values_callable=_enum_values),
        nullable=False,
        default=ProfileRole.PARTICIPANT,
    )
    team_id: Mapped[str | None] = mapped_column(String(36), index=True)
    selected_problem: Mapped[str | None] = mapped_column(String(64))
    problem_selected_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    problem_submission_locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    applications: Mapped[list["Application"]] = relationship(
        back_populates="creator",
        foreign_keys="Application.creator_id",
    )
    notifications: Mapped[list["Notification"]] = relationship(
        back_populates="recipient",
        foreign_keys="Notification.user_id",
        order_by="Notification.created_at.desc()",
    )

    @validates("problem_submission_locked")
    def _validate_lock(self, key, value):
        # Once a selection is locked it stays locked.
        if self.problem_submission_locked and not value:
            raise ValueError("problem_submission_locked cannot be reverted")
        return value

    def set_password(self, password: str) -> None:
        self.password_hash = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

    def check_password(self, password: str) -> bool:
        if not self.password_hash:
            return False
        try:
            return bcrypt.checkpw(password.encode('utf-8'), self.password_hash.encode('utf-8'))
        except ValueError:
            return False

    def has_role(self, *roles: ProfileRole | str) -> bool:
        role_value = self.role.value if isinstance(self.role, ProfileRole) else str(self.role)
        allowed = {r.value if isinstance(r, ProfileRole) else str(r) for r in roles}
        return role_value in allowed

    @property
    def is_admin(self) -> bool:
        return self.has_role(ProfileRole.ADMIN)

    @property
    def is_authenticated(self) -> bool:
        return True

    @property
    def is_active(self) -> bool:  # Flask-Login compatibility
        return True

    @property
    def is_anonymous(self) -> bool:
        return False

    def get_id(self) -> str:
        return self.id


class TeamProblemSubmission(TimestampedBase):
    __tablename__ = "team_problem_submissions"
    __table_args__ = (
        UniqueConstraint("team_id", name="uq_team_problem_submissions_team_id"),
    )

    team_id: Mapped[str] = mapped_column(String(36), nullable=False)
    selected_problem: Mapped[str] = mapped_column(String(64), nullable=False)
    submitted_by: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
    )
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class Application(TimestampedBase):
    __tablename__ = "applications"
    __table_args__ = (
        # NULL team ids are distinct, so individual entrants are unaffected.
        UniqueConstraint("team_id", name="uq_applications_team_id"),
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    url: Mapped[str] = mapped_column(String(1000), nullable=False)
    screenshot_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    video_url: Mapped[str | None] = mapped_column(String(1000))
    github_url: Mapped[str | None] = mapped_column(String(1000))
    tags: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    creator_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    team_id: Mapped[str | None] = mapped_column(String(36))
    status: Mapped[ApplicationStatus] = mapped_column(
        SqlEnum(ApplicationStatus, name="application_status", native_enum=False, values_callable=_enum_values),
        nullable=False,
        default=ApplicationStatus.PENDING,
    )
    problem_type: Mapped[ProblemType] = mapped_column(
        SqlEnum(ProblemType, name="problem_type", native_enum=False, values_callable=_enum_values),
        nullable=False,
    )
    score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    comments_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    review_requested_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    creator: Mapped[Profile] = relationship(back_populates="applications", foreign_keys=[creator_id])


class Notification(TimestampedBase):
    __tablename__ = "notifications"

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type: Mapped[NotificationType] = mapped_column(
        SqlEnum(NotificationType, name="notification_type", native_enum=False, values_callable=_enum_values),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    application_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("applications.id", ondelete="CASCADE"),
    )
    action_user_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("profiles.id", ondelete="SET NULL"),
    )

    recipient: Mapped[Profile] = relationship(back_populates="notifications", foreign_keys=[user_id])
