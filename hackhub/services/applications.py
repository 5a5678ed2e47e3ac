"""Project application submission."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping
from urllib.parse import urlsplit

from flask import current_app

from hackhub.errors import AlreadySubmittedError, AuthError, ConstraintError, ValidationError
from hackhub.models import Application, ApplicationStatus, ProblemType, Profile, ProfileRole
from hackhub.services.data_access import DataAccess
from hackhub.services.notifications import admin_submission_notifications
from hackhub.services.uploads import is_stored_screenshot
from hackhub.services.validation import parse_tags


@dataclass(frozen=True)
class SubmissionVariant:
    """Required and forbidden form fields for one problem type."""

    problem_type: ProblemType
    required: tuple[str, ...]
    forbidden: tuple[str, ...] = ()
    labels: dict[str, str] = field(default_factory=dict)

    def label(self, name: str) -> str:
        return self.labels.get(name, FIELD_LABELS.get(name, name))

    def clean(self, form: Mapping[str, str | None]) -> dict[str, str | None]:
        """Return the variant's field values, raising on the first missing one."""
        cleaned: dict[str, str | None] = {}
        for name in SUBMISSION_FIELDS:
            value = (form.get(name) or '').strip() or None
            if name in self.forbidden:
                value = None
            elif name in self.required and value is None:
                raise ValidationError(f"{self.label(name)} is required")
            elif name in URL_FIELDS and value is not None and not is_web_url(value):
                raise ValidationError(f"{self.label(name)} must be an http or https link")
            cleaned[name] = value
        return cleaned


SUBMISSION_FIELDS = ('title', 'description', 'url', 'github_url', 'video_url')
URL_FIELDS = ('url', 'github_url', 'video_url')


def is_web_url(value: str) -> bool:
    parts = urlsplit(value)
    return parts.scheme.lower() in ('http', 'https') and bool(parts.netloc)


FIELD_LABELS = {
    'title': 'Application name',
    'description': 'Description',
    'url': 'Application URL',
    'github_url': 'GitHub repository URL',
    'video_url': 'Demo video',
}

VARIANTS = {
    ProblemType.LLM_AGENTS: SubmissionVariant(
        ProblemType.LLM_AGENTS,
        required=('title', 'description', 'url', 'github_url', 'video_url'),
    ),
    ProblemType.AI_FILMMAKING: SubmissionVariant(
        ProblemType.AI_FILMMAKING,
        required=('title', 'description', 'url', 'video_url'),
        forbidden=('github_url',),
        labels={'url': 'Project video URL', 'video_url': 'Explanation video'},
    ),
}


def variant_for(problem_type: ProblemType | str | None) -> SubmissionVariant:
    try:
        return VARIANTS[ProblemType(problem_type)]
    except ValueError:
        raise ValidationError(f'Unknown problem type "{problem_type}"') from None


class ApplicationService:
    """Creates applications and notifies every admin about them."""

    ALREADY_SUBMITTED = "Your team has already submitted an application"

    def __init__(self, data: DataAccess | None = None):
        self.data = data or DataAccess()

    def team_application(self, profile: Profile) -> Application | None:
        if not profile.team_id:
            return None
        return self.data.select('applications', {'team_id': profile.team_id}, single=True)

    def applications_for(self, profile: Profile) -> list[Application]:
        """Applications visible on the profile's applications page."""
        if profile.is_admin:
            return self.data.select('applications', {'status': ApplicationStatus.PENDING})
        if profile.team_id:
            return self.data.select('applications', {'team_id': profile.team_id})
        return self.data.select('applications', {'creator_id': profile.id})

    def submit(
        self,
        profile: Profile | None,
        form: Mapping[str, str | None],
        screenshot_url: str | None,
    ) -> Application:
        """Validate and store an application, then notify admins.

        The application row and admin notifications are written in one
        transaction; if either fails neither is kept.
        """
        if profile is None:
            raise AuthError("You must be logged in to submit an application")

        if self.team_application(profile) is not None:
            raise AlreadySubmittedError(self.ALREADY_SUBMITTED)

        if not is_stored_screenshot(screenshot_url):
            raise ValidationError("Please upload a screenshot/logo of your application")

        variant = variant_for(form.get('problem_type') or ProblemType.LLM_AGENTS.value)
        fields = variant.clean(form)

        record = {
            **fields,
            'screenshot_url': screenshot_url,
            'tags': parse_tags(form.get('tags')),
            'creator_id': profile.id,
            'team_id': profile.team_id,
            'comments_enabled': True,
            'status': ApplicationStatus.PENDING,
            'problem_type': variant.problem_type,
            'score': 0,
            'review_requested_at': None,
            'reviewed_at': None,
        }

        with self.data.transaction():
            try:
                application = self.data.insert('applications', record)
            except ConstraintError as exc:
                if profile.team_id:
                    raise AlreadySubmittedError(self.ALREADY_SUBMITTED) from exc
                raise

            admins = self.data.select('profiles', {'role': ProfileRole.ADMIN})
            notifications = admin_submission_notifications(profile, admins, application)
            if notifications:
                self.data.insert('notifications', notifications)

        current_app.logger.info(
            f"Application {application.id} submitted by profile {profile.id}; "
            f"{len(notifications)} admins notified"
        )
        return application


__all__ = ['SubmissionVariant', 'VARIANTS', 'variant_for', 'ApplicationService', 'FIELD_LABELS']
