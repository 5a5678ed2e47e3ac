"""Problem-statement selection for teams and individual participants."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from flask import current_app

from hackhub.errors import (
    AlreadySubmittedError,
    AuthError,
    ConstraintError,
    DataAccessError,
    DeadlinePassedError,
    NotFoundError,
    SelectionLockedError,
    ValidationError,
)
from hackhub.models import Profile, TeamProblemSubmission
from hackhub.services.data_access import DataAccess
from hackhub.services.notifications import team_selection_notifications


@dataclass(frozen=True)
class ProblemStatement:
    id: str
    title: str
    company: str
    is_open: bool = False


OPEN_PROBLEM_ID = 'open'

PROBLEM_STATEMENTS = [
    ProblemStatement('hoichoi', 'SkyRide Cinema Challenge', 'by Hoichoi Technologies'),
    ProblemStatement('lyzr', 'Enterprise AI Cost Optimizer', 'by Lyzr AI'),
    ProblemStatement('aeos', 'VideoVault Comedy Commercial', 'by AEOS Labs'),
    ProblemStatement('opraahfx', 'InfluencerFlow AI Platform', 'by opraahfx'),
    ProblemStatement('hireai', 'HireAI', 'by 100xEngineers x Jaya Talent'),
    ProblemStatement(OPEN_PROBLEM_ID, 'Open Problem Statement', 'Submit your own problem statement', is_open=True),
]

PROBLEMS_BY_ID = {problem.id: problem for problem in PROBLEM_STATEMENTS}


class SelectionState(Enum):
    UNSELECTED = "unselected"
    PENDING_SUBMIT = "pending_submit"
    LOCKED = "locked"
    CLOSED = "closed"


@dataclass
class SelectionOutcome:
    problem: ProblemStatement
    team_wide: bool = False
    needs_confirmation: bool = False
    external_url: str | None = None

    @property
    def message(self) -> str:
        label = "Open problem statement" if self.problem.is_open else "Problem statement"
        suffix = " for your team" if self.team_wide else ""
        return f"{label} selected successfully{suffix}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProblemSelectionService:
    """Locks a problem statement onto a profile, or onto every profile of its team."""

    def __init__(self, data: DataAccess, deadline: datetime, open_form_url: str | None = None):
        self.data = data
        self.deadline = deadline
        self.open_form_url = open_form_url

    @classmethod
    def from_config(cls, data: DataAccess | None = None) -> "ProblemSelectionService":
        config = current_app.config
        return cls(
            data or DataAccess(),
            deadline=config['SUBMISSION_DEADLINE'],
            open_form_url=config.get('OPEN_PROBLEM_FORM_URL'),
        )

    def deadline_passed(self, now: datetime | None = None) -> bool:
        return (now or _utcnow()) > self.deadline

    def state_for(self, profile: Profile | None, now: datetime | None = None, pending: bool = False) -> SelectionState:
        if self.deadline_passed(now):
            return SelectionState.CLOSED
        if profile is not None and profile.problem_submission_locked:
            return SelectionState.LOCKED
        if pending:
            return SelectionState.PENDING_SUBMIT
        return SelectionState.UNSELECTED

    def team_submission(self, profile: Profile) -> TeamProblemSubmission | None:
        if not profile.team_id:
            return None
        return self.data.select('team_problem_submissions', {'team_id': profile.team_id}, single=True)

    def sync_from_team(self, profile: Profile | None) -> TeamProblemSubmission | None:
        """Load the team's submission and copy it onto a profile that missed the fan-out.

        Storage errors are logged and treated as "no submission" so the page still renders.
        """
        if profile is None or not profile.team_id:
            return None
        try:
            submission = self.team_submission(profile)
            if submission is not None and not profile.problem_submission_locked:
                self.data.update(
                    'profiles',
                    self._lock_patch(submission.selected_problem, submission.submitted_at),
                    {'id': profile.id},
                )
                current_app.logger.info(
                    f"Synced team {profile.team_id} selection onto profile {profile.id}"
                )
            return submission
        except DataAccessError as exc:
            current_app.logger.error(f"Error checking team submission for {profile.team_id}: {exc}")
            return None

    @staticmethod
    def _lock_patch(problem_id: str, selected_at: datetime) -> dict:
        return {
            'selected_problem': problem_id,
            'problem_selected_at': selected_at,
            'problem_submission_locked': True,
        }

    def select(
        self,
        profile: Profile | None,
        problem_id: str | None,
        confirmed: bool = False,
        now: datetime | None = None,
    ) -> SelectionOutcome:
        """Select ``problem_id`` for the profile (and its team).

        The open problem needs ``confirmed=True``; without it the outcome only
        asks for confirmation and nothing is written.

        Raises:
            DeadlinePassedError: the submission deadline is over
            AuthError: no signed-in profile
            SelectionLockedError: the profile already has a locked selection
            ValidationError: missing or unknown problem id
            AlreadySubmittedError: the team already has a selection
            DataAccessError: any storage failure; nothing is kept
        """
        now = now or _utcnow()
        if self.deadline_passed(now):
            raise DeadlinePassedError("The submission deadline has passed")
        if profile is None:
            raise AuthError("Please sign in to select a problem statement")
        if profile.problem_submission_locked:
            raise SelectionLockedError(
                "Your problem statement has been submitted and cannot be changed."
            )
        if not problem_id:
            raise ValidationError("Please select a problem statement", title="Selection required")

        problem = PROBLEMS_BY_ID.get(problem_id)
        if problem is None:
            raise ValidationError(f'Unknown problem statement "{problem_id}"')
        if problem.is_open and not confirmed:
            return SelectionOutcome(problem=problem, needs_confirmation=True)

        if profile.team_id:
            self._select_for_team(profile, problem, now)
        else:
            self.data.update('profiles', self._lock_patch(problem.id, now), {'id': profile.id})

        current_app.logger.info(
            f"Profile {profile.id} selected problem {problem.id}"
            + (f" for team {profile.team_id}" if profile.team_id else "")
        )
        return SelectionOutcome(
            problem=problem,
            team_wide=bool(profile.team_id),
            external_url=self.open_form_url if problem.is_open else None,
        )

    def _select_for_team(self, profile: Profile, problem: ProblemStatement, now: datetime) -> None:
        team_id = profile.team_id
        already = "Your team has already submitted a problem statement"
        if self.team_submission(profile) is not None:
            raise AlreadySubmittedError(already)

        with self.data.transaction():
            try:
                self.data.insert('team_problem_submissions', {
                    'team_id': team_id,
                    'selected_problem': problem.id,
                    'submitted_by': profile.id,
                    'submitted_at': now,
                })
            except ConstraintError as exc:
                # Another teammate's insert won the race.
                raise AlreadySubmittedError(already) from exc

            members = self.data.select('profiles', {'team_id': team_id})
            if not members:
                raise NotFoundError("No team members found")

            self.data.update('profiles', self._lock_patch(problem.id, now), {'team_id': team_id})

            notifications = team_selection_notifications(profile, members)
            if notifications:
                self.data.insert('notifications', notifications)


__all__ = [
    'ProblemStatement',
    'PROBLEM_STATEMENTS',
    'PROBLEMS_BY_ID',
    'OPEN_PROBLEM_ID',
    'SelectionState',
    'SelectionOutcome',
    'ProblemSelectionService',
]
