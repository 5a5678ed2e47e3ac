"""Notification records created alongside problem selections and submissions."""
from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from hackhub.models import NotificationType

if TYPE_CHECKING:
    from hackhub.models import Application, Profile


def team_selection_notifications(submitter: Profile, members: Iterable[Profile]) -> list[dict]:
    """One notice per teammate, skipping the member who made the selection."""
    return [
        {
            'user_id': member.id,
            'type': NotificationType.PROBLEM_SELECTED,
            'title': 'Problem Statement Selected',
            'message': f'{submitter.user_id} has selected a problem statement for your team',
            'read': False,
        }
        for member in members
        if member.id != submitter.id
    ]


def admin_submission_notifications(
    submitter: Profile,
    admins: Iterable[Profile],
    application: Application,
) -> list[dict]:
    return [
        {
            'user_id': admin.id,
            'type': NotificationType.SUBMISSION,
            'title': 'New Application Submission',
            'message': f'{submitter.user_id} submitted "{application.title}" for review',
            'application_id': application.id,
            'action_user_id': submitter.id,
            'read': False,
        }
        for admin in admins
    ]


__all__ = ['team_selection_notifications', 'admin_submission_notifications']
