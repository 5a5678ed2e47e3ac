"""Problem-statement selection routes."""

from __future__ import annotations

from flask import Blueprint, current_app, flash, redirect, render_template, session, url_for
from flask_login import current_user

from hackhub.auth import login_required_with_message
from hackhub.errors import HackHubError
from hackhub.forms import OpenProblemConfirmForm, ProblemSelectionForm
from hackhub.services.problem_selection import (
    OPEN_PROBLEM_ID,
    PROBLEM_STATEMENTS,
    ProblemSelectionService,
    SelectionState,
)


problems_bp = Blueprint('problems', __name__)

OPEN_FORM_SESSION_KEY = 'open_problem_form_url'


def _render(service, state, team_submission=None, form=None, confirm_form=None):
    return render_template(
        'problems.html',
        state=state,
        states=SelectionState,
        problems=PROBLEM_STATEMENTS,
        team_submission=team_submission,
        deadline=service.deadline,
        form=form or ProblemSelectionForm(),
        confirm_form=confirm_form or OpenProblemConfirmForm(),
    )


def _submit(service: ProblemSelectionService, problem_id: str | None, confirmed: bool):
    try:
        outcome = service.select(current_user, problem_id, confirmed=confirmed)
    except HackHubError as exc:
        flash(f"{exc.title}: {exc.message}", 'error')
        return redirect(url_for('problems.index'))
    except Exception as exc:
        current_app.logger.error(f"Error selecting problem statement: {exc}")
        flash("Failed to select a problem statement", 'error')
        return redirect(url_for('problems.index'))

    if outcome.needs_confirmation:
        return _render(service, SelectionState.PENDING_SUBMIT)

    if outcome.external_url:
        session[OPEN_FORM_SESSION_KEY] = outcome.external_url
    flash(outcome.message, 'success')
    return redirect(url_for('applications.index'))


@problems_bp.route('/problem-statements', methods=['GET', 'POST'])
@login_required_with_message
def index():
    service = ProblemSelectionService.from_config()
    team_submission = service.sync_from_team(current_user)
    state = service.state_for(current_user)

    if state in (SelectionState.CLOSED, SelectionState.LOCKED):
        return _render(service, state, team_submission)

    form = ProblemSelectionForm()
    if form.validate_on_submit():
        return _submit(service, form.problem.data, confirmed=False)

    return _render(service, state, team_submission, form=form)


@problems_bp.route('/problem-statements/open', methods=['POST'])
@login_required_with_message
def confirm_open():
    service = ProblemSelectionService.from_config()
    form = OpenProblemConfirmForm()
    if not form.validate_on_submit():
        flash("Invalid confirmation request", 'error')
        return redirect(url_for('problems.index'))
    return _submit(service, OPEN_PROBLEM_ID, confirmed=True)
