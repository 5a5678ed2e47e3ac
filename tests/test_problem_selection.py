from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from hackhub.errors import (
    AlreadySubmittedError,
    AuthError,
    DataAccessError,
    DeadlinePassedError,
    SelectionLockedError,
    ValidationError,
)
from hackhub.extensions import db
from hackhub.models import Notification, NotificationType, Profile, TeamProblemSubmission
from hackhub.services.data_access import DataAccess
from hackhub.services.problem_selection import ProblemSelectionService, SelectionState

FUTURE = datetime(2999, 1, 1, tzinfo=timezone.utc)
PAST = datetime(2000, 1, 1, tzinfo=timezone.utc)


def _service(deadline=FUTURE, data=None):
    return ProblemSelectionService(data or DataAccess(), deadline=deadline, open_form_url='https://forms.example/open')


@pytest.fixture
def team(make_profile):
    return [
        make_profile('alice@example.com', team_id='team-1'),
        make_profile('bob@example.com', team_id='team-1'),
        make_profile('carol@example.com', team_id='team-1'),
    ]


class WriteCounter(DataAccess):
    def __init__(self):
        super().__init__()
        self.writes = []

    def insert(self, table, records):
        self.writes.append(('insert', table))
        return super().insert(table, records)

    def update(self, table, patch, filters):
        self.writes.append(('update', table))
        return super().update(table, patch, filters)


class TestSelectionGuards:

    def test_deadline_short_circuits_everything(self, app_ctx, make_profile):
        profile = db.session.get(Profile, make_profile('dev@example.com', locked=True))
        service = _service(deadline=PAST)
        assert service.state_for(profile) is SelectionState.CLOSED
        with pytest.raises(DeadlinePassedError):
            service.select(profile, 'lyzr')
        with pytest.raises(DeadlinePassedError):
            service.select(None, None)

    def test_requires_profile(self, app_ctx):
        with pytest.raises(AuthError):
            _service().select(None, 'lyzr')

    def test_locked_profile_never_writes(self, app_ctx, make_profile):
        profile = db.session.get(Profile, make_profile('dev@example.com', team_id='team-9', locked=True))
        data = WriteCounter()
        service = _service(data=data)
        assert service.state_for(profile) is SelectionState.LOCKED
        for problem_id in ('lyzr', 'open', '', 'nope'):
            with pytest.raises(SelectionLockedError):
                service.select(profile, problem_id, confirmed=True)
        assert data.writes == []

    @pytest.mark.parametrize("problem_id", [None, ''])
    def test_missing_selection(self, app_ctx, make_profile, problem_id):
        profile = db.session.get(Profile, make_profile('dev@example.com'))
        with pytest.raises(ValidationError, match="select a problem") as excinfo:
            _service().select(profile, problem_id)
        assert excinfo.value.title == "Selection required"

    def test_unknown_problem(self, app_ctx, make_profile):
        profile = db.session.get(Profile, make_profile('dev@example.com'))
        with pytest.raises(ValidationError, match="Unknown problem"):
            _service().select(profile, 'made-up')

    def test_open_problem_needs_confirmation(self, app_ctx, make_profile):
        profile = db.session.get(Profile, make_profile('dev@example.com'))
        data = WriteCounter()
        outcome = _service(data=data).select(profile, 'open')
        assert outcome.needs_confirmation
        assert data.writes == []
        assert not profile.problem_submission_locked


class TestIndividualSelection:

    def test_updates_own_profile(self, app_ctx, make_profile):
        profile = db.session.get(Profile, make_profile('dev@example.com'))
        outcome = _service().select(profile, 'hireai')

        assert not outcome.team_wide
        assert outcome.external_url is None
        db.session.expire_all()
        profile = db.session.get(Profile, profile.id)
        assert profile.selected_problem == 'hireai'
        assert profile.problem_submission_locked
        assert profile.problem_selected_at is not None
        assert TeamProblemSubmission.query.count() == 0

    def test_confirmed_open_problem_returns_form_url(self, app_ctx, make_profile):
        profile = db.session.get(Profile, make_profile('dev@example.com'))
        outcome = _service().select(profile, 'open', confirmed=True)
        assert outcome.external_url == 'https://forms.example/open'
        assert profile.selected_problem == 'open'

    def test_lock_cannot_be_reverted(self, app_ctx, make_profile):
        profile = db.session.get(Profile, make_profile('dev@example.com', locked=True))
        with pytest.raises(DataAccessError):
            DataAccess().update('profiles', {'problem_submission_locked': False}, {'id': profile.id})
        db.session.expire_all()
        assert db.session.get(Profile, profile.id).problem_submission_locked


class TestTeamSelection:

    def test_fans_out_to_every_member(self, app_ctx, team):
        alice_id, bob_id, carol_id = team
        alice = db.session.get(Profile, alice_id)
        outcome = _service().select(alice, 'lyzr')

        assert outcome.team_wide
        submission = TeamProblemSubmission.query.filter_by(team_id='team-1').one()
        assert submission.selected_problem == 'lyzr'
        assert submission.submitted_by == alice_id

        db.session.expire_all()
        members = Profile.query.filter_by(team_id='team-1').all()
        assert {m.selected_problem for m in members} == {'lyzr'}
        assert all(m.problem_submission_locked for m in members)

        notifications = Notification.query.all()
        assert {n.user_id for n in notifications} == {bob_id, carol_id}
        assert all(n.type is NotificationType.PROBLEM_SELECTED and not n.read for n in notifications)

    def test_second_member_is_rejected_without_insert(self, app_ctx, team, make_profile):
        alice = db.session.get(Profile, team[0])
        _service().select(alice, 'lyzr')

        # A teammate who joined after the selection is not locked yet.
        dave = db.session.get(Profile, make_profile('dave@example.com', team_id='team-1'))
        data = WriteCounter()
        with pytest.raises(AlreadySubmittedError, match="already submitted"):
            _service(data=data).select(dave, 'aeos')
        assert ('insert', 'team_problem_submissions') not in data.writes
        assert TeamProblemSubmission.query.count() == 1

    def test_concurrent_submits_leave_one_row(self, app_ctx, team, monkeypatch):
        alice = db.session.get(Profile, team[0])
        bob = db.session.get(Profile, team[1])
        # Bob's client loaded his profile before Alice's write landed.
        stale_bob = SimpleNamespace(id=bob.id, user_id=bob.user_id, team_id='team-1', problem_submission_locked=False)

        racing = _service()
        monkeypatch.setattr(racing, 'team_submission', lambda profile: None)

        _service().select(alice, 'lyzr')
        with pytest.raises(AlreadySubmittedError):
            racing.select(stale_bob, 'aeos')

        rows = TeamProblemSubmission.query.filter_by(team_id='team-1').all()
        assert len(rows) == 1
        assert rows[0].selected_problem == 'lyzr'
        db.session.expire_all()
        assert {m.selected_problem for m in Profile.query.filter_by(team_id='team-1')} == {'lyzr'}

    def test_failure_rolls_back_every_write(self, app_ctx, team, monkeypatch):
        data = DataAccess()
        original_insert = data.insert

        def failing_insert(table, records):
            if table == 'notifications':
                raise DataAccessError("notifications unavailable")
            return original_insert(table, records)

        monkeypatch.setattr(data, 'insert', failing_insert)
        alice = db.session.get(Profile, team[0])
        with pytest.raises(DataAccessError):
            _service(data=data).select(alice, 'lyzr')

        db.session.expire_all()
        assert TeamProblemSubmission.query.count() == 0
        assert not any(m.problem_submission_locked for m in Profile.query.filter_by(team_id='team-1'))

    def test_sync_from_team_locks_member_that_missed_fan_out(self, app_ctx, team, make_profile):
        alice = db.session.get(Profile, team[0])
        _service().select(alice, 'opraahfx')
        late = db.session.get(Profile, make_profile('erin@example.com', team_id='team-1'))
        assert not late.problem_submission_locked

        service = _service()
        submission = service.sync_from_team(late)
        assert submission.selected_problem == 'opraahfx'
        assert late.problem_submission_locked
        assert late.selected_problem == 'opraahfx'
        assert service.state_for(late) is SelectionState.LOCKED


class TestProblemRoutes:

    def test_lists_problems(self, client, make_profile, login):
        make_profile('dev@example.com')
        login('dev@example.com')
        response = client.get('/problem-statements')
        assert response.status_code == 200
        assert b'Enterprise AI Cost Optimizer' in response.data

    def test_deadline_notice(self, app, client, make_profile, login):
        make_profile('dev@example.com')
        login('dev@example.com')
        app.config['SUBMISSION_DEADLINE'] = datetime.now(timezone.utc) - timedelta(minutes=1)
        response = client.post('/problem-statements', data={'problem': 'lyzr'})
        assert response.status_code == 200
        assert b'deadline has passed' in response.data
        with app.app_context():
            assert Profile.query.filter_by(email='dev@example.com').one().selected_problem is None

    def test_select_redirects_to_applications(self, app, client, make_profile, login):
        make_profile('dev@example.com', team_id='team-5')
        make_profile('mate@example.com', team_id='team-5')
        login('dev@example.com')
        response = client.post('/problem-statements', data={'problem': 'aeos'})
        assert response.status_code == 302
        assert response.headers['Location'].endswith('/applications')

        locked = client.get('/problem-statements')
        assert b'cannot be changed' in locked.data
        assert b'submitted by your team' in locked.data

    def test_open_problem_flow(self, app, client, make_profile, login):
        make_profile('dev@example.com')
        login('dev@example.com')
        staged = client.post('/problem-statements', data={'problem': 'open'})
        assert staged.status_code == 200
        assert b'Are you sure you want to proceed?' in staged.data
        with app.app_context():
            assert not Profile.query.filter_by(email='dev@example.com').one().problem_submission_locked

        confirmed = client.post('/problem-statements/open', data={'problem': 'open'})
        assert confirmed.status_code == 302
        page = client.get('/applications')
        assert b'tally.so' in page.data

    def test_missing_selection_flashes_error(self, client, make_profile, login):
        make_profile('dev@example.com')
        login('dev@example.com')
        response = client.post('/problem-statements', data={}, follow_redirects=True)
        assert b'Selection required: Please select a problem statement' in response.data
