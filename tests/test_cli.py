from hackhub.extensions import db
from hackhub.models import Profile, ProfileRole


def test_profile_create_and_list(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=[
        'profile', 'create',
        '--email', 'Lead@Example.com',
        '--password', 'secret123',
        '--role', 'admin',
        '--team', 'team-7',
    ])
    assert 'Profile created successfully!' in result.output

    with app.app_context():
        profile = db.session.query(Profile).filter_by(email='lead@example.com').one()
        assert profile.role is ProfileRole.ADMIN
        assert profile.team_id == 'team-7'
        assert profile.check_password('secret123')

    listing = runner.invoke(args=['profile', 'list', '--team', 'team-7'])
    assert 'lead@example.com' in listing.output
    assert 'open' in listing.output


def test_profile_create_rejects_duplicates_and_short_passwords(app, make_profile):
    make_profile('dev@example.com')
    runner = app.test_cli_runner()

    duplicate = runner.invoke(args=['profile', 'create', '--email', 'dev@example.com', '--password', 'secret123'])
    assert 'already exists' in duplicate.output

    short = runner.invoke(args=['profile', 'create', '--email', 'new@example.com', '--password', '123'])
    assert 'at least 6 characters' in short.output


def test_set_password(app, make_profile):
    make_profile('dev@example.com')
    result = app.test_cli_runner().invoke(
        args=['profile', 'set-password', '--email', 'dev@example.com', '--password', 'newsecret']
    )
    assert 'Password updated.' in result.output
    with app.app_context():
        assert db.session.query(Profile).filter_by(email='dev@example.com').one().check_password('newsecret')


def test_set_password_matches_email_exactly(app, make_profile):
    make_profile('alice@example.com')
    runner = app.test_cli_runner()
    for pattern in ('%', 'alic_@example.com', '%@example.com'):
        result = runner.invoke(args=['profile', 'set-password', '--email', pattern, '--password', 'hijacked1'])
        assert 'No profile' in result.output
    with app.app_context():
        alice = db.session.query(Profile).filter_by(email='alice@example.com').one()
        assert not alice.check_password('hijacked1')


def test_create_duplicate_check_is_case_insensitive_not_a_pattern(app, make_profile):
    make_profile('aXb@example.com')
    runner = app.test_cli_runner()

    lookalike = runner.invoke(args=['profile', 'create', '--email', 'a_b@example.com', '--password', 'secret123'])
    assert 'Profile created successfully!' in lookalike.output

    same = runner.invoke(args=['profile', 'create', '--email', ' AXB@Example.com ', '--password', 'secret123'])
    assert 'already exists' in same.output
