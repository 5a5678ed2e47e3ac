"""Profile management CLI commands."""

import click
from flask.cli import with_appcontext
from sqlalchemy import func

from hackhub.extensions import db
from hackhub.models import Profile, ProfileRole


def _get_profile_by_email(email: str) -> Profile | None:
    return (
        db.session.query(Profile)
        .filter(func.lower(Profile.email) == email.strip().lower())
        .first()
    )


@click.group('profile')
def profile_commands():
    """Profile management commands."""
    pass


@profile_commands.command('create')
@click.option('--email', required=True, help='Login email')
@click.option('--password', required=True, help='Login password (at least 6 characters)')
@click.option('--role', type=click.Choice([r.value for r in ProfileRole]), default=ProfileRole.PARTICIPANT.value, show_default=True)
@click.option('--team', 'team_id', help='Team id shared by teammates')
@with_appcontext
def create_profile(email, password, role, team_id):
    """Create a profile that can sign in.

    Example:
        flask profile create --email dev@example.com --password secret1 --team team-42
    """
    if len(password) < 6:
        click.echo(click.style('Error: Password must be at least 6 characters long', fg='red'))
        return

    if _get_profile_by_email(email):
        click.echo(click.style(f'Error: Profile with email "{email}" already exists', fg='red'))
        return

    profile = Profile(email=email.strip().lower(), role=ProfileRole(role), team_id=team_id or None)
    profile.set_password(password)
    db.session.add(profile)
    db.session.commit()

    click.echo(click.style('Profile created successfully!', fg='green'))
    click.echo(f'  Email: {profile.email}')
    click.echo(f'  Role: {role}')
    click.echo(f'  Team: {team_id or "-"}')


@profile_commands.command('list')
@click.option('--team', 'team_id', help='Only show members of this team')
@with_appcontext
def list_profiles(team_id):
    """List profiles and their problem selections."""
    query = db.session.query(Profile).order_by(Profile.email.asc())
    if team_id:
        query = query.filter(Profile.team_id == team_id)
    profiles = query.all()

    if not profiles:
        click.echo('No profiles found.')
        return

    for profile in profiles:
        locked = 'locked' if profile.problem_submission_locked else 'open'
        click.echo(
            f'{profile.email:<32} {profile.role.value:<12} '
            f'{profile.team_id or "-":<16} {profile.selected_problem or "-":<10} {locked}'
        )


@profile_commands.command('set-password')
@click.option('--email', required=True, help='Login email')
@click.option('--password', required=True, help='New password')
@with_appcontext
def set_password(email, password):
    """Set or reset a profile's password."""
    profile = _get_profile_by_email(email)
    if not profile:
        click.echo(click.style(f'Error: No profile {email} found', fg='red'))
        return

    profile.set_password(password)
    db.session.commit()
    click.echo(click.style('Password updated.', fg='green'))
