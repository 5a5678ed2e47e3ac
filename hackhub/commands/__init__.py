from .profile import profile_commands


def register_commands(app):
    """Attach the ``flask profile ...`` management group."""
    app.cli.add_command(profile_commands)
