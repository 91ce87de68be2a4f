"""
Management Commands

    flask --app app init-db
    flask --app app purge-sessions
    flask --app app create-admin someone@example.com [--password ...]
"""

import click
from flask import current_app

from storefront.errors import ApiError
from storefront.extensions import db


def register_commands(app):

    @app.cli.command('init-db')
    def init_db():
        """Create tables and seed the default administrator and catalog."""
        from storefront import ensure_default_data
        db.create_all()
        ensure_default_data(current_app)
        click.echo('Database initialised')

    @app.cli.command('purge-sessions')
    def purge_sessions():
        """Delete sessions whose idle window has run out."""
        deleted = current_app.extensions['session_store'].purge_expired()
        click.echo(f'Purged {deleted} expired sessions')

    @app.cli.command('create-admin')
    @click.argument('email')
    @click.option('--password', default=None, help='Create the account with this password if it does not exist.')
    @click.option('--first-name', default='Admin')
    @click.option('--last-name', default='SneakZone')
    def create_admin(email, password, first_name, last_name):
        """Promote an existing account to administrator, or create one."""
        from storefront.services.admin import ensure_admin
        from storefront.services.validation import normalize_email, PASSWORD_MIN_LENGTH

        normalized = normalize_email(email)
        if normalized is None:
            raise click.BadParameter('not a valid email address', param_hint='EMAIL')
        if password is not None and len(password) < PASSWORD_MIN_LENGTH:
            raise click.BadParameter(
                f'must be at least {PASSWORD_MIN_LENGTH} characters long', param_hint='--password'
            )
        try:
            user, created = ensure_admin(normalized, password, first_name, last_name)
        except ApiError as e:
            raise click.ClickException(e.message)
        if created:
            click.echo(f'New admin user created: {user.email}')
        else:
            click.echo(f'Existing user promoted to admin: {user.email}')
