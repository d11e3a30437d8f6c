"""
Create an administrator account.

Usage:
    python manage.py create_admin --email admin@example.com --password secret

Email and password fall back to the ADMIN_EMAIL and ADMIN_PASSWORD
environment variables. An existing account is left untouched.
"""

from decouple import config
from django.core.management.base import BaseCommand, CommandError

from apps.accounts.services import create_admin_user, EmailTakenError


class Command(BaseCommand):
    help = 'Create an ADMIN account'

    def add_arguments(self, parser):
        parser.add_argument('--email', default=config('ADMIN_EMAIL', default='admin@example.com'))
        parser.add_argument('--password', default=config('ADMIN_PASSWORD', default=None))
        parser.add_argument('--name', default='Admin')

    def handle(self, *args, **options):
        if not options['password']:
            raise CommandError('A password is required (--password or ADMIN_PASSWORD)')

        try:
            user = create_admin_user(
                email=options['email'],
                password=options['password'],
                name=options['name'],
            )
        except EmailTakenError:
            raise CommandError(f"An account with email {options['email']} already exists")

        self.stdout.write(self.style.SUCCESS(f'Admin created: {user.email}'))
