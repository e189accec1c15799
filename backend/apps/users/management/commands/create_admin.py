from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from apps.users.models import UserRole


class Command(BaseCommand):
    help = 'Create the administrator account, or promote an existing account with the same email'

    def add_arguments(self, parser):
        defaults = settings.ADMIN_BOOTSTRAP
        parser.add_argument('--email', default=defaults['EMAIL'])
        parser.add_argument('--password', default=defaults['PASSWORD'])
        parser.add_argument('--name', default=defaults['NAME'])

    @transaction.atomic
    def handle(self, *args, **options):
        User = get_user_model()
        email = User.objects.normalize_email(options['email'])

        user = User.objects.filter(email__iexact=email).first()
        if user is not None:
            user.role = UserRole.ADMIN
            user.is_staff = True
            user.is_active = True
            user.save(update_fields=['role', 'is_staff', 'is_active', 'updated_at'])
            self.stdout.write(self.style.WARNING(f'User {email} already exists; promoted to administrator'))
            return

        User.objects.create_user(
            username=email,
            email=email,
            password=options['password'],
            name=options['name'],
            role=UserRole.ADMIN,
            is_staff=True,
            email_verified_at=timezone.now(),
        )
        self.stdout.write(self.style.SUCCESS(f'Created administrator {email}'))
        self.stdout.write('Change the administrator password after the first login.')
