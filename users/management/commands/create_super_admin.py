from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from moderation.choices import Role

User = get_user_model()


class Command(BaseCommand):
    help = "Create (or promote) a SUPER_ADMIN user. Safe to run repeatedly."

    def add_arguments(self, parser):
        parser.add_argument("--email", type=str, default=None, help="Defaults to SUPER_ADMIN_EMAIL")
        parser.add_argument("--password", type=str, default=None, help="Defaults to SUPER_ADMIN_PASSWORD")
        parser.add_argument("--name", type=str, default="Super Admin")

    def handle(self, *args, **options):
        email = (options["email"] or settings.SUPER_ADMIN_EMAIL or "").strip().lower()
        password = options["password"] or settings.SUPER_ADMIN_PASSWORD
        if not email:
            raise CommandError("An email is required (--email or SUPER_ADMIN_EMAIL).")

        with transaction.atomic():
            user = User.objects.filter(email__iexact=email).first()
            created = user is None
            if created:
                if not password:
                    raise CommandError("A password is required to create a new user.")
                user = User.objects.create_user(username=email, email=email, password=password)
            elif options["password"]:
                user.set_password(password)
                user.save(update_fields=["password"])

            profile = user.profile
            profile.role = Role.SUPER_ADMIN
            if not profile.name:
                profile.name = options["name"]
            profile.save(update_fields=["role", "name", "updated_at"])

        if created:
            self.stdout.write(self.style.SUCCESS(f"Created super admin {email}"))
        else:
            self.stdout.write(self.style.WARNING(f"Promoted existing user {email} to super admin"))
