# users/management/commands/seed_users.py
"""
Seed the default shop accounts (admin / manager / staff).

Idempotent: existing accounts are realigned to the seeded role and flags;
passwords are only reset with --force-password.
"""

from __future__ import annotations

from dataclasses import dataclass

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from permissions.roles import ROLE_ADMIN, ROLE_MANAGER, ROLE_STAFF


@dataclass(frozen=True)
class SeedUserSpec:
    label: str
    role: str
    email: str
    username: str
    first_name: str = ""
    last_name: str = ""


SEED_USERS = [
    SeedUserSpec("Owner", ROLE_ADMIN, "admin@example.com", "admin", "Shop", "Owner"),
    SeedUserSpec("Manager", ROLE_MANAGER, "manager@example.com", "manager", "Front", "Desk"),
    SeedUserSpec("Tailor", ROLE_STAFF, "tailor@example.com", "tailor", "Lead", "Tailor"),
]


class Command(BaseCommand):
    help = "Seed shop users (admin, manager, staff)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--password",
            type=str,
            default="Pass1234!",
            help="Password for seeded users (default: Pass1234!)",
        )
        parser.add_argument(
            "--force-password",
            action="store_true",
            help="Reset password for existing seeded users too.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        password = options.get("password") or ""
        force_password = bool(options.get("force_password"))

        if len(password) < 6:
            raise CommandError("--password must be at least 6 characters.")

        User = get_user_model()
        created_count = 0
        reset_count = 0

        for seed in SEED_USERS:
            is_admin = seed.role == ROLE_ADMIN
            user = User.objects.filter(email=seed.email).first()
            created = user is None

            if created:
                user = User.objects.create_user(
                    email=seed.email,
                    username=seed.username,
                    password=password,
                    first_name=seed.first_name,
                    last_name=seed.last_name,
                    role=seed.role,
                    is_staff=True,
                    is_superuser=is_admin,
                )
                created_count += 1
                self.stdout.write(f"created: {seed.label} ({seed.role})")
                continue

            user.role = seed.role
            user.is_staff = True
            user.is_superuser = is_admin
            user.is_active = True
            if force_password:
                user.set_password(password)
                reset_count += 1
            user.save()
            self.stdout.write(f"exists:  {seed.label} ({seed.role})")

        self.stdout.write(self.style.SUCCESS(f"Created users: {created_count}"))
        if force_password:
            self.stdout.write(f"Passwords reset: {reset_count}")
