from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db.models import Q

from apps.users.models import UserRole

User = get_user_model()


class Command(BaseCommand):
    help = "Grant (or with --revoke, remove) the admin role for a user given by username or email."

    def add_arguments(self, parser):
        parser.add_argument("user", help="username or email")
        parser.add_argument("--revoke", action="store_true", help="Remove the admin role instead")

    def handle(self, *args, **opts):
        ident = opts["user"]
        try:
            user = User.objects.get(Q(username=ident) | Q(email__iexact=ident))
        except User.DoesNotExist:
            raise CommandError(f"No user matches {ident!r}")
        except User.MultipleObjectsReturned:
            raise CommandError(f"{ident!r} matches more than one user by username or email")

        if opts["revoke"]:
            deleted, _ = UserRole.objects.filter(user=user, role=UserRole.ADMIN).delete()
            msg = "Admin role revoked" if deleted else "User had no admin role"
            self.stdout.write(self.style.SUCCESS(f"{msg}: {user}"))
            return

        _, created = UserRole.objects.get_or_create(user=user, role=UserRole.ADMIN)
        msg = "Admin role granted" if created else "User is already an admin"
        self.stdout.write(self.style.SUCCESS(f"{msg}: {user}"))
