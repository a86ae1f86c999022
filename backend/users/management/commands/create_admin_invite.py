from django.core.management.base import BaseCommand

from users.models import AdminInvite


class Command(BaseCommand):
    help = "Issue single-use invite codes that allow registering with the admin role."

    def add_arguments(self, parser):
        parser.add_argument("--count", type=int, default=1, help="Number of codes to issue")

    def handle(self, *args, **options):
        for _ in range(max(options["count"], 1)):
            invite = AdminInvite.issue()
            self.stdout.write(invite.code)
