from django.core.management.base import BaseCommand, CommandError

from farmdesk.farms.access import apply_role_defaults, default_permissions_for_role
from farmdesk.farms.models import Farm, UserFarm


class Command(BaseCommand):
    help = 'Grant the default module permissions of each member\'s role on their farms'

    def add_arguments(self, parser):
        parser.add_argument('--farm', type=int, help='Only process memberships of this farm ID')
        parser.add_argument('--reset', action='store_true', help='Replace existing permissions with the role defaults')

    def handle(self, *args, **options):
        memberships = UserFarm.objects.select_related('user', 'farm').order_by('farm_id', 'user_id')

        farm_id = options.get('farm')
        if farm_id is not None:
            if not Farm.objects.filter(pk=farm_id).exists():
                raise CommandError(f'Farm {farm_id} does not exist')
            memberships = memberships.filter(farm_id=farm_id)

        reset = options['reset']
        processed = 0
        written_total = 0

        for membership in memberships:
            user = membership.user
            written = apply_role_defaults(user, membership.farm, reset=reset)
            processed += 1
            written_total += written
            if written:
                modules = ', '.join(sorted(default_permissions_for_role(user.role)))
                self.stdout.write(self.style.SUCCESS(
                    f'✓ {user.username} @ {membership.farm.name} ({user.role}): {written} permissions granted [{modules}]'
                ))
            else:
                self.stdout.write(f'  {user.username} @ {membership.farm.name}: already up to date')

        self.stdout.write(self.style.SUCCESS(
            f'\nCompleted: {processed} memberships processed, {written_total} permissions written'
        ))
