from django.core.management.base import BaseCommand
from donors.models import Donor
from donors.ratings import recompute_rating_aggregate


class Command(BaseCommand):
    help = 'Rebuild donor rating aggregates from completed blood requests'

    def add_arguments(self, parser):
        parser.add_argument(
            '--donor',
            type=int,
            help='Only rebuild the aggregate of this donor id'
        )

    def handle(self, *args, **options):
        donors = Donor.objects.all()
        if options['donor']:
            donors = donors.filter(pk=options['donor'])

        count = 0
        for donor in donors.iterator():
            recompute_rating_aggregate(donor)
            count += 1

        self.stdout.write(
            self.style.SUCCESS(f"Rebuilt rating aggregates for {count} donor(s)")
        )
