"""
Recompute room availability and property occupancy counters from tenants.

Usage:
    python manage.py sync_room_availability [--dry-run]
"""

from django.core.management.base import BaseCommand

from apps.tenants.services import resync_room_availability


class Command(BaseCommand):
    help = 'Repair Room.is_available and Property.occupied_rooms from tenant rows'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Report what would change without writing',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        report = resync_room_availability(dry_run=dry_run)

        prefix = 'Would mark' if dry_run else 'Marked'
        self.stdout.write(f"{prefix} {len(report['marked_occupied'])} room(s) occupied")
        self.stdout.write(f"{prefix} {len(report['marked_vacant'])} room(s) vacant")
        self.stdout.write(f"Occupancy counters off: {report['counters_changed']}")

        if not (report['marked_occupied'] or report['marked_vacant'] or report['counters_changed']):
            self.stdout.write(self.style.SUCCESS('Everything is consistent.'))
        elif dry_run:
            self.stdout.write(self.style.WARNING('Dry run: nothing written.'))
        else:
            self.stdout.write(self.style.SUCCESS('Room availability repaired.'))
