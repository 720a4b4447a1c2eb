"""
Management command to load the standard field definitions and default layouts
"""
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError
from backend.metadata.xml_loader import DEFINITIONS_DIR, sync_all_definitions


class Command(BaseCommand):
    help = "Syncs the standard field definitions and default layouts from the XML definition files"

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Delete standard field definitions that are no longer in the definition files',
        )
        parser.add_argument(
            '--directory',
            default=str(DEFINITIONS_DIR),
            help='Directory holding the <object_code>.xml definition files',
        )

    def handle(self, *args, **options):
        directory = Path(options['directory'])
        if not directory.is_dir():
            raise CommandError(f"Definition directory not found: {directory}")

        self.stdout.write(self.style.SUCCESS("=" * 60))
        self.stdout.write(self.style.SUCCESS("LOADING FIELD DEFINITIONS"))
        self.stdout.write(self.style.SUCCESS("=" * 60))

        try:
            results = sync_all_definitions(directory, clear=options['clear'])
        except (ValueError, OSError) as e:
            raise CommandError(str(e))

        for stats in results:
            self.stdout.write(
                f"{stats['object_code']}: {stats['created']} created, {stats['updated']} updated, "
                f"{stats['deleted']} deleted, {stats['layouts']} layouts"
            )
        self.stdout.write(self.style.SUCCESS(f"Loaded definitions for {len(results)} objects."))
