"""
Management command to create missing company settings from the setting masters
"""
from django.core.management.base import BaseCommand, CommandError
from backend.core.models import Company
from backend.setup.services import initialize_company_settings


class Command(BaseCommand):
    help = "Creates every company's missing settings with the master default values"

    def add_arguments(self, parser):
        parser.add_argument(
            '--company',
            type=int,
            help='Only initialize the settings of this company id',
        )

    def handle(self, *args, **options):
        companies = Company.objects.all()
        if options.get('company'):
            companies = companies.filter(pk=options['company'])
            if not companies.exists():
                raise CommandError(f"Company {options['company']} not found")

        total = 0
        for company in companies:
            created = initialize_company_settings(company)
            total += created
            if created:
                self.stdout.write(f"{company}: {created} settings created")
        self.stdout.write(self.style.SUCCESS(f"Created {total} company settings."))
