from django.core.management.base import BaseCommand
from django.db import transaction
from django.db.models import Q
from backoffice.catalog.models import Item
from backoffice.catalog.utils import get_display_item_code, item_code_taken


class Command(BaseCommand):
    help = 'Assign category-based item codes (e.g., GI7) to items created without one'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Run without making changes to see what would be updated',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']

        items = Item.objects.filter(
            Q(item_code__isnull=True) | Q(item_code='')
        ).select_related('category').order_by('pk')

        total_count = items.count()
        updated_count = 0
        skipped_count = 0
        error_count = 0

        self.stdout.write(f'Found {total_count} items without an item code')

        if dry_run:
            self.stdout.write(self.style.WARNING('DRY RUN MODE - No changes will be made'))

        for item in items:
            try:
                item.item_code = None
                item_code = get_display_item_code(item)

                # Codes typed in by hand can already hold the generated value
                if item_code_taken(item_code, exclude_pk=item.pk):
                    skipped_count += 1
                    self.stdout.write(
                        self.style.WARNING(
                            f'  - Skipped {item.name} (id={item.pk}) - {item_code} is already used by another item'
                        )
                    )
                    continue

                if updated_count < 10 or updated_count % 100 == 0:
                    self.stdout.write(f'  Updating: {item.name} (id={item.pk}) -> {item_code}')

                if not dry_run:
                    item.item_code = item_code
                    with transaction.atomic():
                        item.save(update_fields=['item_code', 'updated_at'])

                updated_count += 1
                if updated_count % 100 == 0:
                    self.stdout.write(f'  Processed {updated_count}/{total_count}...')

            except Exception as e:
                error_count += 1
                self.stdout.write(
                    self.style.ERROR(
                        f'  Error processing item {item.pk}: {str(e)}'
                    )
                )

        if dry_run:
            self.stdout.write(self.style.SUCCESS(
                f'\nDRY RUN Complete: Would update {updated_count} items, '
                f'{skipped_count} skipped, {error_count} errors'
            ))
        else:
            self.stdout.write(self.style.SUCCESS(
                f'\nCompleted: {updated_count} items updated, '
                f'{skipped_count} skipped, {error_count} errors'
            ))
