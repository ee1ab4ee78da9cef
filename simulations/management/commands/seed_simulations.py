from django.core.management.base import BaseCommand

from simulations.services import DatabasePresetStore, seed_default_simulation


class Command(BaseCommand):
    help = 'Create the default "Standard DNA Encoding" simulation if none exist'

    def handle(self, *args, **options):
        preset = seed_default_simulation(DatabasePresetStore())
        if preset is None:
            self.stdout.write("Simulations already present, nothing seeded.")
        else:
            self.stdout.write(self.style.SUCCESS(f"Seeded simulation id={preset.id}"))
