from django.apps import AppConfig
from django.conf import settings
from django.db.models.signals import post_migrate


def seed_after_migrate(sender, **kwargs):
    from .services import DatabasePresetStore, seed_default_simulation

    if getattr(settings, 'SIMULATION_STORE', 'database') != 'database':
        return
    seed_default_simulation(DatabasePresetStore())


class SimulationsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'simulations'
    verbose_name = 'DNA Encoding Simulations'

    def ready(self):
        post_migrate.connect(seed_after_migrate, sender=self)
