import itertools
import logging
import threading
from dataclasses import dataclass
from datetime import datetime

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.utils import timezone

from .models import Simulation
from .utils import DEFAULT_MAPPING

logger = logging.getLogger(__name__)

PRESET_FIELDS = ('name', 'text_input', 'mapping_a', 'mapping_c', 'mapping_g', 'mapping_t')

DEFAULT_SIMULATION = {
    'name': 'Standard DNA Encoding',
    'text_input': 'Hello World',
    'mapping_a': DEFAULT_MAPPING['A'],
    'mapping_c': DEFAULT_MAPPING['C'],
    'mapping_g': DEFAULT_MAPPING['G'],
    'mapping_t': DEFAULT_MAPPING['T'],
}


@dataclass(frozen=True)
class PresetRecord:
    id: int
    name: str
    text_input: str
    mapping_a: str
    mapping_c: str
    mapping_g: str
    mapping_t: str
    created_at: datetime


class MemoryPresetStore:
    """
    Transient store keeping presets in a dict for the life of the process.
    """

    def __init__(self):
        self._presets = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def list(self):
        with self._lock:
            return list(self._presets.values())

    def get(self, preset_id):
        with self._lock:
            return self._presets.get(preset_id)

    def create(self, data):
        values = {field: data[field] for field in PRESET_FIELDS}
        with self._lock:
            preset = PresetRecord(id=next(self._ids), created_at=timezone.now(), **values)
            self._presets[preset.id] = preset
        logger.info("Created simulation id=%s name=%r in memory", preset.id, preset.name)
        return preset

    def delete(self, preset_id):
        with self._lock:
            removed = self._presets.pop(preset_id, None)
        if removed is None:
            logger.warning("Simulation id=%s not found in memory, nothing deleted", preset_id)
            return False
        logger.info("Deleted simulation id=%s from memory", preset_id)
        return True


class DatabasePresetStore:
    """
    Durable store backed by the Simulation model.
    """

    def list(self):
        return list(Simulation.objects.order_by('created_at', 'id'))

    def get(self, preset_id):
        try:
            return Simulation.objects.get(pk=preset_id)
        except Simulation.DoesNotExist:
            return None

    def create(self, data):
        preset = Simulation.objects.create(**{field: data[field] for field in PRESET_FIELDS})
        logger.info("Created simulation id=%s name=%r", preset.id, preset.name)
        return preset

    def delete(self, preset_id):
        deleted, _ = Simulation.objects.filter(pk=preset_id).delete()
        if not deleted:
            logger.warning("Simulation id=%s not found, nothing deleted", preset_id)
            return False
        logger.info("Deleted simulation id=%s", preset_id)
        return True


STORE_BACKENDS = {
    'memory': MemoryPresetStore,
    'database': DatabasePresetStore,
}

_store = None
_store_lock = threading.Lock()


def seed_default_simulation(store):
    """
    Create the "Standard DNA Encoding" preset if the store holds nothing.

    Returns the new preset, or None when the store already had data.
    """
    if store.list():
        return None
    preset = store.create(DEFAULT_SIMULATION)
    logger.info("Seeded default simulation id=%s", preset.id)
    return preset


def build_store(backend=None):
    """
    Instantiate the store named by backend (defaults to settings.SIMULATION_STORE).
    """
    backend = backend or getattr(settings, 'SIMULATION_STORE', 'database')
    try:
        store_class = STORE_BACKENDS[backend]
    except KeyError:
        raise ImproperlyConfigured(
            f"Unknown SIMULATION_STORE {backend!r}, expected one of {sorted(STORE_BACKENDS)}"
        )
    store = store_class()
    logger.info("Using %s simulation store", backend)
    seed_default_simulation(store)
    return store


def get_store():
    """Return the process-wide store, building it on first use."""
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                _store = build_store()
    return _store


def reset_store():
    global _store
    with _store_lock:
        _store = None
