import json
import itertools
from concurrent.futures import ThreadPoolExecutor
from io import StringIO

from django.core.exceptions import ImproperlyConfigured
from django.core.management import call_command
from django.test import Client, SimpleTestCase, TestCase, override_settings

from .models import Simulation
from .services import (
    DEFAULT_SIMULATION,
    DatabasePresetStore,
    MemoryPresetStore,
    build_store,
    reset_store,
    seed_default_simulation,
)
from .utils import (
    CHARACTER_ERROR,
    DEFAULT_MAPPING,
    DUPLICATE_ERROR,
    LENGTH_ERROR,
    decode,
    encode,
    first_error,
    is_valid_mapping,
    mapping_from_preset,
    sequence_to_binary,
    to_binary_string,
    validate_mapping,
)


def preset_data(name="Demo", text="Hi", a="00", c="01", g="10", t="11"):
    return {
        'name': name,
        'text_input': text,
        'mapping_a': a,
        'mapping_c': c,
        'mapping_g': g,
        'mapping_t': t,
    }


class CodecTests(SimpleTestCase):

    def test_hi_with_default_mapping(self):
        sequence = encode("Hi", DEFAULT_MAPPING)
        self.assertEqual([u.base for u in sequence], list("CAGACGGC"))
        self.assertEqual([u.binary for u in sequence],
                         ["01", "00", "10", "00", "01", "10", "10", "01"])
        self.assertEqual(to_binary_string("Hi"), "01001000 01101001")

    def test_empty_text_is_idle(self):
        self.assertEqual(encode("", DEFAULT_MAPPING), [])
        self.assertEqual(to_binary_string(""), "")

    def test_invalid_mapping_encodes_nothing(self):
        mapping = {"A": "00", "C": "00", "G": "10", "T": "11"}
        self.assertEqual(encode("Hello", mapping), [])

    def test_every_valid_mapping_covers_all_bits(self):
        text = "Hello, World! ~"
        expected = to_binary_string(text).replace(" ", "")
        for codes in itertools.permutations(["00", "01", "10", "11"]):
            mapping = dict(zip("ACGT", codes))
            sequence = encode(text, mapping)
            self.assertEqual(len(sequence), 4 * len(text))
            self.assertEqual("".join(mapping[u.base] for u in sequence), expected)
            self.assertEqual(sequence_to_binary(sequence), expected)

    def test_wide_character_skips_unmappable_chunk(self):
        # 256 renders as 9 bits, the lone trailing bit has no base
        self.assertEqual(to_binary_string("Ā"), "100000000")
        sequence = encode("Ā", DEFAULT_MAPPING)
        self.assertEqual([u.base for u in sequence], ["G", "A", "A", "A"])

    def test_astral_character_uses_utf16_code_units(self):
        self.assertEqual(to_binary_string("\U0001F600"),
                         "1101100000111101 1101111000000000")

    def test_latin1_character_fits_one_byte(self):
        self.assertEqual(to_binary_string("é"), "11101001")
        self.assertEqual(decode("11101001"), "é")

    def test_decode_examples(self):
        self.assertEqual(decode(""), "")
        self.assertEqual(decode("abc"), "")
        self.assertEqual(decode("0100100001"), "H")
        self.assertEqual(decode("01001000 01101001"), "Hi")
        self.assertEqual(decode("0100-1000\n0110x1001"), "Hi")

    def test_decode_round_trip(self):
        for text in ["Hello World", "a", " ", "DNA 101", "\x00\xff"]:
            self.assertEqual(decode(to_binary_string(text)), text)


class MappingValidationTests(SimpleTestCase):

    def test_default_mapping_is_valid(self):
        self.assertEqual(validate_mapping(DEFAULT_MAPPING), {})
        self.assertTrue(is_valid_mapping(DEFAULT_MAPPING))

    def test_duplicates_flag_every_participant(self):
        errors = validate_mapping({"A": "00", "C": "01", "G": "00", "T": "11"})
        self.assertEqual(errors, {"A": DUPLICATE_ERROR, "G": DUPLICATE_ERROR})

        errors = validate_mapping({"A": "10", "C": "10", "G": "10", "T": "11"})
        self.assertEqual(set(errors), {"A", "C", "G"})

    def test_wrong_length_is_invalid_even_if_distinct(self):
        errors = validate_mapping({"A": "0", "C": "01", "G": "10", "T": "111"})
        self.assertEqual(errors, {"A": LENGTH_ERROR, "T": LENGTH_ERROR})
        self.assertFalse(is_valid_mapping({"A": "0", "C": "01", "G": "10", "T": "111"}))

    def test_length_error_overrides_duplicate(self):
        errors = validate_mapping({"A": "1", "C": "1", "G": "10", "T": "11"})
        self.assertEqual(errors, {"A": LENGTH_ERROR, "C": LENGTH_ERROR})

    def test_non_binary_characters(self):
        errors = validate_mapping({"A": "0a", "C": "01", "G": "10", "T": "11"})
        self.assertEqual(errors, {"A": CHARACTER_ERROR})

    def test_missing_base_counts_as_empty(self):
        errors = validate_mapping({"A": "00", "C": "01", "G": "10"})
        self.assertEqual(errors, {"T": LENGTH_ERROR})

    def test_first_error(self):
        self.assertEqual(first_error({"mappingA": ["bad"]}), ("mappingA", "bad"))
        self.assertEqual(first_error({"mapping": {"T": ["nope"]}}), ("mapping.T", "nope"))
        self.assertEqual(first_error({"non_field_errors": ["whole"]}), ("", "whole"))


class MemoryPresetStoreTests(SimpleTestCase):

    def setUp(self):
        self.store = MemoryPresetStore()

    def test_create_list_get_delete(self):
        first = self.store.create(preset_data(name="first"))
        second = self.store.create(preset_data(name="second"))

        self.assertEqual([p.id for p in self.store.list()], [first.id, second.id])
        self.assertEqual(self.store.get(second.id), second)
        self.assertIsNotNone(first.created_at)

        self.assertTrue(self.store.delete(first.id))
        self.assertEqual(self.store.list(), [second])
        self.assertIsNone(self.store.get(first.id))
        self.assertFalse(self.store.delete(first.id))

    def test_ids_are_not_reused(self):
        first = self.store.create(preset_data())
        self.store.delete(first.id)
        second = self.store.create(preset_data())
        self.assertGreater(second.id, first.id)

    def test_concurrent_creates_get_distinct_ids(self):
        with ThreadPoolExecutor(max_workers=8) as pool:
            presets = list(pool.map(lambda i: self.store.create(preset_data(name=str(i))), range(50)))
        self.assertEqual(len({p.id for p in presets}), 50)
        self.assertEqual(len(self.store.list()), 50)

    def test_mapping_from_preset(self):
        preset = self.store.create(preset_data(a="11", c="10", g="01", t="00"))
        self.assertEqual(mapping_from_preset(preset), {"A": "11", "C": "10", "G": "01", "T": "00"})

    def test_seed_only_when_empty(self):
        seeded = seed_default_simulation(self.store)
        self.assertEqual(seeded.name, "Standard DNA Encoding")
        self.assertEqual(seeded.text_input, "Hello World")
        self.assertEqual(mapping_from_preset(seeded), DEFAULT_MAPPING)

        self.assertIsNone(seed_default_simulation(self.store))
        self.assertEqual(len(self.store.list()), 1)

    def test_build_memory_store_is_seeded(self):
        store = build_store('memory')
        self.assertEqual([p.name for p in store.list()], [DEFAULT_SIMULATION['name']])

    def test_unknown_backend(self):
        with self.assertRaises(ImproperlyConfigured):
            build_store('redis')


class DatabasePresetStoreTests(TestCase):

    def setUp(self):
        reset_store()
        Simulation.objects.all().delete()
        self.store = DatabasePresetStore()

    def test_create_list_get_delete(self):
        first = self.store.create(preset_data(name="first"))
        second = self.store.create(preset_data(name="second"))

        self.assertEqual([p.id for p in self.store.list()], [first.id, second.id])
        self.assertEqual(self.store.get(first.id).name, "first")

        self.assertTrue(self.store.delete(first.id))
        self.assertIsNone(self.store.get(first.id))
        self.assertFalse(self.store.delete(first.id))
        self.assertEqual([p.id for p in self.store.list()], [second.id])

    def test_seed_only_when_empty(self):
        self.assertIsNotNone(seed_default_simulation(self.store))
        self.assertIsNone(seed_default_simulation(self.store))
        self.assertEqual(Simulation.objects.count(), 1)
        self.assertEqual(Simulation.objects.get().name, "Standard DNA Encoding")

    def test_seed_command(self):
        out = StringIO()
        call_command('seed_simulations', stdout=out)
        self.assertIn("Seeded simulation", out.getvalue())

        out = StringIO()
        call_command('seed_simulations', stdout=out)
        self.assertIn("nothing seeded", out.getvalue())
        self.assertEqual(Simulation.objects.count(), 1)

    def test_database_store_is_seeded_when_built(self):
        build_store('database')
        self.assertEqual(list(Simulation.objects.values_list('name', flat=True)),
                         [DEFAULT_SIMULATION['name']])

        build_store('database')
        self.assertEqual(Simulation.objects.count(), 1)


class SimulationApiTests(TestCase):

    def setUp(self):
        reset_store()
        self.client = Client()

    def tearDown(self):
        reset_store()

    def post_json(self, url, payload):
        return self.client.post(url, data=json.dumps(payload), content_type="application/json")

    def valid_payload(self, **overrides):
        payload = {
            "name": "Biology 101 Demo",
            "textInput": "Hi",
            "mappingA": "00",
            "mappingC": "01",
            "mappingG": "10",
            "mappingT": "11",
        }
        payload.update(overrides)
        return payload

    def test_create_then_list_and_get(self):
        resp = self.post_json("/api/simulations", self.valid_payload())
        self.assertEqual(resp.status_code, 201)
        created = resp.json()
        self.assertEqual(created["name"], "Biology 101 Demo")
        self.assertEqual(created["textInput"], "Hi")
        self.assertEqual(created["mappingT"], "11")
        self.assertIn("createdAt", created)

        resp = self.client.get("/api/simulations")
        self.assertEqual(resp.status_code, 200)
        ids = [p["id"] for p in resp.json()]
        self.assertEqual(ids.count(created["id"]), 1)
        self.assertEqual(ids[-1], created["id"])

        resp = self.client.get(f"/api/simulations/{created['id']}")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), created)

    def test_delete_then_gone(self):
        created = self.post_json("/api/simulations", self.valid_payload()).json()
        url = f"/api/simulations/{created['id']}"

        resp = self.client.delete(url)
        self.assertEqual(resp.status_code, 204)

        ids = [p["id"] for p in self.client.get("/api/simulations").json()]
        self.assertNotIn(created["id"], ids)

        resp = self.client.get(url)
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"message": "Simulation not found"})
        self.assertEqual(self.client.delete(url).status_code, 404)

    def test_missing_field(self):
        payload = self.valid_payload()
        del payload["mappingC"]
        resp = self.post_json("/api/simulations", payload)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["field"], "mappingC")
        self.assertTrue(resp.json()["message"])

    def test_malformed_mapping(self):
        resp = self.post_json("/api/simulations", self.valid_payload(mappingG="2x"))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["field"], "mappingG")

        resp = self.post_json("/api/simulations", self.valid_payload(mappingA="000"))
        self.assertEqual(resp.json()["field"], "mappingA")

    def test_blank_name(self):
        resp = self.post_json("/api/simulations", self.valid_payload(name="   "))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["field"], "name")

    def test_empty_text_and_duplicate_codes_are_accepted(self):
        resp = self.post_json("/api/simulations", self.valid_payload(textInput="", mappingC="00"))
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["textInput"], "")

    def test_names_need_not_be_unique(self):
        first = self.post_json("/api/simulations", self.valid_payload()).json()
        second = self.post_json("/api/simulations", self.valid_payload()).json()
        self.assertNotEqual(first["id"], second["id"])

    def test_malformed_json(self):
        resp = self.client.post("/api/simulations", data="{not json", content_type="application/json")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("message", resp.json())

    def test_unknown_id(self):
        self.assertEqual(self.client.get("/api/simulations/999999").status_code, 404)

    def test_non_numeric_id_gets_json_not_found(self):
        for url in ["/api/simulations/abc", "/api/simulations/-1", "/api/simulations/1.5"]:
            for resp in (self.client.get(url), self.client.delete(url)):
                self.assertEqual(resp.status_code, 404)
                self.assertEqual(resp["Content-Type"], "application/json")
                self.assertEqual(resp.json(), {"message": "Simulation not found"})

    @override_settings(SIMULATION_STORE='memory')
    def test_memory_backend(self):
        reset_store()
        presets = self.client.get("/api/simulations").json()
        self.assertEqual([p["name"] for p in presets], ["Standard DNA Encoding"])

        before = Simulation.objects.count()
        created = self.post_json("/api/simulations", self.valid_payload()).json()
        self.assertEqual(Simulation.objects.count(), before)
        self.assertEqual(self.client.get(f"/api/simulations/{created['id']}").json()["name"],
                         "Biology 101 Demo")


class CodecApiTests(TestCase):

    def setUp(self):
        reset_store()

    def tearDown(self):
        reset_store()

    def post_json(self, url, payload):
        return self.client.post(url, data=json.dumps(payload), content_type="application/json")

    def test_encode_default_mapping(self):
        resp = self.post_json("/api/codec/encode", {"text": "Hi"})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["binary"], "01001000 01101001")
        self.assertEqual("".join(u["base"] for u in data["sequence"]), "CAGACGGC")
        self.assertTrue(data["isValidMapping"])
        self.assertEqual(data["mappingErrors"], {})

    def test_encode_custom_mapping(self):
        mapping = {"A": "11", "C": "10", "G": "01", "T": "00"}
        data = self.post_json("/api/codec/encode", {"text": "H", "mapping": mapping}).json()
        self.assertEqual("".join(u["base"] for u in data["sequence"]), "GTCT")

    def test_encode_invalid_mapping_is_advisory(self):
        mapping = {"A": "00", "C": "00", "G": "1", "T": "11"}
        resp = self.post_json("/api/codec/encode", {"text": "Hi", "mapping": mapping})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertFalse(data["isValidMapping"])
        self.assertEqual(data["sequence"], [])
        self.assertEqual(data["binary"], "01001000 01101001")
        self.assertEqual(data["mappingErrors"],
                         {"A": DUPLICATE_ERROR, "C": DUPLICATE_ERROR, "G": LENGTH_ERROR})

    def test_encode_requires_text(self):
        resp = self.post_json("/api/codec/encode", {})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["field"], "text")

    def test_decode(self):
        resp = self.post_json("/api/codec/decode", {"binary": "0100100001"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"binary": "0100100001", "text": "H"})

        self.assertEqual(self.post_json("/api/codec/decode", {"binary": "abc"}).json()["text"], "")

    def test_decode_requires_binary(self):
        resp = self.post_json("/api/codec/decode", {})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["field"], "binary")

    def test_encode_saved_simulation(self):
        preset = DatabasePresetStore().create(preset_data(a="11", c="10", g="01", t="00"))
        resp = self.post_json("/api/codec/encode", {"simulationId": preset.id})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["text"], "Hi")
        self.assertEqual(data["mapping"], {"A": "11", "C": "10", "G": "01", "T": "00"})
        self.assertEqual("".join(u["base"] for u in data["sequence"]), "GTCTGCCG")
        self.assertEqual(data["sequenceBinary"], "0100100001101001")

    def test_encode_saved_simulation_with_overrides(self):
        preset = DatabasePresetStore().create(preset_data(a="11", c="10", g="01", t="00"))
        data = self.post_json("/api/codec/encode",
                              {"simulationId": preset.id, "text": "H"}).json()
        self.assertEqual("".join(u["base"] for u in data["sequence"]), "GTCT")

        data = self.post_json("/api/codec/encode",
                              {"simulationId": preset.id, "mapping": DEFAULT_MAPPING}).json()
        self.assertEqual("".join(u["base"] for u in data["sequence"]), "CAGACGGC")

    def test_encode_unknown_simulation(self):
        resp = self.post_json("/api/codec/encode", {"simulationId": 999999})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"message": "Simulation not found"})
