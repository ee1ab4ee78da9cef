import re
from collections import Counter, namedtuple

BASES = ("A", "C", "G", "T")

DEFAULT_MAPPING = {
    "A": "00",
    "C": "01",
    "G": "10",
    "T": "11",
}

DUPLICATE_ERROR = "Duplicate binary value"
CHARACTER_ERROR = "Must contain only 0 and 1"
LENGTH_ERROR = "Must be 2 bits"

EncodedUnit = namedtuple("EncodedUnit", ["base", "binary"])

_NON_BINARY = re.compile(r"[^01]")


def _code_units(text: str):
    """Yield the UTF-16 code units of text (astral characters give two)."""
    data = text.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        yield int.from_bytes(data[i:i + 2], "little")


def _to_bits(code: int) -> str:
    return format(code, "b").zfill(8)


def validate_mapping(mapping: dict) -> dict:
    """Return a {base: message} report of every malformed base.

    Duplicate detection flags every base sharing a value, not just the
    second occurrence. Character and length problems are checked afterwards
    and replace the duplicate message for the same base.
    """
    values = {base: mapping.get(base) or "" for base in BASES}
    errors = {}

    occurrences = Counter(values.values())
    for base, value in values.items():
        if occurrences[value] > 1:
            errors[base] = DUPLICATE_ERROR

    for base, value in values.items():
        if _NON_BINARY.search(value):
            errors[base] = CHARACTER_ERROR

    for base, value in values.items():
        if len(value) != 2:
            errors[base] = LENGTH_ERROR

    return errors


def is_valid_mapping(mapping: dict) -> bool:
    return not validate_mapping(mapping)


def reverse_mapping(mapping: dict) -> dict:
    """Binary code -> base lookup."""
    return {mapping[base]: base for base in BASES if base in mapping}


def encode(text: str, mapping: dict) -> list:
    """Encode text into a list of EncodedUnit.

    An invalid mapping or empty text gives an empty list. Chunks with no
    base in the reversed mapping are skipped.
    """
    if not text or not is_valid_mapping(mapping):
        return []

    lookup = reverse_mapping(mapping)
    sequence = []
    for code in _code_units(text):
        bits = _to_bits(code)
        for i in range(0, len(bits), 2):
            chunk = bits[i:i + 2]
            base = lookup.get(chunk)
            if base:
                sequence.append(EncodedUnit(base, chunk))
    return sequence


def to_binary_string(text: str) -> str:
    """8-bit zero padded binary of each character, space separated."""
    return " ".join(_to_bits(code) for code in _code_units(text))


def decode(binary_text: str) -> str:
    """Decode whole 8-bit windows of the 0/1 characters in binary_text."""
    clean = _NON_BINARY.sub("", binary_text or "")
    chars = []
    for i in range(0, len(clean) - len(clean) % 8, 8):
        chars.append(chr(int(clean[i:i + 8], 2)))
    return "".join(chars)


def sequence_to_binary(sequence) -> str:
    """Join the binary codes of an encoded sequence."""
    return "".join(unit.binary for unit in sequence)


def mapping_from_preset(preset) -> dict:
    """Rebuild the {base: code} mapping flattened onto a preset's fields."""
    return {
        "A": preset.mapping_a,
        "C": preset.mapping_c,
        "G": preset.mapping_g,
        "T": preset.mapping_t,
    }


def first_error(errors, prefix=""):
    """Return (field, message) of the first entry in a DRF errors structure."""
    if isinstance(errors, dict):
        for field, detail in errors.items():
            name = field if not prefix else f"{prefix}.{field}"
            if field == "non_field_errors":
                name = prefix
            return first_error(detail, name)
    if isinstance(errors, (list, tuple)) and errors:
        return first_error(errors[0], prefix)
    return prefix, str(errors)
