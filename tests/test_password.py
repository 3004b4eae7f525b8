"""Tests for password and batch generation."""

import random

import pytest

from passwd_gen import (
    BASE_CHARSET,
    EXTENDED_SPECIALS,
    LINE_SEPARATOR,
    build_alphabet,
    generate_batch,
    generate_password,
)


class ScriptedRandom:
    """Returns predetermined indices and records the requested ranges."""

    def __init__(self, indices):
        self.indices = list(indices)
        self.stops = []

    def randrange(self, stop):
        self.stops.append(stop)
        return self.indices.pop(0)


def test_base_alphabet_composition():
    alphabet, base_length = build_alphabet(False)

    assert alphabet == (
        "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789*&^%$#@!"
    )
    assert len(alphabet) == 70
    assert base_length == 70


def test_extended_alphabet_appends_specials():
    alphabet, base_length = build_alphabet(True)

    assert alphabet == BASE_CHARSET + "~`()_-+={[}]|\\:;\"'<,>.?/"
    assert len(EXTENDED_SPECIALS) == 24
    assert len(alphabet) == 94
    assert base_length == 70
    assert not set(EXTENDED_SPECIALS) & set(BASE_CHARSET)


@pytest.mark.parametrize("extend", [False, True])
@pytest.mark.parametrize("length", [0, 1, 2, 30, 257])
def test_password_length_and_membership(length, extend):
    alphabet, _ = build_alphabet(extend)
    password = generate_password(length, extend)

    assert len(password) == length
    assert password.isascii()
    assert set(password) <= set(alphabet)


def test_zero_length_draws_nothing():
    rng = ScriptedRandom([])

    assert generate_password(0, True, rng) == ""
    assert rng.stops == []


def test_one_draw_per_character():
    rng = ScriptedRandom([0, 1, 2, 93])

    assert generate_password(4, True, rng) == "ABC/"
    assert rng.stops == [94, 94, 94, 94]


def test_first_character_never_extended():
    rng = random.Random(1234)
    for _ in range(2000):
        password = generate_password(3, True, rng)
        assert password[0] in BASE_CHARSET


def test_first_draw_on_boundary_is_remapped():
    # index 70 is the first extended character and must not lead a password
    assert generate_password(1, True, ScriptedRandom([70])) == "u"
    assert generate_password(1, True, ScriptedRandom([93])) == "!"


def test_last_base_index_is_not_remapped():
    assert generate_password(1, True, ScriptedRandom([69])) == "!"
    assert generate_password(1, True, ScriptedRandom([0])) == "A"


def test_guard_only_covers_first_position():
    password = generate_password(3, True, ScriptedRandom([5, 70, 93]))

    assert password == "F~/"


def test_no_remap_without_extend():
    assert generate_password(2, False, ScriptedRandom([69, 0])) == "!A"


def test_seeded_generation_is_reproducible():
    first = generate_batch(20, 3, True, random.Random(42))
    second = generate_batch(20, 3, True, random.Random(42))

    assert first == second


def test_base_alphabet_coverage():
    password = generate_password(10000, False, random.Random(7))

    assert set(password) == set(BASE_CHARSET)


@pytest.mark.parametrize("extend", [False, True])
def test_empty_batch(extend):
    assert generate_batch(30, 0, extend) == ""


def test_single_password_batch():
    batch = generate_batch(30, 1, False)

    assert len(batch) == 30
    assert batch.isascii()
    assert not batch.endswith(LINE_SEPARATOR)


def test_single_password_batch_matches_password():
    assert generate_batch(12, 1, True, random.Random(3)) == generate_password(
        12, True, random.Random(3)
    )


def test_two_password_batch():
    batch = generate_batch(30, 2, True)

    assert len(batch) == 62
    assert not batch.endswith(LINE_SEPARATOR)
    lines = batch.split(LINE_SEPARATOR)
    assert len(lines) == 2
    for line in lines:
        assert len(line) == 30
        assert line[0] in BASE_CHARSET


def test_ten_password_batch():
    batch = generate_batch(40, 10, False)

    assert len(batch) == 418
    assert batch.count(LINE_SEPARATOR) == 9
    assert not batch.endswith(LINE_SEPARATOR)
    assert not batch.startswith(LINE_SEPARATOR)


def test_batch_of_empty_passwords_is_only_separators():
    assert generate_batch(0, 3, False) == "\r\n\r\n"


def test_batch_preserves_generation_order():
    rng = ScriptedRandom([0, 1, 2, 3])

    assert generate_batch(2, 2, False, rng) == "AB\r\nCD"
