from __future__ import annotations

from safebydesign.core.rng import outcome_seed, seeded_random_from_int, seeded_shuffle, seeded_stream


def test_string_stream_is_reproducible():
    a = seeded_stream("42-team-a-1")
    b = seeded_stream("42-team-a-1")
    assert [a() for _ in range(10)] == [b() for _ in range(10)]


def test_string_stream_differs_per_seed():
    a = seeded_stream(outcome_seed(42, "team-a", 1))
    b = seeded_stream(outcome_seed(42, "team-b", 1))
    assert [a() for _ in range(5)] != [b() for _ in range(5)]


def test_outcome_seed_format():
    assert outcome_seed(7, "t1", 3) == "7-t1-3"


def test_int_stream_in_unit_range_and_reproducible():
    a = seeded_random_from_int(12345)
    b = seeded_random_from_int(12345)
    values = [a() for _ in range(200)]
    assert values == [b() for _ in range(200)]
    assert all(0.0 <= v < 1.0 for v in values)


def test_int_stream_first_value_matches_lcg():
    rand = seeded_random_from_int(1)
    expected = ((1 * 1103515245 + 12345) & 0x7FFFFFFF) / 2**31
    assert rand() == expected


def test_shuffle_is_permutation_and_does_not_mutate_input():
    items = list(range(20))
    shuffled = seeded_shuffle(items, seeded_random_from_int(99))
    assert sorted(shuffled) == items
    assert items == list(range(20))


def test_shuffle_same_seed_same_order():
    items = ["a", "b", "c", "d", "e", "f"]
    first = seeded_shuffle(items, seeded_random_from_int(5000))
    second = seeded_shuffle(items, seeded_random_from_int(5000))
    assert first == second


def test_shuffle_of_empty_and_single():
    assert seeded_shuffle([], seeded_random_from_int(1)) == []
    assert seeded_shuffle(["x"], seeded_random_from_int(1)) == ["x"]
