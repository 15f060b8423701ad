from heinjector.domain import UNSET, Payload, describe_identifier


class Database:
    pass


def test_payload_defaults():
    payload = Payload()

    assert payload.singleton
    assert not payload.no_cache
    assert payload.value is UNSET
    assert payload.cache is UNSET


def test_payload_copy_is_independent():
    shared = object()
    payload = Payload(value=shared, array=[1], newable_array=[Database], cache=[1])

    copied = payload.copy()
    copied.array.append(2)
    copied.newable_array.append(object)
    copied.cache.append(2)

    assert payload.array == [1]
    assert payload.newable_array == [Database]
    assert payload.cache == [1]
    assert copied.value is shared


def test_describe_identifier():
    assert describe_identifier(Database) == "Database"
    assert describe_identifier("routes") == "'routes'"
    assert describe_identifier(42) == "42"
