"""Operators: boolean short-circuiting, None-coalescing, unpacking, type checks."""

from __future__ import annotations

from functools import reduce

from snippetrunner.registry import snippet


def coalesce(value, default):
    """Return ``default`` only when ``value`` is None (unlike ``or``)."""
    return default if value is None else value


def dig(mapping, *keys):
    """Follow nested keys, stopping at the first missing one."""
    current = mapping
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def total(*numbers):
    return reduce(lambda a, b: a + b, numbers, 0)


@snippet("operators/logical", "Logical operators")
def logical(ctx):
    """``and``/``or`` return one of their operands, not necessarily a bool."""
    print("=== Logical Operators ===")

    print("True and 5 =", True and 5)
    print("False and 5 =", False and 5)
    print("'hello' and 10 =", "hello" and 10)
    print("0 and 'test' =", 0 and "test")

    print("0 or 5 =", 0 or 5)
    print("'' or 'hello' =", "" or "hello")
    print("False or 10 =", False or 10)

    print("not True =", not True)
    print("not 0 =", not 0)
    print("not 'hey' =", not "hey")

    print("bool('hi') =", bool("hi"))
    print("bool(0) =", bool(0))


@snippet("operators/nullish-optional", "None-coalescing and safe lookups")
def nullish_optional(ctx):
    print("=== Coalescing None ===")
    print("coalesce(None, 10) =", coalesce(None, 10))
    print("coalesce(0, 30) =", coalesce(0, 30))
    print("coalesce('', 'hello') =", repr(coalesce("", "hello")))
    print("0 or 30 =", 0 or 30)

    print("\n=== Safe nested lookups ===")
    user = {"name": "Ankit", "address": {"city": "Pune"}}
    empty_user = {}

    print("user['address']['city'] =", user["address"]["city"])
    print("dig(user, 'address', 'city') =", dig(user, "address", "city"))
    print("dig(empty_user, 'address', 'city') =", dig(empty_user, "address", "city"))
    print("empty_user.get('address', {}).get('city') =", empty_user.get("address", {}).get("city"))


@snippet("operators/spread-rest", "Unpacking and star-args")
def spread_rest(ctx):
    print("=== Unpacking lists ===")
    arr = [1, 2, 3]
    new_arr = [*arr, 4]
    print("arr =", arr)
    print("new_arr =", new_arr)

    print("\n=== Unpacking dicts ===")
    obj = {"a": 1}
    new_obj = {**obj, "b": 2}
    print("obj =", obj)
    print("new_obj =", new_obj)

    print("\n=== Unpacking into arguments ===")
    nums = [10, 20, 5]
    print("max(*nums) =", max(*nums))

    print("\n=== *args ===")
    print("total(1, 2, 3, 4) =", total(1, 2, 3, 4))

    print("\n=== Splitting off the rest ===")
    first, *others = [10, 20, 30]
    print("first =", first)
    print("others =", others)

    full_user = {"id": 1, "name": "Ankit", "age": 20}
    name = full_user["name"]
    rest = {k: v for k, v in full_user.items() if k != "name"}
    print("name =", name)
    print("rest =", rest)


class User:
    def __init__(self, name):
        self.name = name


@snippet("operators/typeof", "type() and isinstance()")
def typeof(ctx):
    print("=== type() ===")
    for label, value in (
        ("10", 10),
        ("'hi'", "hi"),
        ("True", True),
        ("{}", {}),
        ("[]", []),
        ("None", None),
        ("lambda: None", lambda: None),
    ):
        print(f"type({label}).__name__ =", type(value).__name__)

    print("\n=== isinstance() ===")
    arr = []
    print("isinstance(arr, list) =", isinstance(arr, list))
    print("isinstance(arr, object) =", isinstance(arr, object))
    print("isinstance(True, int) =", isinstance(True, int))

    u = User("Ankit")
    print("isinstance(u, User) =", isinstance(u, User))
    print("isinstance(u, object) =", isinstance(u, object))


class Car:
    def __init__(self, model):
        self.model = model


def do_nothing():
    pass


@snippet("operators/delete-in-new-void", "del, in, instantiation and None")
def delete_in_new_void(ctx):
    print("=== del ===")
    user = {"name": "Ankit", "age": 20}
    print("before del =", user)
    del user["age"]
    print("after del =", user)

    print("\n=== in ===")
    print("'name' in user =", "name" in user)
    print("'age' in user =", "age" in user)

    arr = [10, 20, 30]
    # For lists, ``in`` checks values, not indexes
    print("10 in arr =", 10 in arr)
    print("0 in arr =", 0 in arr)
    print("0 in range(len(arr)) =", 0 in range(len(arr)))

    print("\n=== Instantiation ===")
    my_car = Car("Tesla")
    print("my_car.model =", my_car.model)

    print("\n=== Functions without return ===")
    print("do_nothing() =", do_nothing())
