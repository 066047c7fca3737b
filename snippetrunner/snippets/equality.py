"""Equality: value comparison with ``==`` versus identity with ``is``."""

from __future__ import annotations

import math

from snippetrunner.registry import snippet


@snippet("equality-comparison/script", "Equality and identity")
def equality(ctx):
    print("=== == compares values ===")
    print("10 == 10 ->", 10 == 10)
    print("10 == '10' ->", 10 == "10")
    print("False == 0 ->", False == 0)
    print("True == 1 ->", True == 1)
    print("'' == 0 ->", "" == 0)

    print("\n=== is compares identity ===")
    obj_a = {"x": 1}
    obj_b = {"x": 1}
    obj_c = obj_a
    print("obj_a == obj_b ->", obj_a == obj_b)
    print("obj_a is obj_b ->", obj_a is obj_b)
    print("obj_a is obj_c ->", obj_a is obj_c)

    print("\n=== Containers compare element-wise ===")
    print("[1, 2] == [1, 2] ->", [1, 2] == [1, 2])
    print("[1, 2] == (1, 2) ->", [1, 2] == (1, 2))
    print("[] == '' ->", [] == "")

    print("\n=== NaN ===")
    nan = float("nan")
    print("nan == nan ->", nan == nan)
    print("math.isnan(nan) ->", math.isnan(nan))

    print("\n=== Checking for None ===")
    for label, v in (("v1", None), ("v2", 0), ("v3", 10)):
        if v is None:
            print(f"{label} is None")
        elif not v:
            print(f"{label} is falsy but not None")

    print("\n=== != ===")
    print("5 != '5' ->", 5 != "5")

    count = 0
    if count == 0:
        print("Count is zero")
    is_admin = True
    if is_admin:
        print("Admin access granted")
