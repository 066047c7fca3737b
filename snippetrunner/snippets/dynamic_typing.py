"""Dynamic typing: the type lives on the value, errors show up at run time."""

from __future__ import annotations

from snippetrunner.registry import snippet


def add(a, b):
    return a + b


@snippet("typing-in-programming/dynamic-typing", "Dynamic typing")
def dynamic_typing(ctx):
    # 1. A name can point at values of different types
    value = 10
    print(value)
    value = "Hello"
    print(value)
    value = True
    print(value)
    value = [1, 2, 3]
    print(value)
    value = {"name": "Ankit"}
    print(value)

    # 2. Type is associated with the value, not the name
    a = 20
    print(type(a).__name__)
    a = "Exodus"
    print(type(a).__name__)
    a = False
    print(type(a).__name__)

    # 3. Errors appear at run time
    x = "hello"
    print(x.upper())
    x = 100
    try:
        x.upper()
    except AttributeError:
        print("AttributeError: 'int' object has no attribute 'upper'")

    # 4. '+' never mixes numbers and strings
    print(add(10, 5))
    print(add("10", "5"))
    try:
        add(10, "5")
    except TypeError:
        print("TypeError: add(10, '5') needs an explicit conversion")
    print(add(str(10), "5"))

    # 5. The same function accepts any type
    for item in (100, "hello", True, [1, 2, 3], {"a": 1}, None):
        print(item)
