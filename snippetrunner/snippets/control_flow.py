"""Control flow: conditional expressions and run-at-least-once loops."""

from __future__ import annotations

from snippetrunner.registry import snippet


def describe_weather(temp: int) -> str:
    return "Very Hot" if temp > 35 else "Pleasant" if temp > 25 else "Cool" if temp > 15 else "Cold"


@snippet("control-flow/short-if-else", "Conditional expressions")
def short_if_else(ctx):
    age = 18
    message = "Adult" if age >= 18 else "Minor"
    print(message)

    # Chained conditional expressions (use carefully)
    print(describe_weather(30))


@snippet("control-flow/do-while", "Do-while loops")
def do_while(ctx):
    """``while True`` with the test at the bottom runs the body at least once."""
    i = 1
    while True:
        print("i is:", i)
        i += 1
        if not i <= 5:
            break

    x = 10
    while True:
        print("Runs once even if x < 0")
        x = -1
        if not x > 0:
            break
