"""Variables: binding, rebinding and names that refuse to change."""

from __future__ import annotations

from dataclasses import dataclass

from snippetrunner.registry import snippet


@dataclass(frozen=True)
class Rates:
    interest_rate: float


@snippet("variables/script", "Variables and constants")
def variables_script(ctx):
    """A name can be rebound; a frozen field cannot, and trying raises."""
    name = None
    print(name)

    myname = "Exodus"
    print(myname)

    rates = Rates(interest_rate=0.3)
    # Raises FrozenInstanceError; the last print never runs
    rates.interest_rate = 1
    print(rates.interest_rate)


@snippet("variables/scope", "Using a name before it is bound")
def variables_scope(ctx):
    """Assigning anywhere in a function makes the name local to all of it."""
    total = 10

    def read_outer():
        return total

    def read_before_assign():
        value = total  # noqa: F823
        total = 20
        return value

    print("read_outer() =", read_outer())
    try:
        read_before_assign()
    except UnboundLocalError as e:
        print("read_before_assign() raised", type(e).__name__)
