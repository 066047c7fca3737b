"""Functions: definitions, arguments, closures, higher-order use, generators."""

from __future__ import annotations

import asyncio
from functools import reduce
from types import SimpleNamespace

from snippetrunner.concepts import Counter, FiniteSequence, make_counter
from snippetrunner.registry import snippet


# --- Helpers shared with tests ---


def add(a, b):
    """Pure: same input, same output, nothing else touched."""
    return a + b


def add_number_to_list(items, number):
    """Impure: mutates the list it was given."""
    items.append(number)


def calculate_total(price, tax_rate):
    tax = price * tax_rate
    return price + tax


def create_multiplier(factor):
    def multiply(number):
        return number * factor

    return multiply


def create_greeter(greeting):
    def greet(name):
        print(f"{greeting}, {name}!")

    return greet


def repeat(times, action):
    for i in range(times):
        action(i)


def number_generator():
    yield 1
    yield 2
    yield 3


async def fetch_data_mock(ctx):
    """Pretend to fetch something over the network."""
    print("Starting fake fetch...")
    await ctx.asleep(1.0)
    return {"status": "ok", "data": [1, 2, 3]}


# --- Snippets ---


@snippet("js-functions/functions-basics", "Function basics")
def functions_basics(ctx):
    def greet():
        print("Hello!")

    greet()
    greet()

    def get_welcome_message():
        return "Welcome to Python functions!"

    message = get_welcome_message()
    print(message)

    total = add(5, 10)
    print("5 + 10 =", total)


@snippet("js-functions/functions-declaration", "def statements")
def functions_declaration(ctx):
    """A ``def`` binds a name when it executes; callers look it up at call time."""

    def say_hello():
        print("Hello from a def statement!")

    say_hello()
    print("Total:", calculate_total(100, 0.18))
    print("Total:", calculate_total(250, 0.18))


@snippet("js-functions/functions-expression-arrow", "Lambdas")
def functions_expression_arrow(ctx):
    multiply = lambda a, b: a * b  # noqa: E731
    print("2 * 3 =", multiply(2, 3))

    def subtract(a, b):
        return a - b

    print("10 - 4 =", subtract(10, 4))

    square = lambda n: n * n  # noqa: E731
    print("square(5) =", square(5))

    say_hi = lambda name="Ankit": print("Hi from a lambda", name)  # noqa: E731
    say_hi()


@snippet("js-functions/named-anonymous", "Named and anonymous functions")
async def named_anonymous(ctx):
    def say_hello():
        print("Hello from named function")

    say_hello()

    say_bye = lambda: print("Bye from anonymous function")  # noqa: E731
    say_bye()
    print("say_hello.__name__ =", say_hello.__name__)
    print("say_bye.__name__ =", say_bye.__name__)

    done = asyncio.Event()
    loop = asyncio.get_running_loop()
    loop.call_later(
        ctx.scaled(0.5),
        lambda: (print("This runs after 500ms (anonymous function)"), done.set()),
    )

    def do_something():
        print(f"I have an internal name '{do_something.__name__}'")

    do_something()
    await done.wait()


@snippet("js-functions/parameters-arguments-return", "Parameters, arguments and return")
def parameters_arguments_return(ctx):
    def greet(name):
        print("Hello", name)

    greet("Ankit")
    greet("Exodus")

    def greet_with_default(name="Guest"):
        print("Hello", name)

    greet_with_default("Alice")
    greet_with_default()

    def square(num):
        return num * num

    print("square(6) =", square(6))

    def log_only():
        print("I do not return a value")

    value = log_only()
    print("Return of log_only() is:", value)


@snippet("js-functions/callbacks", "Callbacks")
async def callbacks(ctx):
    def run_with_message(message, callback):
        print("Message:", message)
        callback()

    def on_done():
        print("Callback has been executed")

    run_with_message("Starting task", on_done)
    run_with_message("Another task", lambda: print("Anonymous callback executed"))

    done = asyncio.Event()

    def later():
        print("This runs after 1 second (1000ms)")
        done.set()

    asyncio.get_running_loop().call_later(ctx.scaled(1.0), later)
    await done.wait()


@snippet("js-functions/closures", "Closures")
def closures(ctx):
    """An inner function keeps the variables of the scope that created it."""
    increment = make_counter()
    for _ in range(3):
        print("count =", increment())

    # Same idea with the captured state made explicit
    counter = Counter()
    counter.increment()
    counter.increment()
    print("counter.read() =", counter.read())

    say_hello = create_greeter("Hello")
    say_namaste = create_greeter("Namaste")
    say_hello("Ankit")
    say_namaste("Ankit")


@snippet("js-functions/higher-order-function", "Higher-order functions")
def higher_order_function(ctx):
    repeat(3, lambda index: print("Running action, index:", index))
    repeat(2, lambda _: print("Another action"))

    double = create_multiplier(2)
    triple = create_multiplier(3)
    print("double(5) =", double(5))
    print("triple(5) =", triple(5))


@snippet("js-functions/array-function", "map, filter and reduce")
def array_function(ctx):
    numbers = [1, 2, 3, 4, 5]

    print("for example:")
    for num in numbers:
        print("Number:", num)

    doubled = list(map(lambda num: num * 2, numbers))
    print("original numbers:", numbers)
    print("doubled:", doubled)

    even = [num for num in numbers if num % 2 == 0]
    print("even numbers:", even)

    total = reduce(lambda accumulator, current: accumulator + current, numbers, 0)
    print("sum =", total)


@snippet("js-functions/iife", "Immediately invoked functions")
def iife(ctx):
    (lambda: print("Function ran immediately"))()

    def build_counter_module():
        count = 0

        def increment():
            nonlocal count
            count += 1
            print("count =", count)

        def get_count():
            return count

        return SimpleNamespace(increment=increment, get_count=get_count)

    counter_module = build_counter_module()
    counter_module.increment()
    counter_module.increment()
    print("Current count:", counter_module.get_count())


@snippet("js-functions/hoisting", "Late binding instead of hoisting")
def hoisting(ctx):
    """Names resolve when the call runs, so order of definition matters."""

    def call_helper_later():
        return helper()

    def helper():
        return "Hi, I was defined after my caller!"

    # Works: helper exists by the time call_helper_later runs
    print(call_helper_later())

    def too_early():
        say_bye()

        def say_bye():
            print("never printed")

    try:
        too_early()
    except UnboundLocalError as e:
        print("Calling before def raised", type(e).__name__)

    def say_hello():
        print("Hello, I am defined before use!")

    say_hello()


@snippet("js-functions/constructor", "Classes and __init__")
def constructor(ctx):
    class User:
        def __init__(self, name, age):
            self.name = name
            self.age = age

        def introduce(self):
            print(f"Hi, I am {self.name} and I am {self.age} years old.")

    user1 = User("Ankit", 20)
    user2 = User("Exodus", 22)
    user1.introduce()
    user2.introduce()


@snippet("js-functions/pure-impure", "Pure and impure functions")
def pure_impure(ctx):
    print("add(2, 3) =", add(2, 3))
    print("add(2, 3) again =", add(2, 3))

    counter = 0

    def increase_counter():
        nonlocal counter
        counter += 1

    print("counter before:", counter)
    increase_counter()
    print("counter after increase_counter():", counter)

    numbers = [1, 2, 3]
    print("numbers before:", numbers)
    add_number_to_list(numbers, 4)
    print("numbers after:", numbers)


@snippet("js-functions/async-generators", "Coroutines and generators")
async def async_generators(ctx):
    """A coroutine that waits on a mock fetch, and a generator that yields three values."""

    async def run():
        result = await fetch_data_mock(ctx)
        print("Result from coroutine:", result)

    task = asyncio.create_task(run())
    # Let the task start so the fetch announces itself first
    await asyncio.sleep(0)

    gen = number_generator()
    sentinel = object()
    for _ in range(4):
        value = next(gen, sentinel)
        print("next(gen):", "exhausted" if value is sentinel else value)

    steps = FiniteSequence(number_generator())
    for _ in range(4):
        step = steps.next_step()
        print("steps.next_step():", {"value": step.value, "done": step.done})

    await task
