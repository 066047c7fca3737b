"""Key/value storage: save, reload, validate and clear a value."""

from __future__ import annotations

from snippetrunner.registry import snippet
from snippetrunner.storage import LocalStorage

USERNAME_KEY = "username"


def load_saved_name(storage: LocalStorage) -> str:
    saved_name = storage.get_item(USERNAME_KEY)
    if saved_name is None:
        return "No saved name yet."
    return f"Saved name: {saved_name}"


def save_name(storage: LocalStorage, name: str) -> str:
    if name.strip() == "":
        return "Name cannot be empty!"
    storage.set_item(USERNAME_KEY, name)
    return f"Saved name: {name}"


def clear_name(storage: LocalStorage) -> str:
    storage.remove_item(USERNAME_KEY)
    return "Name cleared from storage."


@snippet("local-storage/script", "Saving a value between page loads")
def local_storage_script(ctx):
    """Each print stands in for updating the page's output element."""
    with LocalStorage() as storage:
        print(load_saved_name(storage))

        print(save_name(storage, "   "))
        print(save_name(storage, "Ankit"))

        # Reloading the page reads the stored value back
        print(load_saved_name(storage))
        print("storage.length =", storage.length)

        storage.set_item("visits", 3)
        print("visits is stored as", repr(storage.get_item("visits")))

        print(clear_name(storage))
        print(load_saved_name(storage))
