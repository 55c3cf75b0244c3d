"""Quickstart: demonstrates typed settings, encoded objects and cleanup.

Install the package first:
    pip install -e .

Then run this script:
    python examples/quickstart.py
"""

import tempfile
import threading
from dataclasses import dataclass, field

from settings_store.factory import create_store
from settings_store.shared.config import StoreConfig
from settings_store.shared.logging import configure_logging

configure_logging()


@dataclass
class Account:
    id: int
    name: str
    roles: list[str] = field(default_factory=list)


def main() -> None:
    data_dir = tempfile.mkdtemp(prefix="settings-store-")
    store = create_store("com.example.quickstart", StoreConfig(backend="file", data_dir=data_dir))

    # 1. Typed native values
    store.set("theme", "dark")
    store.set("launch_count", 1)
    store.set("recent_files", ["a.txt", "b.txt"])
    print(f"[1] theme={store.get('theme', str)} recent={store.array('recent_files', str)}")

    # 2. Wrong type or missing key degrade to None / []
    print(f"[2] theme as int={store.get('theme', int)} missing array={store.array('nope')}")

    # 3. Encoded objects
    store.save_object("account", Account(id=1, name="Ada", roles=["admin"]))
    print(f"[3] account={store.get_object('account', Account)}")

    # 4. Stricter loading reports why nothing came back
    print(f"[4] load theme as Account: {store.load_object('theme', Account).status.value}")

    # 5. Atomic read-modify-write from several threads
    def bump() -> None:
        store.set("launch_count", store.get("launch_count", int) + 1)

    threads = [threading.Thread(target=lambda: store.sync(bump)) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    print(f"[5] launch_count={store.get('launch_count')}")

    # 6. Keep only the account, then reset everything
    store.clean(except_keys=["account"])
    print(f"[6] keys after clean: {store.keys()}")
    store.reset()
    print(f"[7] keys after reset: {store.keys()} (files in {data_dir})")


if __name__ == "__main__":
    main()
