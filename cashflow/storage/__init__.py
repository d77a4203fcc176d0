"""Mini README: Persistence collaborators for the cash flow tracker.

The ledger only needs somewhere to keep a single text snapshot, so the
package exposes a small key-value protocol with an in-memory backend for
tests and a JSON file backend for real sessions.
"""

from .key_value import InMemoryStore, JsonFileStore, KeyValueStore

__all__ = ["InMemoryStore", "JsonFileStore", "KeyValueStore"]
