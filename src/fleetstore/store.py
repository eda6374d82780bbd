"""Store — named Atom container shared by handlers and views.

A Store wraps a schema of named Atoms. Handlers reset atoms by name;
views deref and watch them by name. clear() puts every atom back to its
schema default, which is what a fresh session looks like.
"""

from __future__ import annotations

import copy
import logging

from fleetstore.atom import Atom, Watcher

logger = logging.getLogger("fleetstore.store")


class Store:
    """Key-based Atom container."""

    def __init__(self, schema: dict[str, object], initial: dict | None = None) -> None:
        self._defaults = dict(schema)
        self._atoms: dict[str, Atom] = {}
        for name, default in schema.items():
            value = initial.get(name, default) if initial else default
            self._atoms[name] = Atom(copy.deepcopy(value))

    def atom(self, name: str) -> Atom:
        """Return the Atom registered as name. Raises KeyError if unknown."""
        return self._atoms[name]

    def deref(self, name: str) -> object:
        atom = self._atoms.get(name)
        return atom.deref() if atom is not None else None

    def reset(self, name: str, value: object) -> None:
        atom = self._atoms.get(name)
        if atom is None:
            logger.warning("Ignoring reset of unknown atom %r", name)
            return
        atom.reset(value)

    def add_watch(self, name: str, key: str, callback: Watcher) -> None:
        self._atoms[name].add_watch(key, callback)

    def remove_watch(self, name: str, key: str) -> None:
        atom = self._atoms.get(name)
        if atom is not None:
            atom.remove_watch(key)

    def clear(self) -> None:
        """Reset every atom to a fresh copy of its schema default."""
        for name, atom in self._atoms.items():
            atom.reset(copy.deepcopy(self._defaults[name]))

    @property
    def names(self) -> list[str]:
        return list(self._atoms)

    def __contains__(self, name: str) -> bool:
        return name in self._atoms
