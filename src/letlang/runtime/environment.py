"""
Lexical environment for the Let-language interpreter.

An environment is a persistent linked list of bindings. Extending one never
changes it: the new environment points at the old one as its parent, so any
number of children can share a tail and a handle to an ancestor always sees
the same bindings.
"""

from dataclasses import dataclass
from typing import Iterator, Mapping, Optional, Tuple

from .values import Value


@dataclass(frozen=True)
class Environment:
    """
    Either empty (no name) or one binding on top of a parent environment.

    Lookup walks from the newest binding to the oldest, so a later binding
    shadows an earlier one of the same name.
    """
    name: Optional[str] = None
    value: Optional[Value] = None
    parent: Optional["Environment"] = None

    def __post_init__(self):
        # A binding always sits on top of a chain that ends in the empty environment
        if self.name is not None and self.parent is None:
            object.__setattr__(self, "parent", Environment())

    def is_empty(self) -> bool:
        """Check if this is the empty environment."""
        return self.name is None

    def extend(self, name: str, value: Value) -> "Environment":
        """Return a new environment binding name on top of this one."""
        return Environment(name, value, self)

    def lookup(self, name: str) -> Optional[Value]:
        """Look up the most recent binding of name."""
        env = self
        while not env.is_empty():
            if env.name == name:
                return env.value
            env = env.parent
        return None

    def contains(self, name: str) -> bool:
        """Check if name is bound."""
        return self.lookup(name) is not None

    def __iter__(self) -> Iterator[Tuple[str, Value]]:
        """Iterate over (name, value) bindings, newest first."""
        env = self
        while not env.is_empty():
            yield env.name, env.value
            env = env.parent

    def __str__(self) -> str:
        # [name, value tail] ... []
        parts = [f"[{name}, {value} " for name, value in self]
        return "".join(parts) + "[]" + "]" * len(parts)

    @classmethod
    def from_bindings(cls, bindings: Mapping[str, Value],
                      parent: Optional["Environment"] = None) -> "Environment":
        """Extend parent (default empty) with bindings, in mapping order."""
        env = parent if parent is not None else cls()
        for name, value in bindings.items():
            env = env.extend(name, value)
        return env


def new_empty() -> Environment:
    """Create the empty environment."""
    return Environment()


def extend(env: Environment, name: str, value: Value) -> Environment:
    """Return env extended with name bound to value; env is unchanged."""
    return env.extend(name, value)


def lookup(env: Environment, name: str) -> Optional[Value]:
    """Look up name in env, newest binding first."""
    return env.lookup(name)


def is_empty(env: Environment) -> bool:
    """Check if env has no bindings."""
    return env.is_empty()
