"""
Binding environment for the evaluator.

An Environment maps names to runtime values and may enclose an outer
environment. Lookup walks outward through the chain; ``set`` always writes to
the innermost scope. The caller owns the environment and may reuse it across
evaluations, which is how the REPL keeps ``let`` bindings between lines.

Not thread-safe: share one environment per thread or lock around it.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .values import Value


@dataclass
class Environment:
    """
    A single scope of variable bindings.

    Scopes form a chain via the ``outer`` field for lexical scoping.
    """
    outer: Optional["Environment"] = None
    store: Dict[str, Value] = field(default_factory=dict)

    def get(self, name: str) -> Tuple[Optional[Value], bool]:
        """Look up a name in this scope or outer scopes.

        Returns the value and whether it was found.
        """
        env = self
        while env is not None:
            if name in env.store:
                return env.store[name], True
            env = env.outer
        return None, False

    def set(self, name: str, value: Value) -> Value:
        """Bind name in this scope (shadowing outer scopes) and return value."""
        self.store[name] = value
        return value

    def contains(self, name: str) -> bool:
        """Check if a name is bound in this scope or outer scopes."""
        return self.get(name)[1]

    def enclosed(self) -> "Environment":
        """Create a child scope whose lookups fall back to this one."""
        return Environment(outer=self)

    def bindings(self) -> Dict[str, Value]:
        """All visible bindings, inner scopes shadowing outer ones."""
        chain = []
        env = self
        while env is not None:
            chain.append(env)
            env = env.outer
        merged: Dict[str, Value] = {}
        for env in reversed(chain):
            merged.update(env.store)
        return merged
