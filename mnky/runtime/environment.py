"""Lexical scopes. Each Environment maps names to values and may enclose an outer Environment; lookups walk outwards
until the global environment (which has no outer) is exhausted.
"""


class Environment:

    def __init__(self, outer=None):
        self.outer = outer
        self.store = {}

    def get(self, name):
        """Returns the value bound to name in this scope or the closest enclosing one, or None if name is unbound."""
        env = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def set(self, name, value):
        """Binds name in this scope only, shadowing any outer binding. Returns value."""
        self.store[name] = value
        return value

    def enclosed(self):
        """Returns a new scope whose outer is self."""
        return Environment(self)

    def __contains__(self, name):
        return self.get(name) is not None

    def __repr__(self):
        content = ", ".join(self.store)
        return f"[{content}]" + (f" < {self.outer}" if self.outer is not None else "")
