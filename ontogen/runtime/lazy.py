"""Compute-once accessors for generated wrappers.

``memoized`` is a non-data descriptor: the first read calls the function and
publishes the result into the instance ``__dict__``; later reads never reach
the descriptor again.

Concurrency: two threads reading the same attribute for the first time may
both run the function, but publication goes through a single
``dict.setdefault`` so both receive the same object, and no reader can see a
half-built value. Exactly-once execution is not guaranteed.
"""

from __future__ import annotations

from typing import Any, Callable


class memoized:

    def __init__(self, func: Callable[[Any], Any]):
        self.func = func
        self.name = func.__name__
        self.__doc__ = func.__doc__
        self.__wrapped__ = func

    def __set_name__(self, owner, name: str) -> None:
        self.name = name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        value = self.func(instance)
        return instance.__dict__.setdefault(self.name, value)

    def __repr__(self) -> str:
        return f"memoized({self.name})"
