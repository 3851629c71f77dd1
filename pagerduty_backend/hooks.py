"""Hook system for API clients.

Hooks are plain callables receiving a call context object. They are grouped in
a ``Hooks`` container and attached to a client class with ``@with_hooks``.
Client methods decorated with ``@invoke_with_hooks`` run the hooks around the
wrapped call:

- pre_hooks: before the call
- error_hooks: when the call raises (the exception is re-raised)
- post_hooks: always, after the call

Both regular and ``async`` methods are supported.

Example:
    >>> @with_hooks(hooks=Hooks(pre_hooks=[lambda ctx: print(ctx)]))
    ... class Api:
    ...     def __init__(self, hooks: Hooks | None = None) -> None: ...
    ...
    ...     @invoke_with_hooks(lambda self: {"method": "users.get"})
    ...     async def get_user(self) -> str: ...
"""

import contextlib
import functools
import inspect
from collections.abc import Callable, Generator, Sequence
from dataclasses import dataclass, field
from typing import Any, TypeAlias, TypeVar

T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., Any])
C = TypeVar("C", bound=type)

Hook: TypeAlias = Callable[[Any], None]


@dataclass(frozen=True)
class Hooks:
    """Container for pre, post and error hooks."""

    pre_hooks: Sequence[Hook] = field(default_factory=tuple)
    post_hooks: Sequence[Hook] = field(default_factory=tuple)
    error_hooks: Sequence[Hook] = field(default_factory=tuple)

    def merge(self, other: "Hooks | None") -> "Hooks":
        """Return new Hooks with ``other`` hooks appended to ours."""
        if other is None:
            return self
        return Hooks(
            pre_hooks=[*self.pre_hooks, *other.pre_hooks],
            post_hooks=[*self.post_hooks, *other.post_hooks],
            error_hooks=[*self.error_hooks, *other.error_hooks],
        )


@contextlib.contextmanager
def run_hooks(context: T, hooks: Hooks) -> Generator[None, Any, None]:
    for hook in hooks.pre_hooks:
        hook(context)
    try:
        yield
    except Exception:
        for hook in hooks.error_hooks:
            hook(context)
        raise
    finally:
        for hook in hooks.post_hooks:
            hook(context)


def _hooks_of(instance: object) -> Hooks:
    hooks = getattr(instance, "_hooks", None)
    if not isinstance(hooks, Hooks):
        raise ValueError(
            f"{type(instance).__name__} has no hooks, decorate the class with @with_hooks"
        )
    return hooks


def invoke_with_hooks(
    context_factory: Callable[[Any], Any],
) -> Callable[[F], F]:
    """Run the instance hooks around a method call.

    Args:
        context_factory: Called with ``self`` to build the context passed to hooks
    """

    def decorator(func: F) -> F:
        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
                with run_hooks(context_factory(self), _hooks_of(self)):
                    return await func(self, *args, **kwargs)

            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(func)
        def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
            with run_hooks(context_factory(self), _hooks_of(self)):
                return func(self, *args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


def with_hooks(hooks: Hooks) -> Callable[[C], C]:
    """Class decorator installing built-in hooks on every instance.

    The decorated ``__init__`` may accept a ``hooks`` keyword argument; user
    hooks are appended after the built-in ones.
    """

    def decorator(cls: C) -> C:
        original_init = cls.__init__

        @functools.wraps(original_init)
        def __init__(self: Any, *args: Any, **kwargs: Any) -> None:
            self._hooks = hooks.merge(kwargs.get("hooks"))
            original_init(self, *args, **kwargs)

        cls.__init__ = __init__  # type: ignore[misc]
        return cls

    return decorator
