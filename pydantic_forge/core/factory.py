"""Depth-limited factory engine with hook pipelines and sync/async entry points."""

from __future__ import annotations

import inspect
import random
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from faker import Faker

from pydantic_forge.logging import get_logger

from .assembly import Deferred, merge, reject_awaitable, resolve_value, resolve_value_async
from .config import ForgeConfig, normalize_seed
from .context import RecursionContext, activate, entry_context
from .errors import (
    ASYNC_GENERATOR_MESSAGE,
    ASYNC_HOOKS_MESSAGE,
    ConfigurationError,
    ValidationError,
)
from .hooks import Hook, is_async_callable
from .persistence import NO_ADAPTER_MESSAGE, PersistenceAdapter
from .sequences import Cycle, Sample

GeneratorFunc = Callable[..., Any]
Overrides = Mapping[str, Any] | None
BatchOverrides = Mapping[str, Any] | Sequence[Mapping[str, Any]] | None


def accepts_overrides(func: Callable[..., Any]) -> bool:
    """Return ``True`` when ``func`` takes a third positional argument."""

    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return False
    positional = 0
    for parameter in signature.parameters.values():
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            return True
        if parameter.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            positional += 1
    return positional >= 3


def validate_batch_size(size: Any) -> int:
    if isinstance(size, bool) or not isinstance(size, int) or size < 0:
        raise ValidationError(
            "Batch size must be a non-negative integer.",
            details={"size": size},
        )
    return size


def _override_source(overrides: BatchOverrides) -> Callable[[], Overrides]:
    if overrides is None:
        return lambda: None
    if isinstance(overrides, Mapping):
        return lambda: overrides
    if isinstance(overrides, Sequence) and not isinstance(overrides, (str, bytes)):
        if not overrides:
            return lambda: None
        cycle = Cycle(overrides)
        return lambda: next(cycle)
    raise ValidationError(
        "Batch overrides must be a mapping or a sequence of mappings.",
        details={"overrides": type(overrides).__name__},
    )


class FactoryView:
    """Handle passed to generator functions, bound to the current recursion depth.

    ``build`` and ``batch`` descend one level. At the depth limit ``build``
    returns ``None`` and ``batch`` returns an empty list. Inside an
    asynchronous build both return coroutines.
    """

    def __init__(
        self,
        factory: Factory,
        context: RecursionContext,
        *,
        is_async: bool = False,
    ) -> None:
        self._factory = factory
        self._context = context
        self._is_async = is_async

    @property
    def factory(self) -> Factory:
        return self._factory

    @property
    def faker(self) -> Faker:
        return self._factory.faker

    @property
    def random(self) -> random.Random:
        return self._factory.random

    @property
    def depth(self) -> int:
        return self._context.depth

    @property
    def max_depth(self) -> int:
        return self._context.max_depth

    @property
    def is_async(self) -> bool:
        return self._is_async

    def bind(self, other: Factory) -> FactoryView:
        """Return a view of ``other`` that shares this view's recursion context."""

        context = RecursionContext(depth=self._context.depth, max_depth=other.max_depth)
        return FactoryView(other, context, is_async=self._is_async)

    def build(self, overrides: Overrides = None) -> Any:
        child = self._context.descend()
        if self._is_async:
            return self._factory._run_build_async(overrides, child)
        return self._factory._run_build(overrides, child)

    def batch(self, size: int, overrides: BatchOverrides = None) -> Any:
        validate_batch_size(size)
        child = self._context.descend()
        if self._is_async:
            return self._factory._run_batch_async(size, overrides, child)
        return self._factory._run_batch(size, overrides, child)

    def use(self, handler: Callable[..., Any], *args: Any, **kwargs: Any) -> Deferred:
        return self._factory.use(handler, *args, **kwargs)

    def iterate(self, domain: Iterable[Any]) -> Cycle[Any]:
        return self._factory.iterate(domain)

    def sample(self, domain: Iterable[Any]) -> Sample[Any]:
        return self._factory.sample(domain)

    def __repr__(self) -> str:
        return f"FactoryView(depth={self.depth}, max_depth={self.max_depth}, async={self._is_async})"


class Factory:
    """Reusable template producing instances from a generator function.

    The generator is called as ``generator(view, iteration)`` or, when it
    accepts a third positional argument, ``generator(view, iteration,
    overrides)``. Its output may contain :class:`Deferred` calls, iterators
    and nested mappings; these are resolved once per build before the
    overrides are deep-merged on top.
    """

    def __init__(
        self,
        generator: GeneratorFunc | None,
        *,
        max_depth: int | None = None,
        seed: int | str | None = None,
        locale: str | None = None,
        faker: Faker | None = None,
        config: ForgeConfig | None = None,
    ) -> None:
        if generator is not None and not callable(generator):
            raise TypeError("Factory generator must be callable.")
        config = config or ForgeConfig()

        self._generator = generator
        self._generator_is_async = generator is not None and is_async_callable(generator)
        self._generator_takes_overrides = generator is not None and accepts_overrides(generator)

        depth = config.max_depth if max_depth is None else max_depth
        if isinstance(depth, bool) or not isinstance(depth, int) or depth < 0:
            raise ValidationError(
                "max_depth must be a non-negative integer.", details={"max_depth": depth}
            )
        self.max_depth = depth

        self.faker = faker or Faker(locale or config.locale)
        resolved_seed = normalize_seed(seed if seed is not None else config.seed)
        if resolved_seed is not None:
            self.faker.seed_instance(resolved_seed)

        self._before_hooks: list[Hook] = []
        self._after_hooks: list[Hook] = []
        self._adapter: PersistenceAdapter | None = None
        self._logger = get_logger()

    # ------------------------------------------------------------------ properties
    @property
    def random(self) -> random.Random:
        return self.faker.random

    @property
    def is_async(self) -> bool:
        return self._generator_is_async

    # ------------------------------------------------------------------ hooks
    def before_build(self, hook: Callable[[Any], Any]) -> Factory:
        self._before_hooks.append(Hook.wrap(hook))
        return self

    def after_build(self, hook: Callable[[Any], Any]) -> Factory:
        self._after_hooks.append(Hook.wrap(hook))
        return self

    # ------------------------------------------------------------------ helpers
    def use(self, handler: Callable[..., Any], *args: Any, **kwargs: Any) -> Deferred:
        if not callable(handler):
            raise TypeError("use() expects a callable handler.")
        return Deferred(handler=handler, args=args, kwargs=kwargs)

    def iterate(self, domain: Iterable[Any]) -> Cycle[Any]:
        return Cycle(domain)

    def sample(self, domain: Iterable[Any]) -> Sample[Any]:
        return Sample(domain, random_generator=self.random)

    def with_adapter(self, adapter: PersistenceAdapter) -> Factory:
        self._adapter = adapter
        return self

    # ------------------------------------------------------------------ sync entry points
    def build(self, overrides: Overrides = None) -> Any:
        return self._run_build(overrides, entry_context(self.max_depth))

    def batch(self, size: int, overrides: BatchOverrides = None) -> list[Any]:
        validate_batch_size(size)
        return self._run_batch(size, overrides, entry_context(self.max_depth))

    # ------------------------------------------------------------------ async entry points
    async def build_async(self, overrides: Overrides = None) -> Any:
        return await self._run_build_async(overrides, entry_context(self.max_depth))

    async def batch_async(self, size: int, overrides: BatchOverrides = None) -> list[Any]:
        validate_batch_size(size)
        return await self._run_batch_async(size, overrides, entry_context(self.max_depth))

    # ------------------------------------------------------------------ persistence
    async def create(
        self,
        overrides: Overrides = None,
        *,
        adapter: PersistenceAdapter | None = None,
    ) -> Any:
        target = self._require_adapter(adapter)
        instance = await self.build_async(overrides)
        return await target.create(instance)

    async def create_many(
        self,
        size: int,
        overrides: BatchOverrides = None,
        *,
        adapter: PersistenceAdapter | None = None,
    ) -> list[Any]:
        target = self._require_adapter(adapter)
        instances = await self.batch_async(size, overrides)
        return await target.create_many(instances)

    def _require_adapter(self, adapter: PersistenceAdapter | None) -> PersistenceAdapter:
        target = adapter or self._adapter
        if target is None:
            raise ConfigurationError(NO_ADAPTER_MESSAGE)
        return target

    # ------------------------------------------------------------------ derivation
    def compose(self, spec: Mapping[str, Any]) -> Factory:
        """Return a factory whose output overlays ``spec`` on this factory's output.

        Entries that are factories are built once per instance, at the
        next depth; other entries are copied verbatim.
        """

        base = self
        entries = dict(spec)

        if self._generator_is_async or any(
            isinstance(value, Factory) and value.is_async for value in entries.values()
        ):

            async def composed_async(view: FactoryView, iteration: int, overrides: Any) -> Any:
                values = base._invoke(view, iteration, overrides)
                if inspect.isawaitable(values):
                    values = await values
                output = dict(values) if isinstance(values, Mapping) else {}
                for key, value in entries.items():
                    if isinstance(value, Factory):
                        built = view.bind(value).build()
                        output[key] = await built if inspect.isawaitable(built) else built
                    else:
                        output[key] = value
                return output

            return self._derive(composed_async)

        def composed(view: FactoryView, iteration: int, overrides: Any) -> Any:
            values = base._invoke(view, iteration, overrides)
            output = dict(values) if isinstance(values, Mapping) else {}
            for key, value in entries.items():
                output[key] = view.bind(value).build() if isinstance(value, Factory) else value
            return output

        return self._derive(composed)

    def extend(self, fn: GeneratorFunc) -> Factory:
        """Return a factory that deep-merges ``fn``'s output over this factory's output."""

        if not callable(fn):
            raise TypeError("extend() expects a callable.")
        base = self
        takes_overrides = accepts_overrides(fn)

        def call_extension(view: FactoryView, iteration: int, overrides: Any) -> Any:
            if takes_overrides:
                return fn(view, iteration, overrides)
            return fn(view, iteration)

        if self._generator_is_async or is_async_callable(fn):

            async def extended_async(view: FactoryView, iteration: int, overrides: Any) -> Any:
                values = base._invoke(view, iteration, overrides)
                if inspect.isawaitable(values):
                    values = await values
                extra = call_extension(view, iteration, overrides)
                if inspect.isawaitable(extra):
                    extra = await extra
                return merge(values, extra)

            return self._derive(extended_async)

        def extended(view: FactoryView, iteration: int, overrides: Any) -> Any:
            values = reject_awaitable(base._invoke(view, iteration, overrides))
            extra = reject_awaitable(call_extension(view, iteration, overrides))
            return merge(values, extra)

        return self._derive(extended)

    def _derive(self, generator: GeneratorFunc) -> Factory:
        return Factory(generator, max_depth=self.max_depth, faker=self.faker)

    # ------------------------------------------------------------------ pipeline
    def _invoke(self, view: FactoryView, iteration: int, overrides: Any) -> Any:
        if self._generator is None:
            return {}
        if self._generator_takes_overrides:
            return self._generator(view, iteration, overrides)
        return self._generator(view, iteration)

    def _ensure_sync(self) -> None:
        if self._generator_is_async:
            self._logger.debug(
                "Rejected synchronous build of an async generator.",
                event="sync_build_rejected",
                factory=type(self).__name__,
                reason="generator",
            )
            raise ConfigurationError(ASYNC_GENERATOR_MESSAGE)
        if any(hook.is_async for hook in (*self._before_hooks, *self._after_hooks)):
            self._logger.debug(
                "Rejected synchronous build with async hooks.",
                event="sync_build_rejected",
                factory=type(self).__name__,
                reason="hooks",
            )
            raise ConfigurationError(ASYNC_HOOKS_MESSAGE)

    def _run_build(
        self,
        overrides: Overrides,
        context: RecursionContext,
        iteration: int = 0,
    ) -> Any:
        self._ensure_sync()
        if context.exhausted:
            return None
        params: Any = dict(overrides) if overrides is not None else {}
        for hook in self._before_hooks:
            params = reject_awaitable(hook(params))
        result = self._generate(iteration, params, context)
        for hook in self._after_hooks:
            result = reject_awaitable(hook(result))
        return result

    async def _run_build_async(
        self,
        overrides: Overrides,
        context: RecursionContext,
        iteration: int = 0,
    ) -> Any:
        if context.exhausted:
            return None
        params: Any = dict(overrides) if overrides is not None else {}
        for hook in self._before_hooks:
            params = hook(params)
            if inspect.isawaitable(params):
                params = await params
        result = await self._generate_async(iteration, params, context)
        for hook in self._after_hooks:
            result = hook(result)
            if inspect.isawaitable(result):
                result = await result
        return result

    def _run_batch(
        self,
        size: int,
        overrides: BatchOverrides,
        context: RecursionContext,
    ) -> list[Any]:
        self._ensure_sync()
        if size == 0 or context.exhausted:
            return []
        next_overrides = _override_source(overrides)
        return [self._run_build(next_overrides(), context, index) for index in range(size)]

    async def _run_batch_async(
        self,
        size: int,
        overrides: BatchOverrides,
        context: RecursionContext,
    ) -> list[Any]:
        if size == 0 or context.exhausted:
            return []
        next_overrides = _override_source(overrides)
        results: list[Any] = []
        for index in range(size):
            results.append(await self._run_build_async(next_overrides(), context, index))
        return results

    def _generate(self, iteration: int, overrides: Any, context: RecursionContext) -> Any:
        view = FactoryView(self, context)
        with activate(context):
            defaults = reject_awaitable(self._invoke(view, iteration, overrides))
            value = resolve_value(defaults)
            if overrides and isinstance(value, Mapping):
                value = merge(value, resolve_value(overrides))
        return value

    async def _generate_async(
        self, iteration: int, overrides: Any, context: RecursionContext
    ) -> Any:
        view = FactoryView(self, context, is_async=True)
        with activate(context):
            defaults = self._invoke(view, iteration, overrides)
            if inspect.isawaitable(defaults):
                defaults = await defaults
            value = await resolve_value_async(defaults)
            if overrides and isinstance(value, Mapping):
                value = merge(value, await resolve_value_async(overrides))
        return value

    def __repr__(self) -> str:
        name = getattr(self._generator, "__qualname__", None) or type(self._generator).__name__
        return f"{type(self).__name__}(generator={name}, max_depth={self.max_depth})"


__all__ = [
    "BatchOverrides",
    "Factory",
    "FactoryView",
    "GeneratorFunc",
    "Overrides",
    "accepts_overrides",
    "validate_batch_size",
]
