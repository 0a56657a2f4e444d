"""Factories whose defaults come from a pydantic schema."""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from typing import Any

from faker import Faker

from pydantic_forge.core.assembly import merge, resolve_value, resolve_value_async
from pydantic_forge.core.config import ForgeConfig
from pydantic_forge.core.context import RecursionContext
from pydantic_forge.core.factory import Factory, FactoryView, GeneratorFunc
from pydantic_forge.generation import MetadataGenerator, SchemaValueGenerator
from pydantic_forge.providers.registry import TypeHandler, TypeHandlerRegistry
from pydantic_forge.schema import IntrospectedSchema, introspect


def _overlay(value: Any, incoming: Any) -> Any:
    if isinstance(value, Mapping) and isinstance(incoming, Mapping):
        return merge(value, incoming)
    if incoming is None:
        return value
    return incoming


class SchemaFactory(Factory):
    """Factory that generates schema-conforming values and validates every build.

    Each build combines, in increasing precedence, the value generated from
    the schema, the output of the optional partial ``generator`` and the
    per-call overrides, then runs the schema's own validation on the result.
    """

    def __init__(
        self,
        schema: Any,
        generator: GeneratorFunc | None = None,
        *,
        max_depth: int | None = None,
        metadata_generators: Mapping[str, MetadataGenerator] | None = None,
        type_handlers: Mapping[str, TypeHandler] | None = None,
        registry: TypeHandlerRegistry | None = None,
        seed: int | str | None = None,
        locale: str | None = None,
        faker: Faker | None = None,
        config: ForgeConfig | None = None,
    ) -> None:
        super().__init__(
            generator,
            max_depth=max_depth,
            seed=seed,
            locale=locale,
            faker=faker,
            config=config,
        )
        self.schema: IntrospectedSchema = introspect(schema)
        self.values = SchemaValueGenerator(
            faker=self.faker,
            max_depth=self.max_depth,
            handlers=type_handlers,
            registry=registry,
            metadata_generators=metadata_generators,
        )
        self._schema_defaults = True

    # ------------------------------------------------------------------ registration
    def with_type_handler(self, kind: str, handler: TypeHandler) -> SchemaFactory:
        if not callable(handler):
            raise TypeError("Type handler must be callable.")
        self.values.handlers[kind] = handler
        return self

    def with_type_handlers(self, handlers: Mapping[str, TypeHandler]) -> SchemaFactory:
        for kind, handler in handlers.items():
            self.with_type_handler(kind, handler)
        return self

    def with_metadata_generator(self, tag: str, fn: MetadataGenerator) -> SchemaFactory:
        if not callable(fn):
            raise TypeError("Metadata generator must be callable.")
        self.values.metadata_generators[tag] = fn
        return self

    def generate_value(self, depth: int = 0) -> Any:
        """Schema-derived value without partial generator, overrides or validation."""

        return self.values.generate(self.schema.node, depth)

    # ------------------------------------------------------------------ pipeline
    def _derive(self, generator: GeneratorFunc) -> Factory:
        derived = SchemaFactory(
            self.schema,
            generator,
            max_depth=self.max_depth,
            metadata_generators=self.values.metadata_generators,
            type_handlers=self.values.handlers,
            registry=self.values.registry,
            faker=self.faker,
        )
        # The derived generator already starts from this factory's output.
        derived._schema_defaults = False
        return derived

    def _invoke(self, view: FactoryView, iteration: int, overrides: Any) -> Any:
        if not self._schema_defaults:
            return super()._invoke(view, iteration, overrides)
        value = self.values.generate(self.schema.node, view.depth)
        if self._generator is None:
            return value
        partial = super()._invoke(view, iteration, overrides)
        if inspect.isawaitable(partial):
            return self._overlay_async(value, partial)
        return _overlay(value, resolve_value(partial))

    async def _overlay_async(self, value: Any, partial: Any) -> Any:
        return _overlay(value, await resolve_value_async(await partial))

    def _generate(self, iteration: int, overrides: Any, context: RecursionContext) -> Any:
        candidate = super()._generate(iteration, overrides, context)
        return self.schema.validate(candidate)

    async def _generate_async(
        self, iteration: int, overrides: Any, context: RecursionContext
    ) -> Any:
        candidate = await super()._generate_async(iteration, overrides, context)
        return self.schema.validate(candidate)

    def __repr__(self) -> str:
        return (
            f"SchemaFactory(schema={self.schema.node!r}, "
            f"representation={self.schema.representation!r}, max_depth={self.max_depth})"
        )


__all__ = ["SchemaFactory"]
