"""Schema-driven value generation."""

from .dispatch import MetadataGenerator, SchemaValueGenerator, TypeHandlerContext
from .fallback import depth_fallback

__all__ = ["MetadataGenerator", "SchemaValueGenerator", "TypeHandlerContext", "depth_fallback"]
