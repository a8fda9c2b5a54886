"""
Component Whitelist
Closed set of component names and prop contracts.
"""

from .models import PropKind, PropSpec, ComponentSpec
from .components import ComponentRegistry, DEFAULT_COMPONENTS, default_registry

__all__ = [
    "PropKind",
    "PropSpec",
    "ComponentSpec",
    "ComponentRegistry",
    "DEFAULT_COMPONENTS",
    "default_registry",
]
