"""Core declarations, binding context and document assembly."""

from .context import BindingContext
from .descriptor import TypeDescriptor, merge_descriptors
from .document import DocumentBuilder, merge_include_trees
from .fields import attribute, link, relationship, source, value

__all__ = [
    "BindingContext",
    "DocumentBuilder",
    "TypeDescriptor",
    "attribute",
    "link",
    "merge_descriptors",
    "merge_include_trees",
    "relationship",
    "source",
    "value",
]
