"""Data model: content tree, fragments, attributes and the render context."""

from mailweaver.model.attributes import AttributeMap, SelectorElement, SemanticTarget
from mailweaver.model.fragment import Fragment, fold_fragments
from mailweaver.model.tree import BlockStatus, Page, Section, WrapperKind, wrapper_kind

__all__ = [
    "AttributeMap",
    "SelectorElement",
    "SemanticTarget",
    "Fragment",
    "fold_fragments",
    "BlockStatus",
    "Page",
    "Section",
    "WrapperKind",
    "wrapper_kind",
]
