"""
Template rendering over zipped documents.

``ZippedTemplate.render`` clones a template, merges its designated entry with
a caller context through a pluggable :class:`MergeEngine`, and returns the
clone as a :class:`RenderedDocument`.
"""

from .engines import DollarMergeEngine, JinjaMergeEngine, xml_merge_engine
from .filters import XmlStringRenderFilter
from .interfaces import MergeEngine, RenderFilter
from .template import RenderedDocument, ZippedTemplate

__all__ = [
    "DollarMergeEngine",
    "JinjaMergeEngine",
    "MergeEngine",
    "RenderFilter",
    "RenderedDocument",
    "XmlStringRenderFilter",
    "ZippedTemplate",
    "xml_merge_engine",
]
