"""
Index Libraries

Index image lookup in the datagrepper message history.
"""

from .resolver import IndexImageResolver, rewrite_index_image

__all__ = [
    'IndexImageResolver',
    'rewrite_index_image'
]
