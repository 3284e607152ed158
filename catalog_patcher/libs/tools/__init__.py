"""
Tool Libraries

Local dependency checks.
"""

from .validator import ToolValidator

__all__ = ['ToolValidator']
