"""Agent tools exposed by duckweb."""

from duckweb.tools.base import Tool
from duckweb.tools.registry import ToolRegistry

__all__ = ["Tool", "ToolRegistry"]
