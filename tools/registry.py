"""
Tool registry with automatic discovery.

The registry discovers all MusicalTool subclasses under tools/ and provides
lookup by name. New tools only need to live in a module under tools/music/.
"""

import importlib
import inspect
import logging
import pkgutil
from pathlib import Path

from tools.base import MusicalTool

logger = logging.getLogger(__name__)


class ToolRegistry:
    """
    Registry for all tuner tools with automatic discovery.

    Usage:
        registry = ToolRegistry()
        registry.discover()  # Auto-discover all tools

        tool = registry.get("detect_pitch")
        result = tool(file_path="/path/to/a440.wav")
    """

    def __init__(self):
        self._tools: dict[str, MusicalTool] = {}

    def register(self, tool: MusicalTool) -> None:
        """
        Register a tool instance.

        Raises:
            ValueError: If tool with same name already registered
        """
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")

        self._tools[tool.name] = tool

    def get(self, name: str) -> MusicalTool | None:
        """Return the tool registered under name, or None."""
        return self._tools.get(name)

    def list_tools(self) -> list[dict]:
        """
        List all registered tools.

        Returns:
            List of tool dicts (name, description, parameters)
        """
        return [tool.to_dict() for tool in self._tools.values()]

    def discover(self, package_name: str = "tools") -> int:
        """
        Auto-discover all MusicalTool subclasses in package.

        Imports every module below the package and instantiates each
        concrete MusicalTool subclass defined there. Classes merely imported
        into a module are skipped, so a tool is registered once.

        Args:
            package_name: Package to scan (default: "tools")

        Returns:
            Number of tools discovered
        """
        try:
            package = importlib.import_module(package_name)
        except ImportError:
            logger.warning("Tool package %r could not be imported", package_name)
            return 0

        if not hasattr(package, "__path__"):
            return 0

        package_path = Path(list(package.__path__)[0])
        count = 0

        for _finder, module_name, _is_pkg in pkgutil.walk_packages(
            [str(package_path)], prefix=f"{package_name}."
        ):
            try:
                module = importlib.import_module(module_name)
            except ImportError as exc:
                logger.debug("Skipping %s: %s", module_name, exc)
                continue

            for _name, obj in inspect.getmembers(module, inspect.isclass):
                if obj is MusicalTool or obj.__module__ != module.__name__:
                    continue
                if issubclass(obj, MusicalTool) and not inspect.isabstract(obj):
                    self.register(obj())
                    count += 1

        logger.info("Discovered %d tool(s) in %s", count, package_name)
        return count

    def __len__(self) -> int:
        """Return number of registered tools."""
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        """Check if tool is registered."""
        return name in self._tools


# Global registry instance
_registry: ToolRegistry | None = None


def get_registry() -> ToolRegistry:
    """
    Get global tool registry singleton.

    Auto-discovers tools on first call.
    """
    global _registry
    if _registry is None:
        _registry = ToolRegistry()
        _registry.discover()
    return _registry
