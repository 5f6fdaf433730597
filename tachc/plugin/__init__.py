"""
Плагин сборки: transform, виртуальные модули, опции и фильтры путей.
"""

from .options import PluginOptions, TransformOptions, load_plugin_options
from .plugin import TachPlugin, create_plugin
from .virtual import REACTIVE_MODULE, RUNTIME_MODULE, VIRTUAL_MODULES

__all__ = [
    "PluginOptions",
    "REACTIVE_MODULE",
    "RUNTIME_MODULE",
    "TachPlugin",
    "TransformOptions",
    "VIRTUAL_MODULES",
    "create_plugin",
    "load_plugin_options",
]
