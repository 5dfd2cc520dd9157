"""Configuration models and loaders."""

from flowpath.config.loader import ConfigLoader
from flowpath.config.models import (
    FlowGraph,
    FlowpathConfig,
    LogicBlock,
    LogicBlockConfig,
    Node,
    PageComponent,
)
from flowpath.config.settings import PersistenceConfig, Settings

__all__ = [
    "ConfigLoader",
    "FlowGraph",
    "FlowpathConfig",
    "LogicBlock",
    "LogicBlockConfig",
    "Node",
    "PageComponent",
    "PersistenceConfig",
    "Settings",
]
