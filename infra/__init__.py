"""
Infrastructure module exports.

Configuration, bootstrap and logging for all service backends.
"""

from .config import (
    InfraConfig,
    get_config,
    AgentBackendType,
    SenderBackendType,
    STTBackendType,
    TTSBackendType,
)
from .bootstrap import InfraBootstrap, bootstrap_infrastructure
from .log_setup import setup_logging

__all__ = [
    "InfraConfig",
    "get_config",
    "AgentBackendType",
    "SenderBackendType",
    "STTBackendType",
    "TTSBackendType",
    "InfraBootstrap",
    "bootstrap_infrastructure",
    "setup_logging",
]
