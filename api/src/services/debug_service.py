"""
Debug information.

The faithful provider exposes runtime details (interpreter, platform,
working directory, process id); the hardened provider reports the version
only.
"""

import os
import platform
import sys
from typing import Any, Dict

import structlog

from api.src.models.demo import DebugInfo
from shared.models.common import StrategyMode

logger = structlog.get_logger(__name__)

DEBUG_BANNER = "Debug mode enabled. Application version: {version}"


class DebugInfoProvider:
    """Builds the /debug responses."""

    def __init__(self, mode: StrategyMode, version: str, file_base_dir: str):
        self.mode = mode
        self.version = version
        self.file_base_dir = file_base_dir

    def banner(self) -> str:
        return DEBUG_BANNER.format(version=self.version)

    def info(self) -> DebugInfo:
        if self.mode is StrategyMode.HARDENED:
            return DebugInfo(version=self.version)

        details: Dict[str, Any] = {
            "python_version": sys.version,
            "platform": platform.platform(),
            "hostname": platform.node(),
            "pid": os.getpid(),
            "working_directory": os.getcwd(),
            "file_base_dir": os.path.abspath(self.file_base_dir),
            "cpu_count": os.cpu_count(),
        }
        logger.warning("debug_info_exposed", fields=sorted(details))
        return DebugInfo(version=self.version, details=details)
