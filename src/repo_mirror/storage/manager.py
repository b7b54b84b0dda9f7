#!/usr/bin/env python3

import os
import sys
import stat
import shutil
import logging
import psutil
from typing import Dict, Any
from ..config.manager import MirrorConfig
from ..sync.results import OperationResult

logger = logging.getLogger(__name__)

class MirrorStore:
    """Owns the temp root and the mirror directories below it"""

    def __init__(self, config: MirrorConfig):
        self.config = config
        self.root = config.temp_root
        self.dry_run = config.dry_run

    def exists(self, path: str) -> bool:
        return os.path.isdir(path)

    def ensure_root(self) -> bool:
        """Create the temp root if it is missing"""
        if self.dry_run:
            logger.info(f"[dry-run] Would ensure temp root exists: {self.root}")
            return True

        if os.path.isdir(self.root):
            logger.debug(f"Temp root already exists: {self.root}")
            return True

        os.makedirs(self.root, mode=0o755, exist_ok=True)
        logger.info(f"Created temp root: {self.root}")
        return True

    def purge(self, path: str) -> OperationResult:
        """Best-effort recursive removal of a mirror directory"""
        if self.dry_run:
            logger.info(f"[dry-run] Would remove directory: {path}")
            return OperationResult(True)

        if not os.path.lexists(path):
            return OperationResult(True)

        try:
            if os.path.isdir(path) and not os.path.islink(path):
                if sys.version_info >= (3, 12):
                    shutil.rmtree(path, onexc=_force_writable)
                else:
                    shutil.rmtree(path, onerror=_force_writable)
            else:
                os.remove(path)
            logger.debug(f"Removed directory: {path}")
            return OperationResult(True)
        except OSError as e:
            logger.warning(f"Failed to remove directory {path}: {e}")
            return OperationResult(False, error=str(e))

    def check_disk_space(self, required_gb: float = 1.0) -> Dict[str, Any]:
        """Check free space where mirrors will be written"""
        space_check = {
            'path': self.root,
            'sufficient_space': True,
            'available_gb': 0,
            'required_gb': required_gb,
        }

        # The root may not exist yet, measure the nearest existing parent
        path = os.path.abspath(self.root)
        while not os.path.exists(path):
            parent = os.path.dirname(path)
            if parent == path:
                break
            path = parent

        try:
            disk_usage = psutil.disk_usage(path)
            available_gb = disk_usage.free / (1024**3)
            space_check['available_gb'] = available_gb
            space_check['sufficient_space'] = available_gb >= required_gb
        except OSError as e:
            logger.error(f"Failed to check disk space for {path}: {e}")
            space_check['error'] = str(e)

        return space_check


def _force_writable(func, path, exc):
    # Git object files are read-only, which breaks rmtree on Windows
    if not os.access(path, os.W_OK):
        os.chmod(path, stat.S_IWRITE | stat.S_IREAD)
        func(path)
    else:
        raise exc if isinstance(exc, BaseException) else exc[1]
