"""
Utility functions for benchmark module.
Separated to avoid circular imports.
"""

import platform
import re
import socket
import sqlite3
from datetime import datetime
from typing import Dict

import sqlalchemy


def get_machine_info() -> Dict[str, str]:
    """
    Get machine information for report context.

    Returns:
        Dictionary with machine details including:
        - hostname: Machine hostname
        - platform: OS platform info
        - python: Interpreter implementation and version
        - sqlite: SQLite library version linked into Python
        - sqlalchemy: SQLAlchemy version
    """
    return {
        "hostname": socket.gethostname(),
        "platform": f"{platform.system()} {platform.release()}",
        "python": f"{platform.python_implementation()} {platform.python_version()}",
        "sqlite": sqlite3.sqlite_version,
        "sqlalchemy": sqlalchemy.__version__,
    }


def get_report_subdir_name() -> str:
    """
    Generate report subdirectory name based on date and hostname.

    Format: YYYYMMDD_hostname
    Example: 20251224_build-01

    Returns:
        Subdirectory name string
    """
    date_str = datetime.now().strftime("%Y%m%d")
    host = re.sub(r"[^A-Za-z0-9.-]+", "-", socket.gethostname()) or "local"
    return f"{date_str}_{host}"


def format_kilobytes(num_bytes: int) -> str:
    """Format a byte count as kilobytes with one decimal."""
    return f"{num_bytes / 1024:.1f}"
