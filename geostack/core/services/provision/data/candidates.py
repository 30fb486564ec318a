"""
L0 Data — Version preference lists.

Pure data. Most-preferred first.
"""

from __future__ import annotations

# (module name, interpreter command the module exposes)
PYTHON_MODULES: tuple[tuple[str, str], ...] = (
    ("python/3.12.9/anaconda", "python3.12"),
    ("python/3.12/anaconda", "python3.12"),
    ("python/3.12", "python3.12"),
    ("python/3.11.7/anaconda", "python3.11"),
    ("python/3.11/anaconda", "python3.11"),
    ("python/3.11", "python3.11"),
    ("python", "python3"),
)

GDAL_MODULES: tuple[str, ...] = (
    "rh9/gdal/3.11.0",
    "gdal/3.11.0",
    "gdal/3.11",
    "gdal",
)

# Scanned on the search path when no Python module could be loaded
LOCAL_INTERPRETERS: tuple[str, ...] = (
    "python3.12",
    "python3.11",
    "python3.10",
    "python3",
)

# Installer bootstrap methods, in the order they are tried
UV_BOOTSTRAP_METHODS: tuple[str, ...] = ("present", "curl", "wget", "pip")

UV_INSTALL_URL = "https://astral.sh/uv/install.sh"
