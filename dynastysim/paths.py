"""
dynastysim/paths.py
~~~~~~~~~~~~~~~~~~~
Directories the engine reads settings from and writes saves to, anchored
at the repository root rather than the working directory.
"""

from __future__ import annotations

from pathlib import Path

# dynastysim/paths.py → dynastysim/ → repository root
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent

# simulation.json lives here
CONFIG_DIR: Path = PROJECT_ROOT / "config"

# One JSON snapshot per save key
SAVE_DIR: Path = PROJECT_ROOT / "saves"
