"""Build and runtime version information."""

from __future__ import annotations

import platform
import sys

VERSION = "1.0.0"

_TEMPLATE = """
{program}, version {version} 
  python version:   {python_version}
  platform:         {platform}
"""


def version_info(program: str) -> str:
    """Return a multi-line description of the program's version and platform."""
    text = _TEMPLATE.format(
        program=program,
        version=VERSION,
        python_version=platform.python_version(),
        platform=f"{sys.platform}/{platform.machine()}",
    )
    return text.strip()