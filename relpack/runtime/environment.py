# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
What relpack is running on. Logged once per command so a build log can be
matched to the interpreter and machine that produced the archives.
"""

import platform
import sys
from typing import NamedTuple


class SystemInfo(NamedTuple):
    python_version: str
    implementation: str
    executable: str
    platform: str
    machine: str


def get_python_version() -> str:
    """Interpreter version as "major.minor.micro", the form the version gate parses."""
    return platform.python_version()


def get_system_info() -> SystemInfo:
    return SystemInfo(
        python_version=get_python_version(),
        implementation=platform.python_implementation(),
        executable=sys.executable,
        platform=platform.platform(terse=True),
        machine=platform.machine(),
    )
