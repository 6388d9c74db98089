# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
relpack: zip build artifacts, checksum them, and publish a draft GitHub release.
"""

__version__ = "0.1.0"
