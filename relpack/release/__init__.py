# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Release subsystem for relpack.

Provides packaging (directories → ZIP archives + info.json), checksum
verification, the pre-flight version gate, and publishing to draft GitHub
releases. Everything runs sequentially in a single thread; the only state is
what sits on disk and on the remote release.
"""
