# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from pluggy import HookimplMarker

hookimpl = HookimplMarker("surveyor")
