# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from ._cataloger import GenericCataloger, Parser, read_text

__all__ = ["GenericCataloger", "Parser", "read_text"]
