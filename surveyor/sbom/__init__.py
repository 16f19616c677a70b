# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from ._generate import generate_sbom
from ._sbom import SBOM, Artifacts, Descriptor, assemble_sbom

__all__ = ["SBOM", "Artifacts", "Descriptor", "assemble_sbom", "generate_sbom"]
