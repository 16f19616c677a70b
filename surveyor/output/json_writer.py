# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT

from typing import Optional

import surveyor.plugin
from surveyor.formats.json_model import to_format_model
from surveyor.sbom import SBOM


def encode(sbom: SBOM) -> str:
    return to_format_model(sbom).to_json(indent=2)


@surveyor.plugin.hookimpl
def write_sbom(sbom: SBOM, outfile) -> None:
    # outfile is a file pointer, not a file name
    outfile.write(encode(sbom))
    outfile.write("\n")


@surveyor.plugin.hookimpl
def short_name() -> Optional[str]:
    return "json"
