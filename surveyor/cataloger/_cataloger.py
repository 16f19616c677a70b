# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import abc
from typing import List, Tuple

from surveyor.artifact import Relationship
from surveyor.pkg import Package
from surveyor.source import FileResolver

CatalogerResult = Tuple[List[Package], List[Relationship]]


class Cataloger(abc.ABC):
    """
    A pluggable unit of package discovery for one ecosystem or file format.

    Implementations only read through the resolver they are given and report everything they
    find through their return value, so several catalogers can run against the same resolver at
    the same time. A cataloger signals failure by raising; the orchestrator records the failure
    and keeps the results of every other cataloger.
    """

    @abc.abstractmethod
    def name(self) -> str:
        """Unique name of the cataloger, by convention ending in "-cataloger"."""

    @abc.abstractmethod
    def catalog(self, resolver: FileResolver) -> CatalogerResult:
        """Discover packages and relationships available through ``resolver``."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name()}>"
