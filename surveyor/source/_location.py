# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional

from dataclasses_json import LetterCase, config, dataclass_json

from surveyor.utils.ids import stable_id


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass(frozen=True, order=True)
class Coordinates:
    """Identifies a file within one filesystem or image layer snapshot."""

    real_path: str
    file_system_id: str = field(default="", metadata=config(field_name="layerID"))

    def id(self) -> str:
        return stable_id({"path": self.real_path, "layerID": self.file_system_id})

    def __str__(self) -> str:
        if self.file_system_id:
            return f"Location<RealPath={self.real_path!r} Layer={self.file_system_id!r}>"
        return f"Location<RealPath={self.real_path!r}>"


@dataclass(frozen=True)
class Location:
    """
    One path at which a file was observed.

    The virtual path is the path the file was addressed by (e.g. the symlink or the path inside
    an archive) and may differ from the real path where the content physically resides. The
    internal reference is resolver specific and never takes part in equality or hashing, so a
    Location's identity is (real path, virtual path, file system id).

    Attributes:
        coordinates (Coordinates): Real path and file system id.
        virtual_path (str): The addressed path; empty when it is the same as the real path.
        ref (Optional[Any]): Opaque resolver-internal file reference.
    """

    coordinates: Coordinates
    virtual_path: str = ""
    ref: Optional[Any] = field(default=None, compare=False, hash=False, repr=False)

    @staticmethod
    def new(real_path: str, file_system_id: str = "", ref: Optional[Any] = None) -> Location:
        return Location(Coordinates(real_path, file_system_id), "", ref)

    @staticmethod
    def new_virtual(
        real_path: str, virtual_path: str, file_system_id: str = "", ref: Optional[Any] = None
    ) -> Location:
        # a virtual path identical to the real path carries no extra information
        if virtual_path == real_path:
            virtual_path = ""
        return Location(Coordinates(real_path, file_system_id), virtual_path, ref)

    @property
    def real_path(self) -> str:
        return self.coordinates.real_path

    @property
    def file_system_id(self) -> str:
        return self.coordinates.file_system_id

    @property
    def access_path(self) -> str:
        """The path used to reach the file: the virtual path when present, else the real path."""
        return self.virtual_path or self.coordinates.real_path

    def id(self) -> str:
        return self.coordinates.id()

    def sort_key(self):
        return (self.coordinates.real_path, self.virtual_path, self.coordinates.file_system_id)

    def to_dict(self) -> Dict[str, str]:
        out = {"path": self.coordinates.real_path, "layerID": self.coordinates.file_system_id}
        if self.virtual_path:
            out["accessPath"] = self.virtual_path
        return out

    def __str__(self) -> str:
        if self.virtual_path:
            return f"Location<RealPath={self.real_path!r} VirtualPath={self.virtual_path!r}>"
        return str(self.coordinates)


class LocationSet:
    """A set of Locations. Uniqueness is preserved, order is imposed only when reading."""

    def __init__(self, locations: Iterable[Location] = ()) -> None:
        self._set: Dict[Location, None] = {}
        self.add(*locations)

    def add(self, *locations: Location) -> None:
        for location in locations:
            self._set.setdefault(location, None)

    def remove(self, *locations: Location) -> None:
        for location in locations:
            self._set.pop(location, None)

    def contains(self, location: Location) -> bool:
        return location in self._set

    def update(self, other: Iterable[Location]) -> None:
        self.add(*other)

    def to_list(self) -> List[Location]:
        return sorted(self._set, key=Location.sort_key)

    def coordinates(self) -> List[Coordinates]:
        return [location.coordinates for location in self.to_list()]

    def copy(self) -> LocationSet:
        return LocationSet(self._set)

    def __contains__(self, location: object) -> bool:
        return location in self._set

    def __iter__(self) -> Iterator[Location]:
        return iter(self.to_list())

    def __len__(self) -> int:
        return len(self._set)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LocationSet):
            return NotImplemented
        return self._set.keys() == other._set.keys()

    def __repr__(self) -> str:
        return f"LocationSet({self.to_list()!r})"
