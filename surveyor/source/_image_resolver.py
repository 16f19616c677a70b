# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
import os
from dataclasses import dataclass
from typing import Sequence

from dataclasses_json import LetterCase, dataclass_json
from loguru import logger

from ._index import FileIndex, IndexedResolver


@dataclass_json(letter_case=LetterCase.CAMEL)
@dataclass(frozen=True)
class Layer:
    """
    One image layer that has already been unpacked to a directory on the host.

    Attributes:
        digest (str): The layer digest; used as the file system id of its files.
        path (str): Directory holding the unpacked layer content.
        media_type (str): Layer media type, informational only.
        size (int): Size of the layer blob in bytes, informational only.
    """

    digest: str
    path: str
    media_type: str = ""
    size: int = 0


class ImageSquashResolver(IndexedResolver):
    """
    Resolver over the squashed filesystem of an image: layers are applied in order, later layers
    replace earlier content and whiteout markers delete it. Each location carries the digest of
    the layer that provides the file as its file system id.
    """

    def __init__(self, layers: Sequence[Layer]) -> None:
        index = FileIndex()
        for layer in layers:
            if not os.path.isdir(layer.path):
                raise NotADirectoryError(layer.path)
            logger.info(f"Indexing layer {layer.digest}")
            index.add_tree(layer.path, layer.digest, whiteouts=True)
        self.layers = tuple(layers)
        super().__init__(index)
