# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from dataclasses import dataclass


class SurveyorError(Exception):
    """Base class for errors raised by surveyor."""


class NotFoundError(SurveyorError, FileNotFoundError):
    """A path or location does not resolve in the current (possibly filtered) view of a source."""

    def __init__(self, path: str, reason: str = "") -> None:
        self.path = path
        self.reason = reason
        message = f"unable to resolve {path!r}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class UnsupportedSourceError(SurveyorError):
    """The source scheme cannot be described by the requested translation."""


class SchemaConflictError(SurveyorError):
    """A generated schema differs from an already published schema of the same version."""


@dataclass
class CatalogerFailure:
    """A single cataloger run that failed.

    Failures are collected by the orchestrator and reported; they are never raised.

    Attributes:
        cataloger (str): Name of the cataloger that failed.
        error (BaseException): The exception raised by the cataloger.
    """

    cataloger: str
    error: BaseException

    def __str__(self) -> str:
        return f"cataloger {self.cataloger!r} failed: {self.error}"
