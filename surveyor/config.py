# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from dataclasses import dataclass, field
from typing import Any, List, Optional

from surveyor.configmanager import ConfigManager

# config file section holding the cataloging options
CATALOG_SECTION = "catalog"


def _as_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [v.strip() for v in value.split(",") if v.strip()]
    return [str(v) for v in value]


@dataclass
class CatalogerConfig:
    """Options for one cataloging run.

    Attributes:
        catalogers: Name patterns selecting catalogers; empty or "all" selects every cataloger.
        parallelism: Number of catalogers run at the same time.
        exclude: Glob patterns of paths hidden from every cataloger.
        file_metadata: Also record metadata of every file in the source.
        file_digests: Also record digests of every file in the source.
        digest_algorithms: hashlib algorithm names used for file digests.
        output_format: Short name of the output plugin.
        python_guess_unpinned_requirements: Guess a version for requirements without an exact pin.
        file_contents_globs: Globs of files whose content is captured.
        secrets: Search file contents for credentials and keys.
        secrets_reveal_values: Include the matched secret values in the results.
        skip_files_above_size: Files larger than this many bytes are not read for contents or secrets.
    """

    catalogers: List[str] = field(default_factory=list)
    parallelism: int = 1
    exclude: List[str] = field(default_factory=list)
    file_metadata: bool = False
    file_digests: bool = False
    digest_algorithms: List[str] = field(default_factory=lambda: ["sha256"])
    output_format: str = "json"
    python_guess_unpinned_requirements: bool = False
    file_contents_globs: List[str] = field(default_factory=list)
    secrets: bool = False
    secrets_reveal_values: bool = False
    skip_files_above_size: int = 1024 * 1024

    def __post_init__(self):
        if self.parallelism < 1:
            raise ValueError(f"parallelism must be at least 1, got {self.parallelism}")

    @staticmethod
    def from_config_manager(config_manager: Optional[ConfigManager] = None) -> "CatalogerConfig":
        """Build the configuration from the config file and environment, falling back to defaults."""
        cm = config_manager or ConfigManager()
        defaults = CatalogerConfig()
        return CatalogerConfig(
            catalogers=_as_list(cm.get(CATALOG_SECTION, "catalogers", defaults.catalogers)),
            parallelism=int(cm.get(CATALOG_SECTION, "parallelism", defaults.parallelism)),
            exclude=_as_list(cm.get(CATALOG_SECTION, "exclude", defaults.exclude)),
            file_metadata=bool(cm.get(CATALOG_SECTION, "file_metadata", defaults.file_metadata)),
            file_digests=bool(cm.get(CATALOG_SECTION, "file_digests", defaults.file_digests)),
            digest_algorithms=_as_list(
                cm.get(CATALOG_SECTION, "digest_algorithms", defaults.digest_algorithms)
            ),
            output_format=str(cm.get(CATALOG_SECTION, "output_format", defaults.output_format)),
            python_guess_unpinned_requirements=bool(
                cm.get("python", "guess_unpinned_requirements", defaults.python_guess_unpinned_requirements)
            ),
            file_contents_globs=_as_list(
                cm.get(CATALOG_SECTION, "file_contents_globs", defaults.file_contents_globs)
            ),
            secrets=bool(cm.get(CATALOG_SECTION, "secrets", defaults.secrets)),
            secrets_reveal_values=bool(
                cm.get(CATALOG_SECTION, "secrets_reveal_values", defaults.secrets_reveal_values)
            ),
            skip_files_above_size=int(
                cm.get(CATALOG_SECTION, "skip_files_above_size", defaults.skip_files_above_size)
            ),
        )
