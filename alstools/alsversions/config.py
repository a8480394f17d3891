"""
alsversions configuration.

Defaults describe an Ableton Live project folder. Nothing is persisted:
the only overrides come from the environment of a single invocation.
"""

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional


ENV_MASTER_BRANCH = "ALSVERSIONS_MASTER_BRANCH"
ENV_GIT = "ALSVERSIONS_GIT"


@dataclass(frozen=True)
class AlsConfig:
    """Settings shared by every operation on a project folder."""
    extension: str = ".als"
    repo_marker: str = ".git"
    attributes_file: str = ".gitattributes"
    master_branch: str = "master"
    compress_level: int = 9
    git_executable: str = "git"

    @property
    def attributes_line(self) -> str:
        """Attribute rule that makes git diff the decompressed XML as text."""
        return f"*{self.extension} -text crlf diff"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AlsConfig":
        """Build a config, letting the environment override branch and git binary."""
        if environ is None:
            environ = os.environ
        config = cls()
        if environ.get(ENV_MASTER_BRANCH):
            config = replace(config, master_branch=environ[ENV_MASTER_BRANCH])
        if environ.get(ENV_GIT):
            config = replace(config, git_executable=environ[ENV_GIT])
        return config
