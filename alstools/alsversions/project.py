"""
Version-control workflow for an Ableton Live project folder.

A Project ties together one directory, a compression backend, a git
client and a console. Every operation returns Ok or Err; messages for
the user go through the console as the operation runs.
"""

from pathlib import Path
from typing import Optional, Union

from alstools.alsversions.compression import CompressionTool, GzipTool, find_tracked_files
from alstools.alsversions.config import AlsConfig
from alstools.alsversions.console import Console
from alstools.alsversions.vcs import GitClient, GitCommandError, VersionControlClient
from alstools.alsversions.types import (
    AlsError,
    CommitResult,
    FileState,
    MergeResult,
    TrackedFile,
    UpdateResult,
    Ok,
    Err,
)


REMOVE_PROMPT = "Would you like to remove the following files from your project?:"
COMMIT_PROMPT = (
    "Please enter a description of the changes that you have made in this "
    "commit, then press [ ENTER ]."
)
NO_CHANGES = (
    "There have been no changes to this project since the last commit. Get to work!"
)


def _vcs_error(error: Exception) -> Err:
    if isinstance(error, FileNotFoundError):
        return Err(AlsError.VCS_NOT_FOUND, f"git executable not found: {error}")
    return Err(AlsError.VCS_FAILED, f"git failed: {error}")


class Project:
    """
    A project folder tracked with git.

    Args:
        directory: Folder holding the project files
        config: Extension, branch and marker settings
        compressor: Compression backend (default GzipTool)
        vcs: Version control client (default GitClient on directory)
        console: User dialogue (default the terminal)
    """

    def __init__(
        self,
        directory: Path,
        config: Optional[AlsConfig] = None,
        compressor: Optional[CompressionTool] = None,
        vcs: Optional[VersionControlClient] = None,
        console: Optional[Console] = None,
    ):
        self.directory = Path(directory)
        self.config = config or AlsConfig()
        self.compressor = compressor or GzipTool(
            self.config.extension, self.config.compress_level
        )
        self.vcs = vcs or GitClient(self.directory, self.config.git_executable)
        self.console = console or Console()

    @property
    def marker_path(self) -> Path:
        return self.directory / self.config.repo_marker

    def is_repository(self) -> bool:
        """True once git has been set up in the project folder."""
        return self.marker_path.is_dir()

    def _resolve(self, path: Path) -> Path:
        path = Path(path)
        return path if path.is_absolute() else self.directory / path

    def tracked_files(self) -> list[TrackedFile]:
        """Every tracked file in the folder with its current state."""
        tracked = []
        for path in find_tracked_files(self.directory, self.config.extension):
            state = self.compressor.file_state(path)
            if isinstance(state, Ok):
                tracked.append(TrackedFile(path=path, state=state.value))
        return tracked

    def compress(self, path: Path) -> Union[Ok, Err]:
        """Compress one file unless it is already gzip data."""
        path = self._resolve(path)
        state = self.compressor.file_state(path)
        if isinstance(state, Err):
            return state

        say = self.console.say
        say(f'You have requested that file "{path.name}" of type '
            f'"{state.value.label}" be compressed.')
        if state.value == FileState.COMPRESSED:
            say(f'File "{path.name}" is a gzip\'d file and won\'t be re-compressed.')
            return self.compressor.compress(path)

        result = self.compressor.compress(path)
        if isinstance(result, Ok):
            say("------------------------")
            say(f'gzipped "{path.name}" to "{result.value.output_path.name}".')
        return result

    def decompress(self, path: Path) -> Union[Ok, Err]:
        """Decompress one file in place if it is gzip data."""
        path = self._resolve(path)
        state = self.compressor.file_state(path)
        if isinstance(state, Err):
            return state

        say = self.console.say
        say(f'Checking if file(s) of type "{self.config.extension}" need to be decompressed.')
        if state.value == FileState.DECOMPRESSED:
            say(f'File "{path.name}" is of type "{state.value.label}" and won\'t be decompressed.')
            say("---")
            return self.compressor.decompress(path)

        say(f'File "{path.name}" of type "{state.value.label}" will be decompressed.')
        result = self.compressor.decompress(path)
        if isinstance(result, Ok):
            say("------------------------")
            say(f'gunzipped "{path.name}" in place.')
            say("---")
        return result

    def decompress_all(self) -> Union[Ok, Err]:
        """
        Decompress every tracked file in the folder.

        Returns:
            Ok(tuple of paths that were decompressed), or the first Err
        """
        changed = []
        for path in find_tracked_files(self.directory, self.config.extension):
            result = self.decompress(path)
            if isinstance(result, Err):
                return result
            if result.value.changed:
                changed.append(path)
        return Ok(tuple(changed))

    def _confirm_removal(self, deleted: list[str]) -> bool:
        listing = "\n".join(deleted)
        prompt = f"{REMOVE_PROMPT}\n{listing}\n(y/n) then [ ENTER ]"
        answer = self.console.ask(prompt)
        while answer not in ("y", "n"):
            self.console.say(answer)
            self.console.say("Option not valid.")
            answer = self.console.ask(prompt)
        return answer == "y"

    def stage_and_commit(self) -> Union[Ok, Err]:
        """
        Stage every change and commit it with a message typed by the user.

        Deleted files are removed from git only after the user agrees.

        Returns:
            Ok(CommitResult) on success, Err if git fails
        """
        say = self.console.say
        try:
            deleted = self.vcs.deleted_files()
            changes = self.vcs.short_status()

            removed: tuple = ()
            if deleted:
                if self._confirm_removal(deleted):
                    say("Removing the following files from this project:")
                    self.vcs.remove(deleted)
                    removed = tuple(deleted)
                else:
                    say("Not removing these files from this project...")
                    say("\n".join(deleted))

            if changes:
                say("Staging all changed files:")
                say("\n".join(changes))
                say("---")
                self.vcs.add_all()

            if not self.vcs.has_staged_changes():
                say(NO_CHANGES)
                return Ok(CommitResult(
                    removed=removed, changes=tuple(changes),
                    committed=False, message=None,
                ))

            message = self.console.ask(COMMIT_PROMPT)
            self.vcs.commit(message)
        except (GitCommandError, FileNotFoundError) as e:
            return _vcs_error(e)

        return Ok(CommitResult(
            removed=removed, changes=tuple(changes),
            committed=True, message=message,
        ))

    def _write_attributes(self) -> None:
        attributes = self.directory / self.config.attributes_file
        attributes.write_text(self.config.attributes_line + "\n", encoding="utf-8")

    def setup(self) -> Union[Ok, Err]:
        """
        Put the folder under git and make the first commit.

        Does nothing when a repository already exists.

        Returns:
            Ok(UpdateResult) on success, Err on failure
        """
        if self.is_repository():
            self.console.say(
                "Git has already been setup for this project, "
                "please use -u to update the repo."
            )
            return Ok(UpdateResult(initialized=False, decompressed=(), commit=None))

        self.console.say("Setting up Git for this project.")
        try:
            self.vcs.init(self.config.master_branch)
        except (GitCommandError, FileNotFoundError) as e:
            return _vcs_error(e)

        try:
            self._write_attributes()
        except OSError as e:
            return Err(AlsError.WRITE_FAILED, f"Write failed: {e}")

        return self._sync(initialized=True)

    def _sync(self, initialized: bool) -> Union[Ok, Err]:
        decompressed = self.decompress_all()
        if isinstance(decompressed, Err):
            return decompressed
        commit = self.stage_and_commit()
        if isinstance(commit, Err):
            return commit
        return Ok(UpdateResult(
            initialized=initialized,
            decompressed=decompressed.value,
            commit=commit.value,
        ))

    def update(self) -> Union[Ok, Err]:
        """Decompress and commit, setting git up first if needed."""
        if not self.is_repository():
            return self.setup()
        return self._sync(initialized=False)

    def merge(self, branch: str) -> Union[Ok, Err]:
        """
        Commit pending work, then merge branch into the master branch.

        Without a repository this falls back to setup and merges nothing.

        Returns:
            Ok(MergeResult) on success, Err on failure
        """
        say = self.console.say
        master = self.config.master_branch

        if not self.is_repository():
            say("Git has not been setup for this project.")
            setup = self.setup()
            if isinstance(setup, Err):
                return setup
            return Ok(MergeResult(
                branch=branch, merged=False, previous_branch=None,
                checked_out=False, commit=setup.value.commit,
            ))

        try:
            current = self.vcs.current_branch()
        except (GitCommandError, FileNotFoundError) as e:
            return _vcs_error(e)
        say(f"The current branch is {current}.")

        synced = self._sync(initialized=False)
        if isinstance(synced, Err):
            return synced

        checked_out = current != master
        try:
            if checked_out:
                self.vcs.checkout(master)
            self.vcs.merge(branch)
        except (GitCommandError, FileNotFoundError) as e:
            return _vcs_error(e)

        say(f"{branch} has been merged with the {master} branch.")
        # informational only; the branch is left in place
        say(f"Would you like to clean up by removing the branch {branch} "
            f"now that it has been merged?")
        return Ok(MergeResult(
            branch=branch, merged=True, previous_branch=current,
            checked_out=checked_out, commit=synced.value.commit,
        ))
