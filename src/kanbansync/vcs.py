"""Git commit/push of task file changes."""

import logging
from collections.abc import Iterable
from pathlib import Path

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

logger = logging.getLogger(__name__)


class PublishError(Exception):
    """Committing or pushing task files failed."""

    pass


class GitPublisher:
    """Commits and pushes task file changes as one batch."""

    def __init__(self, repo_path: str | Path = ".", remote: str = "origin"):
        """Initialize with a path inside the working tree.

        Raises:
            PublishError: If the path is not inside a git repository.
        """
        try:
            self.repo = Repo(repo_path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise PublishError(f"Not a valid git repository: {repo_path}") from e
        self.remote = remote

    def commit_and_push(self, paths: Iterable[Path], message: str) -> bool:
        """Stage paths, commit them and push the current branch.

        Returns:
            True if a commit was made, False if there was nothing to commit.

        Raises:
            PublishError: If a git command fails.
        """
        root = Path(self.repo.working_tree_dir or ".").resolve()
        try:
            relative = [str(Path(p).resolve().relative_to(root)) for p in paths]
        except ValueError as e:
            raise PublishError(f"Task files must be inside the working tree {root}: {e}") from e
        if not relative:
            return False

        try:
            self.repo.index.add(relative)
            if not self.repo.index.diff("HEAD"):
                logger.info("No task file changes to commit")
                return False

            commit = self.repo.index.commit(message)
            logger.info("Committed %d file(s): %s", len(relative), commit.hexsha[:8])

            branch = self.repo.active_branch.name
            self.repo.git.push(self.remote, f"HEAD:{branch}")
            logger.info("Pushed %s to %s", branch, self.remote)
        except (GitCommandError, TypeError, ValueError) as e:
            # TypeError: detached HEAD has no active branch
            raise PublishError(f"Git commit/push failed: {e}") from e

        return True
