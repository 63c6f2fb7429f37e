import logging
from pathlib import Path
from typing import Optional

from filelock import FileLock
from git import Git, Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from scala_bootstrap.versioning.version import Revision

logger = logging.getLogger(__name__)

GITHUB = "https://github.com"


class FetchError(Exception):
    """Raised when a repository cannot be cloned, fetched or checked out."""

    pass


class NoTagError(FetchError):
    """Raised when `git describe` finds no matching tag."""

    pass


def repository_url(owner: str, repo: str, host: str = GITHUB) -> str:
    return f"{host.rstrip('/')}/{owner}/{repo}.git"


class SourceFetcher:
    """
    Checks out module sources into ``<base_dir>/src/<repo>``.

    A directory is cloned once and fetched on later calls; the checkout is
    always a detached ``FETCH_HEAD`` followed by ``git clean -fxd``, so
    a branch name always means its current upstream state.
    """

    def __init__(self, base_dir: Path, host: str = GITHUB):
        self.base_dir = Path(base_dir)
        self.src_dir = self.base_dir / "src"
        self.host = host

    def url(self, owner: str, repo: str) -> str:
        return repository_url(owner, repo, self.host)

    def fetch(self, owner: str, repo: str, revision: str) -> Path:
        """
        Get ``owner/repo`` at ``revision`` into the work tree.

        Returns:
            Path to the checked out working tree

        Raises:
            FetchError: On any git failure
        """
        revision = Revision(revision)
        url = self.url(owner, repo)
        work_tree = self.src_dir / repo
        self.src_dir.mkdir(parents=True, exist_ok=True)

        lock = work_tree.with_suffix(".lock")
        with FileLock(lock):
            try:
                try:
                    git_repo = Repo(work_tree.as_posix())
                except (InvalidGitRepositoryError, NoSuchPathError):
                    logger.info(f"Cloning {url} to {work_tree.as_posix()}")
                    git_repo = Repo.clone_from(url, work_tree.as_posix())

                logger.info(f"Fetching {url} at {revision}")
                git_repo.git.fetch("--tags", url, str(revision))
                git_repo.git.checkout("-q", "FETCH_HEAD")
                git_repo.git.clean("-fxd")
                logger.debug(f"{repo} is at {git_repo.head.commit.hexsha}")
            except GitCommandError as e:
                raise FetchError(f"Failed to fetch {url} at {revision}: {e}") from e

        return work_tree

    def _open(self, work_tree: Path) -> Repo:
        try:
            return Repo(Path(work_tree).as_posix())
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise FetchError(f"Not a git repository: {work_tree}") from e

    def describe(self, work_tree: Path, match: Optional[str] = None) -> str:
        """
        Describe HEAD against the nearest tag, e.g. ``v1.0.6-3-gabc1234``.

        Raises:
            NoTagError: If no tag (matching ``match``) is reachable
            FetchError: If ``work_tree`` is not a git repository
        """
        args = ["--tags"]
        if match is not None:
            args.append(f"--match={match}")
        git_repo = self._open(work_tree)
        try:
            return git_repo.git.describe(*args).strip()
        except GitCommandError as e:
            raise NoTagError(f"No tag to describe {work_tree}: {e}") from e

    def exact_tag_at(self, work_tree: Path) -> Optional[str]:
        """
        Return the tag pointing exactly at HEAD, or None.

        Raises:
            FetchError: If ``work_tree`` is not a git repository
        """
        git_repo = self._open(work_tree)
        try:
            tag = git_repo.git.describe("--tags", "--exact-match").strip()
        except GitCommandError:
            return None
        return tag or None

    def head_commit(self, work_tree: Path) -> str:
        try:
            return Repo(Path(work_tree).as_posix()).head.commit.hexsha
        except (InvalidGitRepositoryError, NoSuchPathError, ValueError) as e:
            raise FetchError(f"Cannot read HEAD of {work_tree}: {e}") from e

    def tag_exists(self, owner: str, repo: str, tag: str) -> bool:
        """Check for ``refs/tags/<tag>`` on the remote without cloning."""
        url = self.url(owner, repo)
        try:
            refs = Git().ls_remote("--tags", url, f"refs/tags/{tag}")
        except GitCommandError as e:
            raise FetchError(f"Failed to list tags of {url}: {e}") from e
        return bool(refs.strip())
