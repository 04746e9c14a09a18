import shutil
import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import pytest

from repohistory.config import Config
from repohistory.git import GitDataSource, GitExecutable

GIT = shutil.which("git")

# Fixed identity and dates so commit hashes and timestamps are predictable
GIT_ENV = {
    "GIT_AUTHOR_NAME": "Test User",
    "GIT_AUTHOR_EMAIL": "test@example.com",
    "GIT_COMMITTER_NAME": "Test User",
    "GIT_COMMITTER_EMAIL": "test@example.com",
    "GIT_CONFIG_NOSYSTEM": "1",
}


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if Path(item.path).is_relative_to(Path(__file__).parent):
            item.add_marker(pytest.mark.integration)
            if GIT is None:
                item.add_marker(pytest.mark.skip(reason="git is not installed"))


@dataclass(frozen=True, slots=True)
class GitRepo:
    """A scratch repository driven through the git CLI."""

    path: Path
    env: dict[str, str]

    def git(self, *args: str) -> str:
        result = subprocess.run(  # noqa: S603
            [GIT or "git", *args],
            cwd=str(self.path),
            env=self.env,
            capture_output=True,
            check=True,
            text=True,
        )
        return result.stdout.strip()

    def write(self, name: str, content: str) -> Path:
        path = self.path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        _ = path.write_text(content, encoding="utf-8")
        return path

    def commit(self, message: str, date: int, **files: str) -> str:
        for name, content in files.items():
            _ = self.write(name, content)
        _ = self.git("add", "-A")
        stamp = f"@{date} +0000"
        env_args = ["-c", "commit.gpgsign=false"]
        subprocess.run(  # noqa: S603
            [GIT or "git", *env_args, "commit", "-q", "-m", message],
            cwd=str(self.path),
            env={**self.env, "GIT_AUTHOR_DATE": stamp, "GIT_COMMITTER_DATE": stamp},
            capture_output=True,
            check=True,
        )
        return self.git("rev-parse", "HEAD")

    def clone(self, destination: Path) -> "GitRepo":
        _ = self.git("clone", "-q", str(self.path), str(destination))
        return GitRepo(path=destination, env=self.env)


@pytest.fixture
def git_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Environment isolating git from the user's global configuration."""
    home = tmp_path / "home"
    home.mkdir()
    env = {
        "PATH": str(Path(GIT).parent) if GIT else "",
        "HOME": str(home),
        "XDG_CONFIG_HOME": str(home / ".config"),
        **GIT_ENV,
    }
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return env


@pytest.fixture
def make_repo(tmp_path: Path, git_env: dict[str, str]) -> Callable[[str], GitRepo]:
    def _make(name: str = "repo") -> GitRepo:
        path = tmp_path / name
        path.mkdir()
        repo = GitRepo(path=path, env=git_env)
        _ = repo.git("init", "-q", "-b", "main")
        return repo

    return _make


@pytest.fixture
def repo(make_repo: Callable[[str], GitRepo]) -> GitRepo:
    return make_repo("repo")


@pytest.fixture
def git_executable() -> GitExecutable:
    version = subprocess.run(  # noqa: S603
        [GIT or "git", "--version"], capture_output=True, check=True, text=True
    ).stdout.strip()
    return GitExecutable(path=GIT or "git", version=version.removeprefix("git version "))


@pytest.fixture
def git_source(
    git_executable: GitExecutable,
    git_env: dict[str, str],
    capturing_logger,
) -> GitDataSource:
    return GitDataSource(Config.from_dict({}), git_executable, capturing_logger, env=git_env)
