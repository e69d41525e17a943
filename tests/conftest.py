"""Pytest configuration and shared fixtures."""

import os
import subprocess
from pathlib import Path

import pytest

# ============================================================================
# Environment Isolation
# ============================================================================
# Keep the developer's own typedgit and git configuration out of tests so
# that config cascade and commit output are the same on every machine.


@pytest.fixture(autouse=True)
def isolated_config_home(tmp_path_factory: pytest.TempPathFactory, monkeypatch) -> Path:
    """Point XDG_CONFIG_HOME at an empty directory for every test."""
    config_home = tmp_path_factory.mktemp("xdg_config")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", os.devnull)
    # Directories under the pytest temp root never see an enclosing repository
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path_factory.getbasetemp()))
    return config_home


# ============================================================================
# Git Repository Helpers
# ============================================================================
# These helpers consolidate git setup code to avoid duplication across tests.
# Use these functions in fixtures to create consistent test repositories.


def run_git(path: Path, *args: str, env: dict[str, str] | None = None) -> str:
    """Run a git command in path and return its stripped stdout.

    Raises:
        subprocess.CalledProcessError: If the command fails.
    """
    result = subprocess.run(
        ["git", *args],
        cwd=path,
        check=True,
        capture_output=True,
        text=True,
        timeout=10,
        env={**os.environ, **(env or {})},
    )
    return result.stdout.strip()


def init_git_repo(
    path: Path,
    user_name: str = "Test User",
    user_email: str = "test@example.com",
) -> None:
    """Initialize a git repository on branch 'main' with user configuration.

    This is the single source of truth for git repository initialization.
    Use this helper in fixtures instead of inline subprocess calls.

    Args:
        path: Directory to initialize as a git repository.
        user_name: Git user.name configuration value.
        user_email: Git user.email configuration value.

    Raises:
        subprocess.CalledProcessError: If git commands fail.
    """
    run_git(path, "init")
    run_git(path, "symbolic-ref", "HEAD", "refs/heads/main")
    run_git(path, "config", "user.name", user_name)
    run_git(path, "config", "user.email", user_email)
    run_git(path, "config", "commit.gpgsign", "false")
    run_git(path, "config", "tag.gpgsign", "false")


def git_add_and_commit(
    path: Path,
    message: str = "Initial commit",
    add_all: bool = True,
    date: str | None = None,
) -> str:
    """Stage files and create a git commit.

    Args:
        path: Git repository root directory.
        message: Commit message.
        add_all: If True, stages all files with 'git add .'.
        date: Optional ISO 8601 date used for both author and committer.

    Returns:
        The full sha1 of the new commit.

    Raises:
        subprocess.CalledProcessError: If git commands fail.
    """
    if add_all:
        run_git(path, "add", ".")
    env = {"GIT_AUTHOR_DATE": date, "GIT_COMMITTER_DATE": date} if date else None
    run_git(path, "commit", "--allow-empty", "-m", message, env=env)
    return run_git(path, "rev-parse", "HEAD")


def create_test_files(path: Path, files: dict[str, str]) -> None:
    """Create multiple files in a directory.

    Args:
        path: Base directory for file creation.
        files: Mapping of relative file paths to file contents.
               Parent directories are created automatically.

    Example:
        create_test_files(repo, {
            "README.md": "# Example",
            "src/app.py": "print('hello')",
        })
    """
    for file_path, content in files.items():
        full_path = path / file_path
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_text(content)


def create_git_repo(
    path: Path,
    files: dict[str, str] | None = None,
    commit_message: str = "Initial commit",
    user_name: str = "Test User",
    user_email: str = "test@example.com",
) -> Path:
    """Create a complete git repository with optional files.

    This is a convenience function that combines init_git_repo(),
    create_test_files(), and git_add_and_commit().

    Args:
        path: Directory for the repository (created if doesn't exist).
        files: Optional mapping of file paths to contents.
        commit_message: Message for the initial commit.
        user_name: Git user.name configuration.
        user_email: Git user.email configuration.

    Returns:
        Path to the repository root.
    """
    path.mkdir(parents=True, exist_ok=True)
    init_git_repo(path, user_name=user_name, user_email=user_email)

    if files:
        create_test_files(path, files)
        git_add_and_commit(path, message=commit_message)

    return path


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Create a git repository with three commits, a branch and two tags.

    History (oldest first) on 'main':
    - "Initial commit" adding README.md, dated 2024-01-01T10:00:00+02:00
    - "Add app" adding src/app.py, tagged 'v1.0' (annotated)
    - "Update app\\n\\nWith a body line." tagged 'light' (lightweight)

    A branch 'feature' points at the second commit.

    Returns:
        Path to the git repository root.
    """
    repo = tmp_path / "test_repo"
    repo.mkdir()
    init_git_repo(repo)

    create_test_files(repo, {"README.md": "# Test repo\n"})
    git_add_and_commit(repo, "Initial commit", date="2024-01-01T10:00:00+02:00")

    create_test_files(repo, {"src/app.py": "print('hello')\n"})
    git_add_and_commit(repo, "Add app", date="2024-01-02T10:00:00+02:00")
    run_git(repo, "tag", "-a", "v1.0", "-m", "Release 1.0")
    run_git(repo, "branch", "feature")

    create_test_files(repo, {"src/app.py": "print('hello, world')\n"})
    git_add_and_commit(
        repo, "Update app\n\nWith a body line.", date="2024-01-03T10:00:00+02:00"
    )
    run_git(repo, "tag", "light")

    return repo
