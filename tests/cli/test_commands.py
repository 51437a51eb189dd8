"""
Tests for the list, install, remove, global and verify commands.

Commands run against a temporary sdkcache home; the git fetcher is replaced
with a fake that writes a minimal SDK build.
"""

import argparse
import shutil
import sys
import pytest
from unittest.mock import patch

from sdkcache.cache.fetcher import VersionFetcher
from sdkcache.cli.commands import global_version, install, listing, remove, verify
from sdkcache.core.exceptions import FetchError, InvalidVersionError
from tests.fixtures.versions import write_version_dir

unix_only = pytest.mark.skipif(sys.platform == "win32", reason="Unix-specific test")


class FakeFetcher(VersionFetcher):
    """Writes a fake SDK build reporting sdk_versions.get(name, name)."""

    def __init__(self, sdk_versions=None, fail=False):
        self.sdk_versions = sdk_versions or {}
        self.fail = fail
        self.fetched = []

    def fetch(self, request, destination):
        self.fetched.append(request.name)
        if self.fail:
            raise FetchError(request.name, "clone failed")
        write_version_dir(
            destination, sdk_version=self.sdk_versions.get(request.name, request.name)
        )


@pytest.fixture
def home(tmp_path):
    return tmp_path / ".sdkcache"


@pytest.fixture
def fetcher():
    fake = FakeFetcher()
    with patch("sdkcache.cli.utils.GitFetcher", return_value=fake):
        yield fake


def make_args(home, **kwargs):
    """Namespace with the global options every command expects."""
    defaults = {"home": home, "config": None, "verbose": False, "quiet": False}
    defaults.update(kwargs)
    return argparse.Namespace(**defaults)


def install_args(home, version, set_global=False, fix_mismatch=False):
    return make_args(
        home, version=version, set_global=set_global, fix_mismatch=fix_mismatch
    )


# ==============================================================================
# list
# ==============================================================================


class TestListCommand:
    """Test the list command."""

    def test_empty_cache(self, home, fetcher, capsys):
        """Test listing a cache that does not exist yet."""
        assert listing.run(make_args(home)) == 0

        assert "No SDK versions cached" in capsys.readouterr().out

    @unix_only
    def test_lists_in_order_with_markers(self, home, fetcher, capsys):
        """Test ordering, global marker and resolved SDK versions."""
        for name in ["1.3.1", "2.0.0", "beta"]:
            write_version_dir(home / "versions" / name, sdk_version=name)
        write_version_dir(home / "versions" / "stable", sdk_version="3.7.2")
        global_version.run(make_args(home, version="2.0.0", unset=False))
        capsys.readouterr()

        assert listing.run(make_args(home)) == 0

        lines = capsys.readouterr().out.splitlines()
        assert lines[1:] == [
            "  stable (3.7.2)",
            "  beta",
            "  2.0.0 [global]",
            "  1.3.1",
        ]

    def test_stray_directory_is_reported(self, home, fetcher, capsys):
        """Test a non-version directory in the cache root is named, not raised."""
        write_version_dir(home / "versions" / "stable")
        (home / "versions" / "flutter_backup").mkdir()

        assert listing.run(make_args(home)) == 1

        err = capsys.readouterr().err
        assert "flutter_backup is not a cached SDK version" in err
        assert "Remove or rename it" in err


# ==============================================================================
# install
# ==============================================================================


class TestInstallCommand:
    """Test the install command."""

    def test_install_new_version(self, home, fetcher, capsys):
        """Test installing a version that is not cached."""
        assert install.run(install_args(home, "2.0.0")) == 0

        assert fetcher.fetched == ["2.0.0"]
        assert (home / "versions" / "2.0.0" / "bin").is_dir()
        assert "Version 2.0.0 is installed" in capsys.readouterr().out

    def test_install_existing_is_not_refetched(self, home, fetcher):
        """Test a valid cached version is reused."""
        write_version_dir(home / "versions" / "stable", sdk_version="3.7.2")

        assert install.run(install_args(home, "stable")) == 0
        assert fetcher.fetched == []

    def test_install_replaces_corrupted_version(self, home, fetcher):
        """Test a cached version without executable is fetched again."""
        directory = write_version_dir(
            home / "versions" / "2.0.0", sdk_version="2.0.0", executable=False
        )
        (directory / "leftover").write_text("broken")

        assert install.run(install_args(home, "2.0.0")) == 0

        assert fetcher.fetched == ["2.0.0"]
        assert not (directory / "leftover").exists()
        assert (directory / "bin").is_dir()

    def test_install_invalid_name(self, home, fetcher):
        """Test malformed versions are rejected before fetching."""
        with pytest.raises(InvalidVersionError):
            install.run(install_args(home, "latest"))

        assert fetcher.fetched == []

    def test_install_fetch_failure_propagates(self, home):
        """Test fetch errors reach the caller."""
        failing = FakeFetcher(fail=True)
        with patch("sdkcache.cli.utils.GitFetcher", return_value=failing):
            with pytest.raises(FetchError):
                install.run(install_args(home, "beta"))

        assert not (home / "versions" / "beta").exists()

    def test_install_mismatch_warns(self, home, fetcher, capsys):
        """Test a version mismatch is reported but kept."""
        fetcher.sdk_versions["2.0.0"] = "2.0.1"

        assert install.run(install_args(home, "2.0.0")) == 0

        assert "contains SDK version 2.0.1" in capsys.readouterr().err
        assert (home / "versions" / "2.0.0").is_dir()

    def test_install_fix_mismatch_promotes(self, home, fetcher, capsys):
        """Test --fix-mismatch moves the version to its SDK version."""
        fetcher.sdk_versions["2.0.0"] = "2.0.1"

        assert install.run(install_args(home, "2.0.0", fix_mismatch=True)) == 0

        assert not (home / "versions" / "2.0.0").exists()
        assert (home / "versions" / "2.0.1").is_dir()
        assert "Version 2.0.1 is installed" in capsys.readouterr().out

    @unix_only
    def test_install_global(self, home, fetcher):
        """Test --global links the installed version."""
        assert install.run(install_args(home, "beta", set_global=True)) == 0

        assert (home / "default").is_symlink()
        assert (home / "default").resolve() == (home / "versions" / "beta").resolve()

    @unix_only
    def test_reinstall_corrupted_global_keeps_it_global(self, home, fetcher):
        """Test re-fetching the global version links it again."""
        directory = write_version_dir(home / "versions" / "stable")
        global_version.run(make_args(home, version="stable", unset=False))
        (directory / "bin" / "flutter").unlink()

        assert install.run(install_args(home, "stable")) == 0

        assert fetcher.fetched == ["stable"]
        assert (home / "default").is_symlink()
        assert (home / "default").resolve() == directory.resolve()

    @unix_only
    def test_reinstall_corrupted_other_leaves_global(self, home, fetcher):
        write_version_dir(home / "versions" / "stable")
        directory = write_version_dir(home / "versions" / "beta")
        global_version.run(make_args(home, version="stable", unset=False))
        (directory / "bin" / "flutter").unlink()

        assert install.run(install_args(home, "beta")) == 0

        target = (home / "default").resolve()
        assert target == (home / "versions" / "stable").resolve()


# ==============================================================================
# remove
# ==============================================================================


class TestRemoveCommand:
    """Test the remove command."""

    def test_remove(self, home, fetcher, capsys):
        write_version_dir(home / "versions" / "2.0.0")

        assert remove.run(make_args(home, version="2.0.0")) == 0

        assert not (home / "versions" / "2.0.0").exists()
        assert "Removed version 2.0.0" in capsys.readouterr().out

    def test_remove_missing(self, home, fetcher, capsys):
        assert remove.run(make_args(home, version="2.0.0")) == 1

        assert "not cached" in capsys.readouterr().err

    @unix_only
    def test_remove_global_unsets_link(self, home, fetcher):
        """Test removing the global version does not leave a dangling link."""
        write_version_dir(home / "versions" / "stable")
        global_version.run(make_args(home, version="stable", unset=False))

        assert remove.run(make_args(home, version="stable")) == 0

        assert not (home / "default").is_symlink()

    @unix_only
    def test_remove_other_keeps_link(self, home, fetcher):
        write_version_dir(home / "versions" / "stable")
        write_version_dir(home / "versions" / "beta")
        global_version.run(make_args(home, version="stable", unset=False))

        assert remove.run(make_args(home, version="beta")) == 0

        assert (home / "default").is_symlink()


# ==============================================================================
# global
# ==============================================================================


@unix_only
class TestGlobalCommand:
    """Test the global command."""

    def test_show_none(self, home, fetcher, capsys):
        assert global_version.run(make_args(home, version=None, unset=False)) == 0

        assert "No global version configured" in capsys.readouterr().out

    def test_set_and_show(self, home, fetcher, capsys):
        write_version_dir(home / "versions" / "1.22.0-1.0.pre")

        assert (
            global_version.run(make_args(home, version="1.22.0-1.0.pre", unset=False))
            == 0
        )
        capsys.readouterr()
        assert global_version.run(make_args(home, version=None, unset=False)) == 0

        assert capsys.readouterr().out.strip() == "1.22.0-1.0.pre"

    def test_set_uncached(self, home, fetcher, capsys):
        assert global_version.run(make_args(home, version="beta", unset=False)) == 1

        err = capsys.readouterr().err
        assert "Version beta is not cached" in err
        assert "sdkcache install beta" in err

    def test_show_dangling(self, home, fetcher, capsys):
        """Test a link to a removed version is reported."""
        write_version_dir(home / "versions" / "stable")
        global_version.run(make_args(home, version="stable", unset=False))
        shutil.rmtree(home / "versions" / "stable")

        assert global_version.run(make_args(home, version=None, unset=False)) == 1

        assert "no longer cached" in capsys.readouterr().err

    def test_unset(self, home, fetcher, capsys):
        write_version_dir(home / "versions" / "stable")
        global_version.run(make_args(home, version="stable", unset=False))

        assert global_version.run(make_args(home, version=None, unset=True)) == 0

        assert not (home / "default").exists()
        assert "Global version unset" in capsys.readouterr().out

    def test_unset_with_version_is_rejected(self, home, fetcher):
        assert global_version.run(make_args(home, version="stable", unset=True)) == 1


# ==============================================================================
# verify
# ==============================================================================


class TestVerifyCommand:
    """Test the verify command."""

    def test_verify_empty(self, home, fetcher, capsys):
        assert verify.run(make_args(home, version=None)) == 0

        assert "No SDK versions cached" in capsys.readouterr().out

    def test_verify_all_valid(self, home, fetcher, capsys):
        write_version_dir(home / "versions" / "stable", sdk_version="3.7.2")
        write_version_dir(home / "versions" / "2.0.0")

        assert verify.run(make_args(home, version=None)) == 0

        out = capsys.readouterr().out
        assert "stable: ok" in out
        assert "2.0.0: ok" in out

    def test_verify_reports_failures(self, home, fetcher, capsys):
        write_version_dir(home / "versions" / "2.0.0", sdk_version="2.0.1")
        write_version_dir(home / "versions" / "1.0.0", executable=False)

        assert verify.run(make_args(home, version=None)) == 1

        out = capsys.readouterr().out
        assert "2.0.0: version mismatch (contains 2.0.1)" in out
        assert "1.0.0: invalid" in out

    def test_verify_single(self, home, fetcher, capsys):
        write_version_dir(home / "versions" / "2.0.0", sdk_version="2.0.1")
        write_version_dir(home / "versions" / "beta")

        assert verify.run(make_args(home, version="beta")) == 0

        out = capsys.readouterr().out
        assert "beta: ok" in out
        assert "2.0.0" not in out

    def test_verify_stray_directory_is_reported(self, home, fetcher, capsys):
        write_version_dir(home / "versions" / "2.0.0")
        (home / "versions" / "flutter_backup").mkdir()

        assert verify.run(make_args(home, version=None)) == 1

        assert "flutter_backup is not a cached SDK version" in capsys.readouterr().err

    def test_verify_missing(self, home, fetcher, capsys):
        assert verify.run(make_args(home, version="beta")) == 1

        assert "not cached" in capsys.readouterr().err
