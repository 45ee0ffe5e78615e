"""Tests for package sources."""

import tempfile
from pathlib import Path

import pytest
from pydantic import TypeAdapter
from run_that import GitPackageSource
from run_that import InvalidAddressError
from run_that import LocalPackageSource
from run_that import PackageSource
from run_that import package_id_for
from run_that import parse_git_address
from run_that import parse_source
from run_that import source_from_address
from run_that import source_from_path


def test_source_from_address():
    """Addresses become git sources."""
    source = source_from_address("ur-fault/run-that@v1")

    assert isinstance(source, GitPackageSource)
    assert source.git == parse_git_address("ur-fault/run-that@v1")
    assert source.uri == "github.com:ur-fault/run-that@v1"


def test_source_from_invalid_address():
    """Invalid addresses raise InvalidAddressError."""
    with pytest.raises(InvalidAddressError):
        source_from_address(":ur-fault/lil-game$asd")


def test_source_from_path_always_succeeds():
    """Local sources are created even for paths that don't exist yet."""
    source = source_from_path("/definitely/not/here")

    assert isinstance(source, LocalPackageSource)
    assert source.path == Path("/definitely/not/here")
    assert source.uri == "/definitely/not/here"


def test_source_from_path_expands_user():
    """Home-relative paths are expanded."""
    source = source_from_path("~/games/lil-game")

    assert source.path == Path.home() / "games" / "lil-game"


def test_parse_source_prefers_existing_paths():
    """Existing paths are local sources, anything else is an address."""
    with tempfile.TemporaryDirectory() as tmpdir:
        assert isinstance(parse_source(tmpdir), LocalPackageSource)

    assert isinstance(parse_source("ur-fault/run-that"), GitPackageSource)

    with pytest.raises(InvalidAddressError):
        parse_source("/no/such/dir/and/not/an/address")


def test_sources_validate_through_discriminated_union():
    """Serialized sources validate back into the right variant."""
    adapter = TypeAdapter(PackageSource)
    git = source_from_address("gitlab.com:ur-fault/run-that#abc123")
    local = source_from_path("/tmp/lil-game")

    assert adapter.validate_python(git.model_dump()) == git
    assert adapter.validate_python(local.model_dump()) == local


def test_package_id_for_sources():
    """Package ids follow the root/<user>/<name> layout."""
    assert package_id_for(source_from_address("ur-fault/run-that")) == "ur-fault/run-that"
    assert package_id_for(source_from_address("_local/run-that")) == "__local/run-that"
    assert package_id_for(source_from_path("/tmp/lil-game")) == "_local/lil-game"
