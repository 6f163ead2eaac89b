"""Tests for CLI module."""

import json

import pytest
from click.testing import CliRunner

from music_catalog import __version__
from music_catalog.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def catalog_dir(tmp_path):
    """A delimited catalog with one dangling song reference."""
    source = tmp_path / "source"
    source.mkdir()
    (source / "artists.csv").write_text("a1;Radiohead\n", encoding="utf-8")
    (source / "songs.csv").write_text("s1;Karma Police;{a1};Rock;258;OK Computer\n", encoding="utf-8")
    (source / "playlists.csv").write_text("p1;Favorites;{s1,s2}\n", encoding="utf-8")
    (source / "customers.csv").write_text(
        "Premium;c1;bigspender;Secret#123;Bo;Diddley;41;{a1};{p1}\n", encoding="utf-8"
    )
    return source


class TestCli:
    """Test the music-catalog command group."""

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_show(self, runner, catalog_dir):
        result = runner.invoke(cli, ["show", str(catalog_dir)])
        assert result.exit_code == 0
        assert "Radiohead" in result.output
        assert "Favorites" in result.output
        assert "bigspender" in result.output

    def test_show_malformed_catalog(self, runner, catalog_dir):
        (catalog_dir / "songs.csv").write_text("s1;Karma Police\n", encoding="utf-8")
        result = runner.invoke(cli, ["show", str(catalog_dir)])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_show_missing_files(self, runner, tmp_path):
        result = runner.invoke(cli, ["show", str(tmp_path)])
        assert result.exit_code == 1

    def test_check_lists_unresolved_references(self, runner, catalog_dir):
        result = runner.invoke(cli, ["check", str(catalog_dir)])
        assert result.exit_code == 0
        assert "s2" in result.output

    def test_check_strict(self, runner, catalog_dir):
        result = runner.invoke(cli, ["check", "--strict", str(catalog_dir)])
        assert result.exit_code == 1

    def test_check_clean_catalog(self, runner, catalog_dir):
        (catalog_dir / "playlists.csv").write_text("p1;Favorites;{s1}\n", encoding="utf-8")
        result = runner.invoke(cli, ["check", "--strict", str(catalog_dir)])
        assert result.exit_code == 0
        assert "All references resolved" in result.output

    def test_convert_to_snapshot_and_back(self, runner, catalog_dir, tmp_path):
        binary_dir = tmp_path / "binary"
        text_dir = tmp_path / "text"

        result = runner.invoke(cli, ["convert", str(catalog_dir), str(binary_dir), "--to", "snapshot"])
        assert result.exit_code == 0
        assert (binary_dir / "catalog.spot").exists()
        assert "unresolved" in result.output

        result = runner.invoke(cli, [
            "convert", str(binary_dir), str(text_dir), "--from", "snapshot", "--to", "csv",
        ])
        assert result.exit_code == 0
        assert (text_dir / "playlists.csv").read_text(encoding="utf-8") == "p1;Favorites;{s1,s2}\n"

    def test_convert_to_binary_files(self, runner, catalog_dir, tmp_path):
        target = tmp_path / "binary"
        result = runner.invoke(cli, ["convert", str(catalog_dir), str(target)])
        assert result.exit_code == 0
        assert sorted(p.name for p in target.iterdir()) == [
            "artists.spot", "customers.spot", "playlists.spot", "songs.spot",
        ]

    def test_convert_with_target_separator(self, runner, catalog_dir, tmp_path):
        target = tmp_path / "piped"
        result = runner.invoke(cli, [
            "convert", str(catalog_dir), str(target), "--to", "csv", "--target-separator", "|",
        ])
        assert result.exit_code == 0
        assert (target / "artists.csv").read_text(encoding="utf-8") == "a1|Radiohead\n"

    def test_report(self, runner, catalog_dir):
        result = runner.invoke(cli, ["report", str(catalog_dir)])
        assert result.exit_code == 0
        assert "Karma Police" in result.output
        assert "Premium customers" in result.output

    def test_config_file(self, runner, catalog_dir, tmp_path):
        for path in catalog_dir.iterdir():
            path.write_text(path.read_text(encoding="utf-8").replace(";", "|"), encoding="utf-8")
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"separator": "|"}), encoding="utf-8")

        result = runner.invoke(cli, ["show", "--config", str(config), str(catalog_dir)])
        assert result.exit_code == 0
        assert "Radiohead" in result.output

    def test_invalid_separator_option(self, runner, catalog_dir):
        result = runner.invoke(cli, ["show", "--separator", ",", str(catalog_dir)])
        assert result.exit_code == 1
        assert "Separator" in result.output
