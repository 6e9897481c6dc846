"""Tests for CLI commands."""

import asyncio
from pathlib import Path

import httpx
import pytest
from click.testing import CliRunner
from rich.console import Console

from swcache.cache.disk import DiskCacheStorage
from swcache.cli import cli

SITE = "https://modern-jan.com"


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("swcache.cli.console", Console(width=200))
    return CliRunner()


@pytest.fixture
def db(tmp_path):
    return str(tmp_path / "cache.db")


async def _populate(db: str) -> None:
    storage = DiskCacheStorage(db_path=Path(db))
    response = httpx.Response(200, content=b"home", request=httpx.Request("GET", f"{SITE}/"))
    await storage.open("modern-jan-v1-static").put(f"{SITE}/", response)
    await storage.close()


class TestCLIGroup:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "swcache" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0


class TestClassifyCommand:
    def test_static_asset(self, runner, db):
        result = runner.invoke(
            cli, ["--db", db, "classify", f"{SITE}/_astro/app.js", "--destination", "script"]
        )
        assert result.exit_code == 0
        assert "static_asset" in result.output
        assert "modern-jan-v1-static" in result.output

    def test_foreign_origin(self, runner, db):
        result = runner.invoke(cli, ["--db", db, "classify", "https://example.org/a.png"])
        assert result.exit_code == 0
        assert "foreign_origin" in result.output

    def test_version_override(self, runner, db):
        result = runner.invoke(
            cli,
            ["--db", db, "--cache-version", "v9", "classify", f"{SITE}/a.png",
             "--destination", "image"],
        )
        assert "modern-jan-v9-images" in result.output

    def test_requires_url(self, runner, db):
        result = runner.invoke(cli, ["--db", db, "classify"])
        assert result.exit_code != 0

    def test_invalid_config(self, runner, db, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("asset_path_prefix: _astro/\n")
        result = runner.invoke(cli, ["--config", str(path), "--db", db, "classify", f"{SITE}/"])
        assert result.exit_code == 1


class TestLifecycleCommands:
    def test_install_offline_is_not_fatal(self, runner, db):
        result = runner.invoke(cli, ["--db", db, "install", "--offline"])
        assert result.exit_code == 0
        assert "precache failed" in result.output

    def test_activate_deletes_old_version(self, runner, db):
        asyncio.run(_populate(db))
        result = runner.invoke(cli, ["--db", db, "--cache-version", "v2", "activate"])
        assert result.exit_code == 0
        assert "modern-jan-v1-static" in result.output
        assert "Activated v2" in result.output


class TestFetchCommand:
    def test_offline_navigation(self, runner, db):
        result = runner.invoke(
            cli, ["--db", db, "fetch", f"{SITE}/blog/", "--mode", "navigate", "--offline"]
        )
        assert result.exit_code == 0
        assert "offline" in result.output
        assert "503" in result.output

    def test_offline_image_miss_fails(self, runner, db):
        result = runner.invoke(
            cli,
            ["--db", db, "fetch", "https://r2.modern-jan.com/a.png", "--destination", "image",
             "--offline"],
        )
        assert result.exit_code == 1

    def test_served_from_disk_cache(self, runner, db, tmp_path):
        asyncio.run(_populate(db))
        out = tmp_path / "home.html"
        result = runner.invoke(
            cli,
            ["--db", db, "fetch", f"{SITE}/", "--destination", "style", "--offline",
             "-o", str(out)],
        )
        assert result.exit_code == 0
        assert "cache" in result.output
        assert out.read_bytes() == b"home"


class TestCacheCommands:
    def test_cache_help(self, runner):
        result = runner.invoke(cli, ["cache", "--help"])
        assert result.exit_code == 0
        assert "stats" in result.output
        assert "clear" in result.output
        assert "list" in result.output

    def test_list(self, runner, db):
        asyncio.run(_populate(db))
        result = runner.invoke(cli, ["--db", db, "cache", "list"])
        assert result.exit_code == 0
        assert "modern-jan-v1-static" in result.output
        assert "current" in result.output

    def test_list_marks_stale(self, runner, db):
        asyncio.run(_populate(db))
        result = runner.invoke(cli, ["--db", db, "--cache-version", "v2", "cache", "list"])
        assert "stale" in result.output

    def test_stats(self, runner, db):
        asyncio.run(_populate(db))
        result = runner.invoke(cli, ["--db", db, "cache", "stats"])
        assert result.exit_code == 0
        assert "Cache Statistics" in result.output
        assert "Entries" in result.output
        assert "modern-jan-v1-static" in result.output
        assert "1 entries" in result.output

    def test_clear(self, runner, db):
        asyncio.run(_populate(db))
        result = runner.invoke(cli, ["--db", db, "cache", "clear", "--yes"])
        assert result.exit_code == 0
        assert "Cache cleared" in result.output
        result = runner.invoke(cli, ["--db", db, "cache", "list"])
        assert "modern-jan-v1-static" not in result.output


class TestConfigCommand:
    def test_shows_resolved_values(self, runner, db):
        result = runner.invoke(cli, ["--db", db, "--cache-version", "v4", "config"])
        assert result.exit_code == 0
        assert "cache_prefix" in result.output
        assert "v4" in result.output
