"""Tests for the board admin CLI."""

import asyncio

import pytest
from click.testing import CliRunner

from noise.cli.manage_board import BoardAdmin, cli
from noise.web.models.board import AudioItemCreate, TextItemCreate


@pytest.fixture
def admin(path_resolver, monkeypatch):
    """Admin services pointed at the temp data directory."""
    for name in ("PORT", "NODE_ENV", "NOISE_ENV", "UPLOAD_DIR", "STORAGE_TYPE"):
        monkeypatch.delenv(name, raising=False)
    return BoardAdmin(path_resolver)


@pytest.fixture
def runner():
    """Provide a click test runner."""
    return CliRunner()


def _seed(admin):
    """Create one audio and one text item through the board manager."""

    async def seed():
        await admin.database_service.initialize()
        try:
            audio = await admin.board_manager.create_audio_item(
                "owner-1", b"audio", "a.webm", "audio/webm", AudioItemCreate(x=0, y=0)
            )
            await admin.board_manager.create_text_item(
                "owner-1", TextItemCreate(text="hello", x=0, y=0)
            )
            return audio
        finally:
            await admin.database_service.dispose()

    return asyncio.run(seed())


class TestManageBoard:
    """Test admin subcommands."""

    def test_init_db(self, runner, admin):
        """Should create the database file."""
        result = runner.invoke(cli, ["init-db"], obj={"admin": admin})

        assert result.exit_code == 0, result.output
        assert admin.path_resolver.get_database_path().exists()
        assert "Database ready" in result.output

    def test_stats(self, runner, admin):
        """Should print item counts and upload totals."""
        _seed(admin)

        result = runner.invoke(cli, ["stats"], obj={"admin": admin})

        assert result.exit_code == 0, result.output
        assert "Audio items: 1" in result.output
        assert "Text items:  1" in result.output
        assert "Files:     1" in result.output

    def test_clear_board_requires_confirmation(self, runner, admin):
        """Should refuse to clear without --yes."""
        _seed(admin)

        result = runner.invoke(cli, ["clear-board"], obj={"admin": admin})

        assert result.exit_code == 1
        assert len(admin.storage.list_files()) == 1

    def test_clear_board(self, runner, admin):
        """Should delete every row and every uploaded file."""
        _seed(admin)

        result = runner.invoke(cli, ["clear-board", "--yes"], obj={"admin": admin})

        assert result.exit_code == 0, result.output
        assert "Removed 1 audio items, 1 text items and 1 files" in result.output
        assert admin.storage.list_files() == []

    def test_prune_uploads(self, runner, admin):
        """Should delete only files no audio item references."""
        audio = _seed(admin)
        orphan = admin.storage.upload_dir / "orphan.webm"
        orphan.write_bytes(b"stale")

        dry_run = runner.invoke(cli, ["prune-uploads", "--dry-run"], obj={"admin": admin})
        assert dry_run.exit_code == 0, dry_run.output
        assert "orphan.webm" in dry_run.output
        assert orphan.exists()

        result = runner.invoke(cli, ["prune-uploads"], obj={"admin": admin})

        assert result.exit_code == 0, result.output
        assert "Removed 1 files" in result.output
        assert not orphan.exists()
        assert admin.storage.get_file_path(audio.audio_url).exists()

    def test_prune_without_orphans(self, runner, admin):
        """Should report when there is nothing to prune."""
        _seed(admin)

        result = runner.invoke(cli, ["prune-uploads"], obj={"admin": admin})

        assert result.exit_code == 0
        assert "No orphaned uploads found" in result.output
