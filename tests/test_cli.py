"""Tests for the Typer CLI commands using CliRunner."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from typer.testing import CliRunner

from apod.cli import app
from apod.models import AssetResult, MediaLink, MediaResult, StrategyName

runner = CliRunner()


def make_result(**overrides) -> MediaResult:
    data = dict(
        date="2025-10-01",
        title="NGC 6960",
        explanation="The Witch's Broom Nebula.",
        media_type="image",
        url="https://x/img.jpg",
        source=StrategyName.PRIMARY_API,
    )
    data.update(overrides)
    return MediaResult(**data)


# ---------------------------------------------------------------------------
# resolve command
# ---------------------------------------------------------------------------


class TestResolveCommand:
    def test_found_prints_table(self):
        with patch("apod.pipeline.ResolutionOrchestrator") as orchestrator_cls:
            orchestrator_cls.return_value.resolve.return_value = make_result()
            result = runner.invoke(app, ["resolve", "2025-10-01"])

        assert result.exit_code == 0
        assert "NGC 6960" in result.output
        assert "primary-api" in result.output

    def test_json_output(self):
        with patch("apod.pipeline.ResolutionOrchestrator") as orchestrator_cls:
            orchestrator_cls.return_value.resolve.return_value = make_result(
                source=StrategyName.KEYWORD_SEARCH
            )
            result = runner.invoke(app, ["resolve", "2025-10-01", "--json"])

        assert result.exit_code == 0
        assert '"source": "keyword-search"' in result.output

    def test_not_found_exit_1(self):
        with patch("apod.pipeline.ResolutionOrchestrator") as orchestrator_cls:
            orchestrator_cls.return_value.resolve.return_value = None
            result = runner.invoke(app, ["resolve", "2025-10-01"])

        assert result.exit_code == 1
        assert "No APOD found" in result.output

    def test_log_level_option_reaches_settings(self):
        with patch("apod.pipeline.ResolutionOrchestrator") as orchestrator_cls:
            orchestrator_cls.return_value.resolve.return_value = make_result()
            result = runner.invoke(app, ["resolve", "2025-10-01", "--log-level", "debug"])

        assert result.exit_code == 0
        cfg = orchestrator_cls.call_args.kwargs["config"]
        assert cfg.log_level == "DEBUG"

    def test_malformed_date_exit_2(self):
        # Real orchestrator: validation happens before any network access
        result = runner.invoke(app, ["resolve", "2025-13"])
        assert result.exit_code == 2
        assert "YYYY-MM-DD" in result.output


# ---------------------------------------------------------------------------
# asset command
# ---------------------------------------------------------------------------


class TestAssetCommand:
    def test_found_prints_best(self):
        asset = AssetResult(
            best="https://x/orig.mp4",
            items=[MediaLink(href="https://x/orig.mp4"), MediaLink(href="https://x/thumb.jpg")],
            type="video",
            rationale="motion",
        )
        with patch("apod.assets.AssetResolver") as resolver_cls:
            resolver_cls.return_value.resolve_asset.return_value = asset
            result = runner.invoke(app, ["asset", "X"])

        assert result.exit_code == 0
        assert "orig.mp4" in result.output
        assert "motion" in result.output

    def test_not_found_exit_1(self):
        with patch("apod.assets.AssetResolver") as resolver_cls:
            resolver_cls.return_value.resolve_asset.return_value = None
            result = runner.invoke(app, ["asset", "X"])
        assert result.exit_code == 1

    def test_blank_id_exit_2(self):
        result = runner.invoke(app, ["asset", "   "])
        assert result.exit_code == 2


# ---------------------------------------------------------------------------
# fetch-image / validate commands
# ---------------------------------------------------------------------------


class TestFetchImageCommand:
    def test_disallowed_host_exit_2(self, tmp_path):
        result = runner.invoke(
            app, ["fetch-image", "https://evil.example/a.jpg", "--out", str(tmp_path / "a.jpg")]
        )
        assert result.exit_code == 2
        assert "not allowed" in result.output

    def test_saved(self, tmp_path):
        with patch("apod.imageproxy.fetch_image", return_value="image/jpeg") as fetch:
            result = runner.invoke(
                app,
                ["fetch-image", "https://apod.nasa.gov/apod/a.jpg", "--out", str(tmp_path / "a.jpg")],
            )
        assert result.exit_code == 0
        fetch.assert_called_once()
        assert "image/jpeg" in result.output


class TestValidateCommand:
    def test_reports_each_upstream(self):
        fake = MagicMock()
        fake.__enter__.return_value = fake
        fake.get.return_value = MagicMock(status_code=200)
        with patch("apod.cli._client", return_value=fake):
            result = runner.invoke(app, ["validate"])

        assert result.exit_code == 0
        assert fake.get.call_count == 4
        assert "APOD API" in result.output
