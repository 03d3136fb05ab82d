"""Tests for pipeline orchestration and processing statistics."""

from pathlib import Path
from unittest.mock import Mock

import pytest

from pancakepath.config import (
    PANCAKE_SHADES,
    LayoutConfig,
    OffsetConfig,
    PaletteConfig,
    PancakeSettings,
    ThinFeatureConfig,
    get_default_settings,
)
from pancakepath.core.processor import CancellationToken, LayerProcessor
from pancakepath.domain import CompoundShape, Contour, Layer, PathMetadata, PathRecord, Point
from pancakepath.exceptions import PaletteError, ProcessingCancelledError
from pancakepath.utils import ProcessingLogger, ProcessingStats, configure_logging


def square_record(x: float, y: float, size: float, fill: str, name: str) -> PathRecord:
    contour = Contour(points=[Point(x, y), Point(x + size, y), Point(x + size, y + size), Point(x, y + size)])
    return PathRecord(
        shape=CompoundShape(contours=[contour]),
        fill_color=fill,
        metadata=PathMetadata(name=name),
    )


@pytest.fixture
def layer() -> Layer:
    """Three overlapping squares plus a sliver."""
    return Layer(
        [
            square_record(0, 0, 20, "#ffffff", "a"),
            square_record(10, 0, 20, "#000000", "b"),
            square_record(0, 0, 20, "#e2bc15", "c"),
            PathRecord(
                shape=CompoundShape(
                    contours=[Contour(points=[Point(50, 0), Point(90, 0), Point(90, 1), Point(50, 1)])]
                ),
                fill_color="#a6720e",
                metadata=PathMetadata(name="sliver"),
            ),
        ]
    )


class TestSettings:
    """Tests for pydantic settings."""

    def test_defaults(self) -> None:
        settings = get_default_settings()
        assert settings.offset.scale == 100
        assert settings.offset.clean_distance == pytest.approx(10.0)
        assert settings.offset.miter_limit == 2.0
        assert settings.offset.arc_tolerance == 0.25
        assert settings.palette.shades == PANCAKE_SHADES
        assert settings.palette.outline_width == 5.0
        assert settings.thin_features.amount == 0.0
        assert settings.layout.copies == 1
        assert settings.export.dpi == 72

    def test_palette_must_be_hex(self) -> None:
        with pytest.raises(ValueError):
            PaletteConfig(shades=["brown"])

    def test_copies_validated(self) -> None:
        with pytest.raises(ValueError):
            LayoutConfig(copies=3)

    def test_negative_thin_amount_rejected(self) -> None:
        with pytest.raises(ValueError):
            ThinFeatureConfig(amount=-1)

    def test_scale_bounds(self) -> None:
        with pytest.raises(ValueError):
            OffsetConfig(scale=0)


class TestCancellationToken:
    """Tests for CancellationToken."""

    def test_initially_clear(self) -> None:
        assert not CancellationToken().is_cancelled

    def test_cancel(self) -> None:
        token = CancellationToken()
        token.cancel()
        assert token.is_cancelled


class TestLayerProcessor:
    """Tests for LayerProcessor.process."""

    def test_resolve_and_color(self, layer: Layer) -> None:
        processor = LayerProcessor(PancakeSettings(), configure=False)

        stats = processor.process(layer)

        # "a" is hidden under "c", which sits exactly on top of it
        assert [r.metadata.name for r in layer] == ["b", "c", "sliver"]
        assert stats.input_count == 4
        assert stats.removed_count == 1
        assert stats.processed_count == 3
        assert stats.outlines_added == 0
        assert stats.error_count == 0
        assert all(r.fill_color in PANCAKE_SHADES for r in layer)
        assert all(r.metadata.processed for r in layer)
        assert set(stats.stage_timings_ms) == {"resolve", "color"}
        assert stats.duration_seconds >= 0

    def test_thin_features_and_outline(self, layer: Layer) -> None:
        settings = PancakeSettings(
            thin_features=ThinFeatureConfig(amount=2.0, resolution=0.5),
            palette=PaletteConfig(outline=True),
        )
        processor = LayerProcessor(settings, configure=False)

        stats = processor.process(layer, resolve=False)

        assert stats.thin_removed_count == 1
        assert stats.processed_count == 3
        assert stats.outlines_added == stats.processed_count
        assert "sliver" not in [r.metadata.name for r in layer]
        outlines = [r for r in layer if r.fill_color is None]
        assert len(outlines) == stats.outlines_added
        assert all(r.stroke_color == PANCAKE_SHADES[r.metadata.color] for r in outlines)
        assert stats.output_count == len(layer)

    def test_skip_resolve(self, layer: Layer) -> None:
        processor = LayerProcessor(PancakeSettings(), configure=False)
        stats = processor.process(layer, resolve=False)

        assert len(layer) == 4
        assert stats.removed_count == 0
        assert "resolve" not in stats.stage_timings_ms

    def test_min_length_cull(self, layer: Layer) -> None:
        """Squares have an 80 unit outline, the sliver 82."""
        processor = LayerProcessor(PancakeSettings(), configure=False)
        stats = processor.process(layer, resolve=False, min_length=81.0)

        assert [r.metadata.name for r in layer] == ["sliver"]
        assert stats.removed_count == 3
        assert set(stats.stage_timings_ms) == {"cull", "color"}

    def test_progress_callback(self, layer: Layer) -> None:
        callback = Mock()
        processor = LayerProcessor(PancakeSettings(), configure=False)

        processor.process(layer, progress_callback=callback)

        assert [c.args for c in callback.call_args_list] == [("resolve", 1, 2), ("color", 2, 2)]

    def test_cancelled_before_start(self, layer: Layer) -> None:
        token = CancellationToken()
        token.cancel()
        processor = LayerProcessor(PancakeSettings(), configure=False)

        with pytest.raises(ProcessingCancelledError):
            processor.process(layer, cancel_token=token)

        assert processor.processing_logger.stats.was_cancelled
        assert len(layer) == 4

    def test_palette_error_recorded(self, layer: Layer) -> None:
        settings = PancakeSettings(palette=PaletteConfig(shades=["#ffffff"], outline=True))
        processor = LayerProcessor(settings, configure=False)

        with pytest.raises(PaletteError):
            processor.process(layer, resolve=False)

        stats = processor.processing_logger.stats
        assert stats.error_count == 1
        assert stats.errors[0][0] == "color"

    def test_stats_reset_between_runs(self, layer: Layer) -> None:
        processor = LayerProcessor(PancakeSettings(), configure=False)
        processor.process(layer)
        stats = processor.process(layer)
        assert stats.removed_count == 0


class TestProcessingLogger:
    """Tests for ProcessingLogger statistics."""

    def test_tracks_counts(self) -> None:
        logger = ProcessingLogger(Mock())
        logger.log_stage_complete("resolve", 12.5, items=3)
        logger.log_item_removed("a", "covered")
        logger.log_stage_error("color", ValueError("bad"))

        stats = logger.stats
        assert stats.stage_timings_ms == {"resolve": 12.5}
        assert stats.removed_count == 1
        assert stats.error_count == 1
        assert stats.errors == [("color", "bad")]

    def test_duration(self) -> None:
        stats = ProcessingStats(start_time=10.0, end_time=12.5)
        assert stats.duration_seconds == 2.5
        assert ProcessingStats().duration_seconds == 0.0


def test_configure_logging_writes_file(tmp_path: Path) -> None:
    log_file = tmp_path / "run.log"
    logger = configure_logging(log_file=log_file, console_level="ERROR")
    logger.info("hello", stage="test")

    assert log_file.exists()
    assert "hello" in log_file.read_text()

    # Reconfiguring without a file must not keep writing to the old one
    configure_logging(console_level="ERROR")
    size = log_file.stat().st_size
    configure_logging(console_level="ERROR").info("later")
    assert log_file.stat().st_size == size
