"""End-to-end tests: load a drawing, process it, write it and read it back."""

from pathlib import Path

import pytest
from PIL import Image
from typer.testing import CliRunner

from pancakepath import __version__
from pancakepath.cli import app
from pancakepath.config import (
    PANCAKE_SHADES,
    ExportConfig,
    LayoutConfig,
    PaletteConfig,
    PancakeSettings,
)
from pancakepath.core.geometry import shape_area
from pancakepath.core.processor import LayerProcessor
from pancakepath.domain import PathRecord
from pancakepath.io import read_svg, write_svg

DRAWING = """<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 50">
  <rect id="white" x="0" y="0" width="20" height="20" fill="#ffffff"/>
  <rect id="black" x="10" y="0" width="20" height="20" fill="#000000"/>
  <rect id="gold" x="60" y="0" width="20" height="20" fill="#e2bc15"/>
  <rect id="sliver" x="40" y="40" width="40" height="1" fill="#a6720e"/>
</svg>
"""

runner = CliRunner()


@pytest.fixture
def drawing(tmp_path: Path) -> Path:
    path = tmp_path / "drawing.svg"
    path.write_text(DRAWING, encoding="utf-8")
    return path


def records_by_name(path: Path) -> dict[str, PathRecord]:
    layer = read_svg(path)
    return {r.metadata.name: r for r in layer.iter_records() if r.fill_color}


class TestPipeline:
    """Tests running the processor between reader and writer."""

    def test_processed_drawing_has_no_overlaps(self, drawing: Path, tmp_path: Path) -> None:
        layer = read_svg(drawing)
        LayerProcessor(PancakeSettings(), configure=False).process(layer)
        output = write_svg(layer, tmp_path / "out.svg")

        records = records_by_name(output)

        assert set(records) == {"white", "black", "gold", "sliver"}
        assert shape_area(records["white"].shape) == pytest.approx(200.0)
        assert shape_area(records["black"].shape) == pytest.approx(400.0)
        total = sum(shape_area(r.shape) for r in records.values())
        assert total == pytest.approx(30 * 20 + 400 + 40)

    def test_colors_snapped_to_shades(self, drawing: Path, tmp_path: Path) -> None:
        layer = read_svg(drawing)
        LayerProcessor(PancakeSettings(), configure=False).process(layer)
        records = records_by_name(write_svg(layer, tmp_path / "out.svg"))

        assert records["white"].fill_color == PANCAKE_SHADES[0]
        assert records["gold"].fill_color == PANCAKE_SHADES[1]
        assert records["black"].fill_color == PANCAKE_SHADES[3]
        assert records["black"].metadata.color == 3

    def test_outlines_written_on_top(self, drawing: Path, tmp_path: Path) -> None:
        layer = read_svg(drawing)
        settings = PancakeSettings(palette=PaletteConfig(outline=True))
        LayerProcessor(settings, configure=False).process(layer)
        reread = read_svg(write_svg(layer, tmp_path / "out.svg"))

        items = list(reread.iter_records())
        assert len(items) == 8
        fills, outlines = items[:4], items[4:]
        assert all(r.fill_color and not r.stroke_color for r in fills)
        assert all(r.fill_color is None and r.stroke_color for r in outlines)
        assert all(r.stroke_width == 5.0 for r in outlines)
        # Black can only use the first three shades; its outline gets the last
        black_outline = [r for r in outlines if r.metadata.name == "black"]
        assert black_outline[0].stroke_color == PANCAKE_SHADES[3]


class TestCli:
    """Tests for the command line interface."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_process_default_output(self, drawing: Path) -> None:
        result = runner.invoke(app, ["process", str(drawing), "--log-level", "ERROR"])

        assert result.exit_code == 0, result.output
        assert "Complete" in result.output
        output = drawing.parent / "drawing-processed.svg"
        assert output.exists()
        assert len(read_svg(output)) == 4

    def test_process_thin_and_outline(self, drawing: Path, tmp_path: Path) -> None:
        output = tmp_path / "thin.svg"
        result = runner.invoke(
            app,
            ["process", str(drawing), "-o", str(output), "--thin", "2", "--outline", "-q"],
        )

        assert result.exit_code == 0, result.output
        names = [r.metadata.name for r in read_svg(output).iter_records()]
        assert "sliver" not in names
        assert len(names) == 6

    def test_process_min_length(self, drawing: Path, tmp_path: Path) -> None:
        output = tmp_path / "culled.svg"
        result = runner.invoke(
            app,
            ["process", str(drawing), "-o", str(output), "--min-length", "81", "--no-resolve", "-q"],
        )

        assert result.exit_code == 0, result.output
        assert [r.metadata.name for r in read_svg(output)] == ["sliver"]

    def test_process_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["process", str(tmp_path / "missing.svg"), "-q"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_process_invalid_svg(self, tmp_path: Path) -> None:
        broken = tmp_path / "broken.svg"
        broken.write_text("<svg", encoding="utf-8")
        result = runner.invoke(app, ["process", str(broken), "-q"])
        assert result.exit_code == 1
        assert not (tmp_path / "broken-processed.svg").exists()

    def test_verbose_and_quiet_conflict(self, drawing: Path) -> None:
        result = runner.invoke(app, ["process", str(drawing), "-v", "-q"])
        assert result.exit_code == 1

    def test_layout(self) -> None:
        result = runner.invoke(app, ["layout", "4", "--trace", "100", "100", "--area", "1000", "500"])

        assert result.exit_code == 0, result.output
        assert "4 copies" in result.output
        assert "250.00" in result.output
        assert "750.00" in result.output

    def test_layout_defaults_from_settings(self) -> None:
        """Without COUNT or --area, one copy is centered on the griddle."""
        config = LayoutConfig()
        result = runner.invoke(app, ["layout", "--trace", "100", "100"])

        assert result.exit_code == 0, result.output
        assert f"{config.copies} copies" in result.output
        assert f"{config.griddle_width / 2:.2f}" in result.output
        assert f"{config.griddle_height / 2:.2f}" in result.output

    def test_layout_unsupported_count(self) -> None:
        result = runner.invoke(app, ["layout", "3", "--trace", "100", "100"])
        assert result.exit_code == 1

    def test_layout_zero_width(self) -> None:
        result = runner.invoke(app, ["layout", "3", "--trace", "0", "100"])
        assert result.exit_code == 0
        assert "No positions" in result.output

    def test_snap(self) -> None:
        result = runner.invoke(app, ["snap", "#000000"])
        assert result.exit_code == 0
        assert PANCAKE_SHADES[3] in result.output

    def test_snap_with_limit(self) -> None:
        result = runner.invoke(app, ["snap", "rgb(0, 0, 0)", "--limit", "2"])
        assert result.exit_code == 0
        assert PANCAKE_SHADES[1] in result.output

    def test_rasterize(self, drawing: Path, tmp_path: Path) -> None:
        output = tmp_path / "drawing.png"
        result = runner.invoke(app, ["rasterize", str(drawing), "-o", str(output)])

        assert result.exit_code == 0, result.output
        with Image.open(output) as image:
            assert image.mode == "RGBA"
            assert image.size == (82, 43)

    def test_rasterize_dpi(self, drawing: Path, tmp_path: Path) -> None:
        output = tmp_path / "double.png"
        dpi = ExportConfig().dpi * 2
        result = runner.invoke(app, ["rasterize", str(drawing), "-o", str(output), "--dpi", str(dpi)])

        assert result.exit_code == 0, result.output
        with Image.open(output) as image:
            assert image.size == (164, 86)

    def test_rasterize_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["rasterize", str(tmp_path / "missing.svg")])
        assert result.exit_code == 1
