"""Processing pipeline orchestration.

This module chains the layer operations into the full preparation workflow
for a drawing layer:

1. Cull tiny paths (optional)
2. Remove thin features by erosion and dilation (optional)
3. Resolve overlaps so no two items share fill area
4. Snap colors onto the palette, optionally adding outlines

Key components:
- CancellationToken: Thread-safe cooperative cancellation flag
- LayerProcessor: Main orchestrator class for layer processing
"""

import threading
import time
import traceback
from collections.abc import Callable

import structlog

from pancakepath.config import PancakeSettings
from pancakepath.core.layer import LayerResolver
from pancakepath.core.offset import PolygonOffsetter
from pancakepath.core.palette import PaletteMatcher
from pancakepath.domain import Layer
from pancakepath.exceptions import PancakePathError, ProcessingCancelledError
from pancakepath.utils import ProcessingLogger, ProcessingStats, configure_logging


class CancellationToken:
    """Cooperative cancellation flag shared between threads.

    The pipeline checks the token between stages and between items while
    resolving overlaps; cancelling never interrupts a geometry operation.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()


class LayerProcessor:
    """Orchestrates the preparation of a drawing layer.

    Example:
        settings = PancakeSettings()
        processor = LayerProcessor(settings)
        stats = processor.process(layer)
    """

    def __init__(self, config: PancakeSettings, configure: bool = True) -> None:
        """Initialize the layer processor.

        Args:
            config: PancakePath settings
            configure: Set up logging handlers from ``config.logging``
        """
        self.config = config
        if configure:
            self.logger = configure_logging(
                log_file=config.logging.log_file,
                console_level=config.logging.log_level,
                file_level=config.logging.file_log_level,
            )
        else:
            self.logger = structlog.get_logger("pancakepath")
        self.processing_logger = ProcessingLogger(self.logger)
        self.offsetter = PolygonOffsetter(config.offset, self.logger)
        self.resolver = LayerResolver(config.offset, self.offsetter, self.logger)
        self.matcher = PaletteMatcher(
            config.palette.shades,
            outline_width=config.palette.outline_width,
        )

    def process(
        self,
        layer: Layer,
        resolve: bool = True,
        min_length: float = 0.0,
        cancel_token: CancellationToken | None = None,
        progress_callback: Callable[[str, int, int], None] | None = None,
    ) -> ProcessingStats:
        """Run the pipeline over a layer, editing it in place.

        Args:
            layer: Layer to process
            resolve: Resolve overlaps between items
            min_length: Drop paths with a shorter outline (0 = keep all)
            cancel_token: Optional token for cooperative cancellation
            progress_callback: Optional callback(stage, completed, total)

        Returns:
            ProcessingStats with counts, timings and error details

        Raises:
            ProcessingCancelledError: If the token was cancelled
            PaletteError: If the configured palette cannot serve the request
        """
        self.processing_logger = ProcessingLogger(self.logger)
        stats = self.processing_logger.stats
        stats.start_time = time.time()
        stats.input_count = len(layer)

        self.logger.info(
            "Starting layer processing",
            layer=layer.name,
            items=len(layer),
            thin=self.config.thin_features.amount,
            outline=self.config.palette.outline,
        )

        stages: list[tuple[str, Callable[[], None]]] = []
        if min_length > 0:
            stages.append(("cull", lambda: self._cull(layer, min_length)))
        if self.config.thin_features.amount > 0:
            stages.append(("thin_features", lambda: self._thin_features(layer)))
        if resolve:
            stages.append(("resolve", lambda: self._resolve(layer, cancel_token)))
        stages.append(("color", lambda: self._color(layer)))

        total = len(stages)
        for completed, (stage, run) in enumerate(stages):
            if cancel_token is not None and cancel_token.is_cancelled:
                self.processing_logger.log_cancelled(stage, completed, total - completed)
                stats.end_time = time.time()
                raise ProcessingCancelledError(completed, total - completed)

            self.processing_logger.log_stage_start(stage, len(layer))
            stage_start = time.time()
            try:
                run()
            except ProcessingCancelledError as e:
                self.processing_logger.log_cancelled(stage, e.processed_count, e.pending_count)
                stats.end_time = time.time()
                raise
            except PancakePathError as e:
                self.processing_logger.log_stage_error(stage, e, traceback.format_exc())
                stats.end_time = time.time()
                raise

            self.processing_logger.log_stage_complete(
                stage,
                (time.time() - stage_start) * 1000,
                items=len(layer),
            )
            if progress_callback is not None:
                progress_callback(stage, completed + 1, total)

        stats.processed_count = sum(1 for _ in layer.iter_records()) - stats.outlines_added
        stats.end_time = time.time()

        self.logger.info(
            "Processing complete",
            processed=stats.processed_count,
            removed=stats.removed_count,
            outlines=stats.outlines_added,
            errors=stats.error_count,
            duration_seconds=round(stats.duration_seconds, 2),
        )
        return stats

    def _cull(self, layer: Layer, min_length: float) -> None:
        self.processing_logger.stats.removed_count += self.resolver.recursive_length_cull(
            layer, min_length
        )

    def _thin_features(self, layer: Layer) -> None:
        thin = self.config.thin_features
        before = len(layer)
        survivors = self.resolver.destroy_thin_features(
            layer,
            thin.amount,
            clone=thin.clone,
            resolution=thin.resolution,
        )
        self.processing_logger.stats.thin_removed_count += before - len(survivors)

    def _resolve(self, layer: Layer, cancel_token: CancellationToken | None) -> None:
        self.processing_logger.stats.removed_count += self.resolver.resolve_overlaps(
            layer, cancel_token
        )

    def _color(self, layer: Layer) -> None:
        palette = self.config.palette
        outlines = self.matcher.auto_color_layer(
            layer,
            limit=palette.limit,
            want_outline=palette.outline,
        )
        self.processing_logger.stats.outlines_added += len(outlines)
