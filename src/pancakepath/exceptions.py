"""Exception hierarchy for PancakePath."""


class PancakePathError(Exception):
    """Base exception for all PancakePath errors."""

    pass


class GeometryError(PancakePathError):
    """Errors in geometric calculations."""

    pass


class ContourError(GeometryError):
    """Error with contour data or operations."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class FlattenError(GeometryError):
    """A path could not be flattened into polygons."""

    def __init__(self, shape_name: str | None, reason: str) -> None:
        self.shape_name = shape_name
        self.reason = reason
        label = shape_name or "<unnamed>"
        super().__init__(f"Failed to flatten '{label}': {reason}")


class PathDataError(PancakePathError):
    """Invalid SVG path description string."""

    def __init__(self, path_data: str, reason: str) -> None:
        self.path_data = path_data
        self.reason = reason
        preview = path_data if len(path_data) <= 40 else path_data[:37] + "..."
        super().__init__(f"Invalid path data '{preview}': {reason}")


class PaletteError(PancakePathError):
    """Errors related to palette construction or matching."""

    pass


class LayoutError(PancakePathError, ValueError):
    """Unsupported duplication layout request."""

    def __init__(self, count: int) -> None:
        self.count = count
        super().__init__(f"Unsupported copy count {count}: expected 1, 2, 4 or 8")


class SVGError(PancakePathError):
    """Errors related to SVG document loading or saving."""

    pass


class SVGLoadError(SVGError):
    """Error loading an SVG document."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load SVG '{path}': {reason}")


class SVGSaveError(SVGError):
    """Error saving an SVG document."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save SVG '{path}': {reason}")


class RasterExportError(PancakePathError):
    """Error rasterizing an item for export."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Raster export failed: {reason}")


class ProcessingCancelledError(PancakePathError):
    """Processing was cancelled by user."""

    def __init__(self, processed_count: int, pending_count: int) -> None:
        self.processed_count = processed_count
        self.pending_count = pending_count
        super().__init__(
            f"Processing cancelled: {processed_count} completed, {pending_count} pending"
        )
