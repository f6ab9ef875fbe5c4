"""Exception and warning hierarchy for Isomill."""


class IsomillError(Exception):
    """Base exception for all Isomill errors."""

    pass


class GeometryError(IsomillError):
    """Errors related to the working geometry."""

    pass


class SelfIntersectionError(GeometryError):
    """Input geometry self-intersects or has overlapping regions."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Input geometry is self-intersecting: {reason}")


class SurfaceNotRenderedError(GeometryError):
    """Operation requires a rendered surface."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Cannot {operation}: surface has not been rendered yet")


class GeometryImportError(IsomillError):
    """Error importing geometry from a source file or object."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to import geometry from '{source}': {reason}")


class MaskError(IsomillError):
    """Errors related to surface masking."""

    pass


class IncompatibleMaskError(MaskError):
    """Mask is not a region surface sharing the same geometry model."""

    def __init__(self, type_name: str, reason: str = "a RegionSurface is required") -> None:
        self.type_name = type_name
        self.reason = reason
        super().__init__(f"Cannot use '{type_name}' as a mask: {reason}")


class MaskUnavailableError(MaskError):
    """Attached mask surface no longer exists."""

    def __init__(self) -> None:
        super().__init__("Mask surface was released before toolpath generation")


class IsomillWarning(UserWarning):
    """Base class for non-fatal Isomill conditions."""

    pass


class ClearanceContention(IsomillWarning):
    """Some passes were clipped short of the requested tool clearance.

    Raised at most once per generation, after all regions were processed.
    """

    def __init__(self, clipped_passes: int) -> None:
        self.clipped_passes = clipped_passes
        super().__init__(
            "Could not fulfill all clearance requirements and used a best effort "
            f"approach instead ({clipped_passes} clipped passes). You may want to "
            "check the output and possibly use a smaller milling width."
        )
