"""
Operation Registry.

This module provides a centralized registry of image operations. Each
operation name (the `operation` of its parameter dataclass) maps to an
executor that takes (buffer, params) and returns a new buffer. The batch
pipeline and hosts dispatch through apply_transform().

Classes:
    OperationRegistry: Registry for operation executors

Functions:
    get_default_registry: Get the global default registry (singleton)
    register_default_operations: Register all built-in operations
    operation_executor: Decorator registering a function with the default registry
    apply_transform: Run the operation matching a parameter object
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Union

from RS_Libs.ImageEditingLib.image_models import params_from_dict
from RS_Libs.ImageEditingLib.raster_buffer import RasterBuffer

logger = logging.getLogger(__name__)

# Executor signature: (buffer, params) -> buffer
OperationExecutor = Callable[[RasterBuffer, Any], RasterBuffer]


class OperationRegistry:
    """
    Registry for image operation executors.

    Example:
        >>> registry = OperationRegistry()
        >>> registry.register("blur", lambda buf, p: box_blur(buf, p.radius), BlurParams)
        >>> result = registry.execute("blur", buf, BlurParams(radius=3))
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._executors: Dict[str, OperationExecutor] = {}
        self._metadata: Dict[str, Dict[str, Any]] = {}

    def register(
        self,
        operation: str,
        executor: OperationExecutor,
        params_type: Optional[type] = None,
        description: str = "",
        tags: Optional[List[str]] = None,
    ) -> None:
        """
        Register an operation executor.

        Args:
            operation: Unique operation name (e.g., "resize")
            executor: Callable accepting (buffer, params)
            params_type: Parameter dataclass the executor expects, if any
            description: Human-readable description
            tags: Optional categorization tags (e.g., ["geometry"])

        Raises:
            ValueError: If operation is empty or executor is not callable
            RuntimeError: If operation is already registered
        """
        operation = str(operation).strip()

        if not operation:
            raise ValueError("operation cannot be empty")

        if not callable(executor):
            raise ValueError(f"executor must be callable, got {type(executor)}")

        if operation in self._executors:
            raise RuntimeError(
                f"Operation '{operation}' is already registered. "
                f"Use unregister() first to replace it."
            )

        self._executors[operation] = executor
        self._metadata[operation] = {
            "description": str(description),
            "params_type": params_type.__name__ if params_type is not None else None,
            "tags": list(tags) if tags else [],
        }

        logger.debug(f"Registered executor for operation: {operation}")

    def unregister(self, operation: str) -> bool:
        """
        Unregister an operation.

        Returns:
            True if unregistered, False if it was not registered
        """
        operation = str(operation).strip()

        if operation in self._executors:
            del self._executors[operation]
            del self._metadata[operation]
            logger.debug(f"Unregistered executor for operation: {operation}")
            return True

        return False

    def get_executor(self, operation: str) -> OperationExecutor:
        """
        Get the executor for an operation.

        Raises:
            KeyError: If operation is not registered
        """
        operation = str(operation).strip()

        if operation not in self._executors:
            available = ", ".join(self.list_operations())
            raise KeyError(
                f"No executor registered for operation '{operation}'. "
                f"Available operations: {available}"
            )

        return self._executors[operation]

    def has_operation(self, operation: str) -> bool:
        return str(operation).strip() in self._executors

    def execute(self, operation: str, buf: RasterBuffer, params: Any) -> RasterBuffer:
        """
        Execute an operation by looking up its executor.

        Raises:
            KeyError: If operation is not registered
            Exception: Any exception raised by the executor
        """
        executor = self.get_executor(operation)
        return executor(buf, params)

    def list_operations(self) -> List[str]:
        """Sorted list of registered operation names."""
        return sorted(self._executors.keys())

    def get_metadata(self, operation: str) -> Dict[str, Any]:
        """
        Get metadata for an operation.

        Returns:
            Dictionary with description, params_type, tags

        Raises:
            KeyError: If operation is not registered
        """
        operation = str(operation).strip()

        if operation not in self._metadata:
            raise KeyError(f"No metadata for operation: {operation}")

        return dict(self._metadata[operation])

    def filter_by_tag(self, tag: str) -> List[str]:
        """Sorted operation names carrying a tag (case-insensitive)."""
        tag = str(tag).strip().lower()
        return sorted([
            operation
            for operation, meta in self._metadata.items()
            if tag in [t.lower() for t in meta.get("tags", [])]
        ])

    def clear(self) -> None:
        """Clear all registered executors. Use with caution."""
        self._executors.clear()
        self._metadata.clear()
        logger.warning("Operation registry cleared")


# Global singleton registry
_default_registry: Optional[OperationRegistry] = None


def get_default_registry() -> OperationRegistry:
    """
    Get the global default registry (singleton).

    Creates the registry on first call and registers the built-in operations.
    """
    global _default_registry

    if _default_registry is None:
        _default_registry = OperationRegistry()
        register_default_operations(_default_registry)

    return _default_registry


def register_default_operations(registry: OperationRegistry) -> None:
    """
    Register every built-in operation.

    Args:
        registry: The registry to register executors with
    """
    from RS_Libs.ImageEditingLib import geometric_ops, pixel_filters
    from RS_Libs.ImageEditingLib.image_models import (
        BlurParams,
        ColorAdjustParams,
        CompressParams,
        ConvertParams,
        CropParams,
        FilterParams,
        FlipParams,
        GrayscaleParams,
        PixelateParams,
        ResizeParams,
        RotateParams,
        WatermarkParams,
    )
    from RS_Libs.ImageEditingLib.watermark_compositor import composite_watermark

    registry.register(
        ResizeParams.operation,
        lambda buf, p: geometric_ops.resize(buf, p.target_width, p.target_height, p.mode),
        ResizeParams,
        description="Resize to a target size (fit, fill or stretch)",
        tags=["geometry"],
    )
    registry.register(
        CropParams.operation,
        lambda buf, p: geometric_ops.crop(buf, p.x, p.y, p.width, p.height),
        CropParams,
        description="Crop to a rectangular window",
        tags=["geometry"],
    )
    registry.register(
        RotateParams.operation,
        lambda buf, p: geometric_ops.rotate(buf, p.angle_degrees),
        RotateParams,
        description="Rotate clockwise about the centre, expanding the canvas",
        tags=["geometry"],
    )
    registry.register(
        FlipParams.operation,
        lambda buf, p: geometric_ops.flip(buf, p.horizontal, p.vertical),
        FlipParams,
        description="Mirror horizontally and/or vertically",
        tags=["geometry"],
    )
    registry.register(
        BlurParams.operation,
        lambda buf, p: pixel_filters.box_blur(buf, p.radius),
        BlurParams,
        description="Box blur with edge replication",
        tags=["filter", "neighbourhood"],
    )
    registry.register(
        PixelateParams.operation,
        lambda buf, p: pixel_filters.pixelate(buf, p.block_size),
        PixelateParams,
        description="Replace tiles with their mean colour",
        tags=["filter", "neighbourhood"],
    )
    registry.register(
        GrayscaleParams.operation,
        lambda buf, p: pixel_filters.grayscale(buf, p.intensity),
        GrayscaleParams,
        description="Blend towards luminance",
        tags=["filter", "color"],
    )
    registry.register(
        FilterParams.operation,
        lambda buf, p: pixel_filters.apply_filter(buf, p.kind),
        FilterParams,
        description="Sepia, invert or saturate",
        tags=["filter", "color"],
    )
    registry.register(
        ColorAdjustParams.operation,
        lambda buf, p: pixel_filters.color_adjust(buf, p.brightness, p.contrast, p.saturation),
        ColorAdjustParams,
        description="Contrast, brightness and saturation",
        tags=["filter", "color"],
    )
    registry.register(
        WatermarkParams.operation,
        composite_watermark,
        WatermarkParams,
        description="Draw a text or image watermark",
        tags=["composition"],
    )
    registry.register(
        ConvertParams.operation,
        lambda buf, p: buf.copy(),
        ConvertParams,
        description="Pass through; only the output format changes",
        tags=["output"],
    )
    registry.register(
        CompressParams.operation,
        lambda buf, p: buf.copy(),
        CompressParams,
        description="Pass through; re-encoded at the requested quality",
        tags=["output"],
    )

    logger.info("Registered default operations")


def operation_executor(
    operation: str,
    params_type: Optional[type] = None,
    description: str = "",
    tags: Optional[List[str]] = None,
) -> Callable:
    """
    Decorator to register an executor function with the default registry.

    Usage:
        >>> @operation_executor("posterize", description="Reduce colour levels", tags=["custom"])
        >>> def posterize(buf, params):
        ...     return ...
    """
    def decorator(func: OperationExecutor) -> OperationExecutor:
        registry = get_default_registry()

        try:
            registry.register(
                operation,
                func,
                params_type,
                description=description,
                tags=tags or [],
            )
        except RuntimeError:
            logger.debug(f"Operation '{operation}' already registered, skipping")

        return func

    return decorator


def apply_transform(
    buf: RasterBuffer,
    params: Union[Any, Dict[str, Any]],
    registry: Optional[OperationRegistry] = None,
) -> RasterBuffer:
    """
    Apply the operation described by a parameter object.

    Args:
        buf: Source buffer (never modified)
        params: A parameter dataclass, or a dictionary from its to_dict()
        registry: Registry to dispatch through; defaults to the global one

    Returns:
        New RasterBuffer

    Raises:
        TypeError: If params carries no operation name
        KeyError: If the operation is not registered
        ImageProcessingError: Whatever the operation raises
    """
    if isinstance(params, dict):
        params = params_from_dict(params)

    operation = getattr(params, "operation", None)
    if not operation:
        raise TypeError(f"Expected operation parameters, got {type(params).__name__}")

    registry = registry or get_default_registry()
    return registry.execute(operation, buf, params)
