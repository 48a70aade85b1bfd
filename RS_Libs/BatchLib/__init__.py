"""
BatchLib - Operation dispatch and batch processing

Provides the operation registry used to dispatch transforms by name and the
batch pipeline that applies one operation to a queue of images.
"""

from RS_Libs.BatchLib.operation_registry import (
    OperationRegistry,
    apply_transform,
    get_default_registry,
    operation_executor,
    register_default_operations,
)
from RS_Libs.BatchLib.batch_pipeline import (
    BatchItem,
    BatchPipeline,
    BatchProgress,
    BatchReport,
    BatchResult,
    BatchStatus,
    batch_filename,
    resolve_quality,
)

__all__ = [
    "OperationRegistry",
    "apply_transform",
    "get_default_registry",
    "operation_executor",
    "register_default_operations",
    "BatchItem",
    "BatchPipeline",
    "BatchProgress",
    "BatchReport",
    "BatchResult",
    "BatchStatus",
    "batch_filename",
    "resolve_quality",
]
