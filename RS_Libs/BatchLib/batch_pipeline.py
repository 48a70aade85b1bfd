"""
Batch Pipeline for Raster Studio.

Applies one operation to a queue of images. Every item runs through the
same stages, decode -> transform -> encode -> emit, and a failure in any
stage marks only that item as failed; the run always continues with the
next item. Items can run sequentially or on a thread pool.

Classes:
    BatchStatus: Lifecycle state of a queued item
    BatchItem: One queued source image
    BatchResult: Outcome of processing one item
    BatchProgress: Progress notification sent after each item
    BatchReport: Aggregate outcome of a run
    BatchPipeline: The queue and its runner

Example:
    >>> pipeline = BatchPipeline()
    >>> pipeline.add(Path("photos/a.jpg"))
    >>> pipeline.add(png_bytes, item_id="upload-2")
    >>> report = pipeline.run(
    ...     GrayscaleParams(intensity=1.0),
    ...     output_format="JPEG",
    ...     quality=0.85,
    ...     progress_callback=lambda p: print(f"{p.fraction:.0%}"),
    ...     output_dir="out",
    ... )
    >>> report.completed, report.failed
    (2, 0)
"""

import concurrent.futures
import itertools
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from RS_Libs.BatchLib.operation_registry import OperationRegistry, apply_transform
from RS_Libs.constants import BATCH_FILENAME_TEMPLATE, DEFAULT_OUTPUT_FORMAT, DEFAULT_QUALITY
from RS_Libs.ImageEditingLib.codec_adapter import OutputFormat, decode, encode
from RS_Libs.ImageEditingLib.image_models import CompressParams, params_from_dict

logger = logging.getLogger(__name__)

BatchSource = Union[bytes, bytearray, memoryview, str, Path, Callable[[], bytes]]


class BatchStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    DONE = "done"
    FAILED = "failed"


@dataclass
class BatchItem:
    """A queued source image.

    Attributes:
        item_id: Unique identifier within the pipeline
        source: Encoded bytes, a file path, or a zero-argument callable
                returning encoded bytes
        status: Current lifecycle state
        error: Failure message once the item has failed
    """
    item_id: str
    source: Any
    status: BatchStatus = BatchStatus.PENDING
    error: Optional[str] = None

    def read_source(self) -> bytes:
        """
        Resolve the source to encoded bytes.

        Raises:
            OSError: If a path cannot be read
            TypeError: If the source is of an unsupported type
        """
        source = self.source
        if isinstance(source, (bytes, bytearray, memoryview)):
            return bytes(source)
        if isinstance(source, (str, Path)):
            return Path(source).read_bytes()
        if callable(source):
            return bytes(source())
        raise TypeError(f"Unsupported batch source type: {type(source).__name__}")


@dataclass(frozen=True)
class BatchResult:
    """Outcome of one item. data and filename are set only on success."""
    item_id: str
    index: int
    status: BatchStatus
    data: Optional[bytes] = None
    filename: Optional[str] = None
    output_path: Optional[Path] = None
    error: Optional[str] = None
    error_type: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status is BatchStatus.DONE


@dataclass(frozen=True)
class BatchProgress:
    """Sent after each item finishes; completed counts successes and failures."""
    completed: int
    total: int
    item: BatchResult

    @property
    def fraction(self) -> float:
        return self.completed / self.total if self.total else 1.0


@dataclass
class BatchReport:
    """Results of a run, in submission order."""
    results: List[BatchResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def completed(self) -> int:
        return sum(1 for r in self.results if r.status is BatchStatus.DONE)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.status is BatchStatus.FAILED)

    def failures(self) -> List[BatchResult]:
        return [r for r in self.results if r.status is BatchStatus.FAILED]


ProgressCallback = Callable[[BatchProgress], None]


def batch_filename(operation: str, index: int, output_format: OutputFormat) -> str:
    """Output file name for the index-th (1-based) item of a run."""
    return BATCH_FILENAME_TEMPLATE.format(operation=operation, index=index, ext=output_format.extension)


def resolve_quality(params: Any, output_format: OutputFormat, quality: float) -> float:
    """
    Encode quality for a run.

    Compression uses its own quality, lossy formats use the caller's quality
    and PNG ignores quality entirely. WEBP honours the caller's quality,
    unlike hosts that only pass quality through for JPEG.
    """
    if isinstance(params, CompressParams):
        return params.clamped().quality
    if output_format is OutputFormat.PNG:
        return 1.0
    return quality


class BatchPipeline:
    """
    Queue of images processed with a single operation.

    Items are added with add() and processed by run(). The queue is emptied
    once a run finishes; the BatchItem objects returned by add() keep their
    final status.
    """

    def __init__(self, registry: Optional[OperationRegistry] = None):
        self.registry = registry
        self._items: List[BatchItem] = []
        self._id_counter = itertools.count(1)

    @property
    def items(self) -> List[BatchItem]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def add(self, source: BatchSource, item_id: Optional[str] = None) -> BatchItem:
        """
        Queue a source image.

        Args:
            source: Encoded bytes, a file path, or a callable returning bytes
            item_id: Optional identifier; generated when omitted

        Returns:
            The queued BatchItem

        Raises:
            ValueError: If item_id is already queued
        """
        if item_id is None:
            item_id = f"item-{next(self._id_counter)}"
        item_id = str(item_id)

        if any(item.item_id == item_id for item in self._items):
            raise ValueError(f"Batch item '{item_id}' is already queued")

        item = BatchItem(item_id=item_id, source=source)
        self._items.append(item)
        logger.debug(f"Queued batch item {item_id}")
        return item

    def remove(self, item_id: str) -> bool:
        """Remove a queued item. Returns False if no such item is queued."""
        for index, item in enumerate(self._items):
            if item.item_id == str(item_id):
                del self._items[index]
                return True
        return False

    def clear(self) -> None:
        self._items.clear()

    def run(
        self,
        params: Union[Any, Dict[str, Any]],
        output_format: Union[str, OutputFormat] = DEFAULT_OUTPUT_FORMAT,
        quality: float = DEFAULT_QUALITY,
        progress_callback: Optional[ProgressCallback] = None,
        output_dir: Optional[Union[str, Path]] = None,
        use_threading: bool = False,
        max_workers: Optional[int] = None,
    ) -> BatchReport:
        """
        Process every queued item with one operation.

        Args:
            params: Operation parameters (dataclass or to_dict() dictionary)
            output_format: PNG, JPEG or WEBP
            quality: 0.0-1.0 for lossy formats
            progress_callback: Called after each item with a BatchProgress
            output_dir: If given, each encoded result is written there as
                        batch_<operation>_<n>.<ext>
            use_threading: Process items on a ThreadPoolExecutor
            max_workers: Maximum number of threads (default: executor default)

        Returns:
            BatchReport with per-item results in submission order

        Raises:
            ValueError: If output_format or the params dictionary is invalid
        """
        if isinstance(params, dict):
            params = params_from_dict(params)
        fmt = OutputFormat.from_value(output_format)
        quality = resolve_quality(params, fmt, quality)
        out_dir = Path(output_dir) if output_dir is not None else None

        items = list(self._items)
        total = len(items)
        results: List[Optional[BatchResult]] = [None] * total
        completed = 0

        logger.info(f"Starting batch '{params.operation}' on {total} item(s) as {fmt.value}")
        if out_dir is not None:
            out_dir.mkdir(parents=True, exist_ok=True)

        def notify(result: BatchResult) -> None:
            nonlocal completed
            completed += 1
            if progress_callback is not None:
                progress_callback(BatchProgress(completed=completed, total=total, item=result))

        try:
            if use_threading and total > 1:
                with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
                    futures: Dict[concurrent.futures.Future, int] = {}

                    for position, item in enumerate(items):
                        future = executor.submit(
                            self._process_item, position + 1, item, params, fmt, quality, out_dir
                        )
                        futures[future] = position

                    # Collect results as they complete
                    for future in concurrent.futures.as_completed(futures):
                        position = futures[future]
                        results[position] = future.result()
                        notify(results[position])
            else:
                for position, item in enumerate(items):
                    results[position] = self._process_item(position + 1, item, params, fmt, quality, out_dir)
                    notify(results[position])
        finally:
            self.clear()

        report = BatchReport(results=list(results))
        logger.info(
            f"Batch '{params.operation}' finished: {report.completed} completed, {report.failed} failed"
        )
        return report

    def _process_item(
        self,
        index: int,
        item: BatchItem,
        params: Any,
        fmt: OutputFormat,
        quality: float,
        out_dir: Optional[Path],
    ) -> BatchResult:
        """Run one item through decode -> transform -> encode -> emit."""
        item.status = BatchStatus.PROCESSING
        filename = batch_filename(params.operation, index, fmt)

        try:
            buf = decode(item.read_source())
            transformed = apply_transform(buf, params, self.registry)
            data = encode(transformed, fmt, quality)

            output_path = None
            if out_dir is not None:
                output_path = out_dir / filename
                output_path.write_bytes(data)
        except Exception as e:
            item.status = BatchStatus.FAILED
            item.error = str(e)
            logger.warning(f"Batch item {item.item_id} failed: {type(e).__name__}: {str(e)}")
            return BatchResult(
                item_id=item.item_id,
                index=index,
                status=BatchStatus.FAILED,
                error=str(e),
                error_type=type(e).__name__,
            )

        item.status = BatchStatus.DONE
        logger.debug(f"Batch item {item.item_id} done ({len(data)} bytes)")
        return BatchResult(
            item_id=item.item_id,
            index=index,
            status=BatchStatus.DONE,
            data=data,
            filename=filename,
            output_path=output_path,
        )
