"""
Batch processing and crop session walkthrough.

Builds a few synthetic images, runs them through the batch pipeline
(sequentially and on a thread pool) and drives a crop session with
simulated pointer events.

Usage:
    python examples/batch_demo.py [output_dir]
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import tempfile
import time

from RS_Libs import configure_logging
from RS_Libs.BatchLib import BatchPipeline, apply_transform
from RS_Libs.CropLib import CropSession
from RS_Libs.ImageEditingLib import (
    ColorAdjustParams,
    CropParams,
    RasterBuffer,
    TextContent,
    WatermarkParams,
    apply_filter,
    encode,
)


def make_sample_images(count=4):
    """Encode a handful of coloured PNGs."""
    images = []
    for index in range(count):
        buf = RasterBuffer.solid(640 + index * 40, 480, (40 * index, 120, 255 - 40 * index, 255))
        images.append(encode(apply_filter(buf, "saturate"), "PNG"))
    return images


def example_batch(output_dir):
    """Example: Watermark a batch, with one broken upload."""
    print("=" * 60)
    print("Example 1: Batch watermarking")
    print("=" * 60)

    pipeline = BatchPipeline()
    for data in make_sample_images():
        pipeline.add(data)
    pipeline.add(b"this is not an image", item_id="broken-upload")

    params = WatermarkParams(content=TextContent("© 2025", 36), x=20, y=460, opacity=0.6)

    def on_progress(progress):
        status = progress.item.status.value
        print(f"  [{progress.fraction:4.0%}] {progress.item.item_id}: {status}")

    start = time.time()
    report = pipeline.run(params, "JPEG", 0.85, progress_callback=on_progress, output_dir=output_dir)
    print(f"Completed: {report.completed}, failed: {report.failed} ({time.time() - start:.3f}s)")
    for failure in report.failures():
        print(f"  {failure.item_id}: {failure.error_type}: {failure.error}")
    print()


def example_threaded(output_dir):
    """Example: Same pipeline on a thread pool."""
    print("=" * 60)
    print("Example 2: Threaded colour adjustment")
    print("=" * 60)

    pipeline = BatchPipeline()
    for data in make_sample_images(8):
        pipeline.add(data)

    start = time.time()
    report = pipeline.run(
        ColorAdjustParams(brightness=10, contrast=25, saturation=-30),
        "WEBP",
        0.8,
        output_dir=output_dir,
        use_threading=True,
    )
    print(f"Completed: {report.completed} in {time.time() - start:.3f}s")
    print(f"Files: {', '.join(r.filename for r in report.results)}")
    print()


def example_crop_session():
    """Example: Drag a locked 16:9 crop box and apply it."""
    print("=" * 60)
    print("Example 3: Crop session")
    print("=" * 60)

    source = RasterBuffer.solid(1920, 1080, (90, 90, 90, 255))
    session = CropSession()
    session.load_image(source.width, source.height)
    session.set_aspect_ratio("16:9")
    print(f"Display scale: {session.display_scale:.4f}")

    handle = session.on_pointer_down(595, 335)
    print(f"Grabbed handle: {handle} (cursor {session.hover_cursor(595, 335)})")
    for x, y in ((560, 320), (500, 300), (450, 260)):
        box = session.on_pointer_move(x, y)
        print(f"  box -> x={box.x:.1f} y={box.y:.1f} w={box.width:.1f} h={box.height:.1f}")
    session.on_pointer_up()

    x, y, width, height = session.crop_window()
    cropped = apply_transform(source, CropParams(x, y, width, height))
    print(f"Cropped image: {cropped.width}x{cropped.height}")
    print()


if __name__ == "__main__":
    configure_logging()
    if len(sys.argv) > 1:
        target = Path(sys.argv[1])
        example_batch(target)
        example_threaded(target)
    else:
        with tempfile.TemporaryDirectory() as temp_dir:
            example_batch(Path(temp_dir))
            example_threaded(Path(temp_dir))
    example_crop_session()
