"""
Capture a web page from the command line.

Usage:
    python capture_screenshot.py <url> [--device desktop|mobile] [--mode pdf|image] [-o output]

Example:
    python capture_screenshot.py https://example.com --device mobile --mode image
"""
import os
import sys
import asyncio
import logging
import argparse

# only needed for un-installed script runs from a checkout
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), 'backend'))

from services.capture_service import CaptureService
from services.errors import CaptureError
from services.models import CaptureRequest, OutputMode

logger = logging.getLogger("capture_screenshot")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Capture a web page as a paginated PDF or a full-page JPEG.")
    ap.add_argument("url", help="Page to capture (https:// is added when missing)")
    ap.add_argument("--device", default="desktop", choices=["desktop", "mobile"])
    ap.add_argument("--mode", default=OutputMode.PAGINATED_DOCUMENT.value,
                    choices=[m.value for m in OutputMode])
    ap.add_argument("-o", "--output", default=None,
                    help="Output file (defaults to capture.pdf / capture.jpg)")
    return ap


def build_request(args: argparse.Namespace) -> CaptureRequest:
    return CaptureRequest.create(args.url, device=args.device, mode=args.mode)


async def run(args: argparse.Namespace, service: CaptureService = None) -> str:
    request = build_request(args)
    service = service or CaptureService()
    document = await service.capture(request)
    output_path = args.output or document.filename
    with open(output_path, "wb") as f:
        f.write(document.data)
    return output_path


def main(argv=None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    args = build_parser().parse_args(argv)
    try:
        output_path = asyncio.run(run(args))
    except CaptureError as e:
        logger.error(e.message)
        return 1
    print(f"Saved: {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
