#!/usr/bin/env python3
"""
Single Product Extraction

Extracts title, price and image for one product URL and prints a report
showing which source supplied each field.

Usage:
    python3 extract_single.py --url https://www.fnac.com/a1234567/produit
    python3 extract_single.py --url "Regarde ça https://amzn.eu/d/abc" --render
    python3 extract_single.py --url https://shop.example/p/1 --quick --deadline 2
"""

import argparse
import json
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from wishfill.common import (
    extract_url_from_text,
    load_fetch_settings,
    setup_logging,
    validate_url,
)
from wishfill.errors import ConfigError, InvalidURLError
from wishfill.extraction import MetadataOrchestrator, QuickAddExtractor
from wishfill.models import ExtractionReport, ProductMetadata

load_dotenv(Path(__file__).parent / ".env")


def print_report(metadata: ProductMetadata, report: ExtractionReport = None):
    """Print field-by-field extraction report."""

    print("\n" + "=" * 80)
    print("EXTRACTION REPORT")
    print("=" * 80)

    url = report.url if report else ""
    if url:
        print(f"\nProduct URL: {url}")

    title = metadata.title or ""
    fields = [
        ("Title", title[:70] + "..." if len(title) > 70 else title,
         report.title_source if report else ""),
        ("Price", f"{metadata.price} €" if metadata.price is not None else "",
         report.price_source if report else ""),
        ("Image", f"{len(metadata.image)} bytes JPEG" if metadata.image else "",
         report.image_source if report else ""),
    ]

    print("\nFIELDS:")
    for label, value, source in fields:
        status = "OK" if value else "MISSING"
        origin = f"  ({source})" if source and value else ""
        print(f"  [{status:7}] {label:10} {value or 'MISSING'}{origin}")

    if report is not None:
        print("\n" + "-" * 80)
        print("DETAILS")
        print("-" * 80)
        if report.image_url:
            print(f"\n  Image URL:        {report.image_url}")
        print(f"  Rendering proxy:  {'yes' if report.used_rendering_proxy else 'no'}")
        print(f"  Link preview:     {'yes' if report.used_link_preview else 'no'}")
        print(f"  Final state:      {report.state.value}")
        if report.cancelled:
            print("  Cancelled before completion")

        if report.rejected_prices:
            print(f"\nREJECTED PRICE TOKENS ({len(report.rejected_prices)}):")
            for raw in report.rejected_prices[:10]:
                print(f"  - {raw}")

    print("\n" + "=" * 80)


def main():
    parser = argparse.ArgumentParser(
        description="Extract product metadata from a single URL"
    )
    parser.add_argument(
        "--url",
        required=True,
        help="Product URL, or shared text containing one"
    )
    parser.add_argument(
        "--render",
        action="store_true",
        help="Fetch through the rendering proxy (needs WISHFILL_RENDERING_PROXY_API_KEY)"
    )
    parser.add_argument(
        "--quick",
        action="store_true",
        help="Quick-add mode: stop at the deadline and fall back to a URL-derived title"
    )
    parser.add_argument(
        "--deadline",
        type=float,
        help="Quick-add deadline in seconds (default from config)"
    )
    parser.add_argument(
        "--no-preview",
        action="store_true",
        help="Disable the link-preview fallback"
    )
    parser.add_argument(
        "--save-image",
        help="Write the downsized JPEG to this path"
    )
    parser.add_argument(
        "--output-json",
        help="Write the result as JSON to this path"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress info messages, show only warnings and errors"
    )

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    # Shared text ("Look at this https://...") is accepted too
    raw_url = extract_url_from_text(args.url) or args.url
    try:
        url = validate_url(raw_url)
    except InvalidURLError as e:
        print(f"\nError: {e}")
        sys.exit(2)

    print(f"URL: {url}")

    try:
        settings = load_fetch_settings()
    except (ConfigError, FileNotFoundError) as e:
        print(f"\nConfiguration error: {e}")
        sys.exit(1)

    if args.no_preview:
        settings.link_preview.enabled = False

    report = None
    if args.quick:
        metadata = QuickAddExtractor(settings=settings).fetch(url, deadline=args.deadline, render=args.render)
    else:
        with MetadataOrchestrator(settings=settings) as orchestrator:
            metadata, report = orchestrator.extract(url, render=args.render)

    if report is None:
        report = ExtractionReport(url=url)
    print_report(metadata, report)

    if args.save_image and metadata.image:
        directory = os.path.dirname(args.save_image)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(args.save_image, 'wb') as f:
            f.write(metadata.image)
        print(f"\nImage saved to: {args.save_image}")

    if args.output_json:
        output_data = {
            "url": url,
            "title": metadata.title,
            "price": str(metadata.price) if metadata.price is not None else None,
            "image_bytes": len(metadata.image) if metadata.image else 0,
            "sources": {
                "title": report.title_source,
                "price": report.price_source,
                "image": report.image_source,
            },
            "image_url": report.image_url,
            "used_rendering_proxy": report.used_rendering_proxy,
            "used_link_preview": report.used_link_preview,
        }
        directory = os.path.dirname(args.output_json)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(args.output_json, 'w', encoding='utf-8') as f:
            json.dump(output_data, f, indent=2, ensure_ascii=False)
        print(f"\nResults saved to: {args.output_json}")

    sys.exit(1 if metadata.is_empty else 0)


if __name__ == "__main__":
    main()
