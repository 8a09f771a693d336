"""Command-line interface for the fertilizer and disease services.

Examples:
    python -m src.fertify_client check
    python -m src.fertify_client set-url 192.168.1.20
    python -m src.fertify_client fertilizer --ph 6.5 --nitrogen 40 ...
    python -m src.fertify_client disease leaf.jpg
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import ClientSettings
from .dispatcher import DispatchResult, RequestDispatcher
from .imaging import encode_image_base64
from .models import FertilizerRequest
from .storage import DEFAULT_SETTINGS_FILE, SettingsStore

logger = logging.getLogger(__name__)

SOIL_TYPES = ["Sandy", "Loamy", "Clay", "Silt"]


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Client for the fertilizer recommendation and plant disease services"
    )
    parser.add_argument(
        "--settings-file",
        type=Path,
        default=DEFAULT_SETTINGS_FILE,
        help="Where the saved API address is kept",
    )
    parser.add_argument(
        "--api-url",
        type=str,
        default=None,
        help="Base address for this run only (overrides the saved one)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("check", help="Check both services are reachable")
    subparsers.add_parser("show-config", help="Print the resolved endpoints")
    subparsers.add_parser("clear-url", help="Forget the saved API address")

    set_url = subparsers.add_parser("set-url", help="Save the API address (your computer's IP)")
    set_url.add_argument("url", type=str)

    fertilizer = subparsers.add_parser("fertilizer", help="Get a fertilizer recommendation")
    fertilizer.add_argument("--ph", type=float, required=True)
    fertilizer.add_argument("--nitrogen", type=float, required=True)
    fertilizer.add_argument("--phosphorus", type=float, required=True)
    fertilizer.add_argument("--potassium", type=float, required=True)
    fertilizer.add_argument("--temperature", type=float, required=True)
    fertilizer.add_argument("--humidity", type=float, required=True)
    fertilizer.add_argument("--moisture", type=float, required=True)
    fertilizer.add_argument("--soil-type", type=str, required=True, choices=SOIL_TYPES)
    fertilizer.add_argument("--crop-type", type=str, required=True)

    disease = subparsers.add_parser("disease", help="Diagnose a plant leaf photo")
    disease.add_argument("image", type=Path)
    disease.add_argument(
        "--upload",
        action="store_true",
        help="Send the file as multipart upload instead of base64 JSON",
    )

    return parser


def print_result(result: DispatchResult) -> int:
    if result.ok:
        print(json.dumps(result.data, indent=2))
        return 0

    error = result.error
    print(f"✗ {error.message}")
    if error.detail:
        print(f"  Details: {error.detail}")
    print(f"  URL: {error.url}")
    return 1


def run_check(dispatcher: RequestDispatcher) -> int:
    results = dispatcher.check_all_services()
    exit_code = 0
    for service, probe in results.items():
        if probe.reachable:
            print(
                f"✓ {service}: Connected ({probe.http_status}, "
                f"{probe.latency_ms:.0f}ms, {probe.latency_classification}) {probe.url}"
            )
        else:
            exit_code = 1
            print(f"✗ {service}: Failed ({probe.status.value}) {probe.url}")
            print(f"  Error: {probe.error or 'Unknown connection error'}")
    return exit_code


def run_show_config(dispatcher: RequestDispatcher) -> int:
    registry = dispatcher.registry
    print(f"Primary: {registry.primary_base}")
    print(f"Fallbacks: {', '.join(registry.fallback_bases) or '(none)'}")
    for service in registry.config.service_paths:
        print(f"  {service}: {registry.resolve_url(service)}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    store = SettingsStore(args.settings_file)
    store.load()

    if args.command == "set-url":
        store.set_api_url(args.url)
        print(f"✓ API URL set to: {args.url.strip()}")
        return 0
    if args.command == "clear-url":
        store.clear()
        print("✓ Saved API URL cleared")
        return 0

    settings = ClientSettings.from_env()
    with RequestDispatcher(settings=settings) as dispatcher:
        saved_url = store.get_api_url()
        if args.api_url:
            dispatcher.set_override_base(args.api_url)
        elif saved_url:
            logger.info(f"Using saved API URL: {saved_url}")
            dispatcher.set_override_base(saved_url)

        if args.command == "check":
            return run_check(dispatcher)
        if args.command == "show-config":
            return run_show_config(dispatcher)

        if args.command == "fertilizer":
            request = FertilizerRequest(
                ph=args.ph,
                nitrogen=args.nitrogen,
                phosphorus=args.phosphorus,
                potassium=args.potassium,
                temperature=args.temperature,
                humidity=args.humidity,
                moisture=args.moisture,
                territory_type=args.soil_type,
                crop_type=args.crop_type,
            )
            return print_result(dispatcher.submit_structured_request(request))

        if args.command == "disease":
            if not args.image.exists():
                logger.error(f"Image not found: {args.image}")
                return 1
            if args.upload:
                return print_result(dispatcher.submit_image_file(args.image))
            return print_result(dispatcher.submit_image_request(encode_image_base64(args.image)))

    parser.error(f"Unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
