from __future__ import annotations

import argparse
import os
from pathlib import Path


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse CLI arguments for the smoke runner."""
    parser = argparse.ArgumentParser(description="Soundboard admin smoke runner")
    parser.add_argument("--base-url", default=os.getenv("BASE_URL", "http://127.0.0.1:8000"))
    parser.add_argument("--password", default=os.getenv("ADMIN_PASSWORD", ""))
    parser.add_argument("--fixtures", default=str(Path(__file__).resolve().parents[1] / "fixtures"))
    parser.add_argument("--timeout", type=float, default=20.0, help="seconds to wait for /health")
    parser.add_argument(
        "--use-header",
        action="store_true",
        help="authenticate with the legacy x-admin-password header instead of the session cookie",
    )
    parser.add_argument(
        "--keep",
        action="store_true",
        help="leave uploaded fixtures and the smoke config in place instead of restoring the original",
    )
    return parser.parse_args(argv)
