#!/usr/bin/env python3
"""End-to-end smoke run of the admin flow against a live server.

Steps:
- wait for server health
- log in (session cookie, or the legacy header with --use-header)
- upload every fixture in one batch (tolerates per-file rejections)
- check the stored files are listed and playable
- write a config that references them and read it back
- clean up: delete the uploads and put back the config found at the start
- log out and confirm the cleared client is no longer admitted
- emit a compact summary and exit code
"""
from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import httpx

from runner.cli import parse_args
from runner.client import AdminClient, wait_for_health
from runner.types import SmokeError, SmokeReport, now_ms
from runner.utils import build_config, collect_fixtures, summarize
from soundboard.logging_conf import get_logger, setup_logging

setup_logging()
logger = get_logger("runner")


async def run_smoke(
    *,
    base_url: str,
    password: str,
    fixtures_dir: Path,
    timeout_s: float = 20.0,
    use_header: bool = False,
    keep: bool = False,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    report = SmokeReport(started_ms=now_ms())
    await wait_for_health(base_url, timeout_s, transport=transport)
    fixtures = collect_fixtures(fixtures_dir)

    async with AdminClient(base_url, password, use_header=use_header, transport=transport) as client:
        await client.login()
        report.checks["verify_after_login"] = await client.verify()

        original = await client.read_config_if_present()
        try:
            await _exercise(client, report, fixtures, keep=keep)
        finally:
            if not keep:
                await _restore_config(client, report, original)

        if not use_header:
            await client.logout()
            report.checks["rejected_after_logout"] = not await client.verify()

    report.finished_ms = now_ms()
    summary, exit_code = summarize(report)
    logger.info("runner.summary", extra=summary)
    return exit_code


async def _exercise(client: AdminClient, report: SmokeReport, fixtures: list[Path], *, keep: bool) -> None:
    report.uploaded = await client.upload(fixtures)
    stored = [u.filename for u in report.uploaded if u.success]
    report.checks["some_upload_succeeded"] = bool(stored)

    report.listed = await client.list_files()
    report.checks["stored_files_listed"] = all(name in report.listed for name in stored)

    if stored:
        blob = await client.fetch_audio(stored[0])
        report.checks["audio_served"] = len(blob) > 0

    config = build_config(stored)
    await client.write_config(config)
    report.checks["config_round_trip"] = (await client.read_config()) == config

    if not keep:
        for name in stored:
            await client.delete_file(name)
        remaining = await client.list_files()
        report.checks["cleanup"] = not any(name in remaining for name in stored)


async def _restore_config(client: AdminClient, report: SmokeReport, original: dict | None) -> None:
    """Put back the document the run found; there is no endpoint to remove one."""
    if original is None:
        logger.warning(
            "config.not_restored",
            extra={"event": "config_not_restored", "reason": "no configuration existed before the run"},
        )
        return
    try:
        await client.write_config(original)
    except (SmokeError, httpx.HTTPError):
        logger.exception("config.restore_failed", extra={"event": "config_restore_failed"})
        report.checks["config_restored"] = False
        return
    report.checks["config_restored"] = True


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv or sys.argv[1:])
    code = asyncio.run(
        run_smoke(
            base_url=args.base_url,
            password=args.password,
            fixtures_dir=Path(args.fixtures),
            timeout_s=args.timeout,
            use_header=args.use_header,
            keep=args.keep,
        )
    )
    raise SystemExit(code)


if __name__ == "__main__":
    main()
