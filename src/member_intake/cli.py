import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any

from member_intake.clients import ClientFactoryError, build_sheets_service, settings_from_env
from member_intake.clipboard import copy_to_clipboard, read_clipboard
from member_intake.config import AppConfig, ConfigError, load_config
from member_intake.exceptions import ClipboardUnavailable
from member_intake.logger import JsonlLogger
from member_intake.members import convert_to_persistence_record
from member_intake.parsing.contracts import BatchParseResult
from member_intake.parsing.scoring import confidence_band
from member_intake.parsing.text_parser import parse_text
from member_intake.run_context import RunContext, duration_ms, now_ms
from member_intake.store import (
    BulkAddResult,
    InMemoryMemberStore,
    MemberStore,
    SheetsMemberStore,
    add_members,
)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="mi", description="Bulk member intake from pasted text")
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_parse_options(cmd: argparse.ArgumentParser) -> None:
        cmd.add_argument(
            "--capture-address",
            action="store_true",
            default=None,
            help="Keep leftover text as the address (overrides MI_CAPTURE_ADDRESS)",
        )
        cmd.add_argument(
            "--country-code",
            help="Calling code without '+' (overrides MI_COUNTRY_CODE)",
        )
        cmd.add_argument(
            "--min-confidence",
            type=float,
            default=0.0,
            help="Only keep records scoring at least this much",
        )

    # parse
    parse = sub.add_parser("parse", help="Parse pasted text and print the batch as JSON")
    parse.add_argument("file", nargs="?", help="Text file, one person per line (default: stdin)")
    parse.add_argument("--clipboard", action="store_true", help="Read the text from the clipboard")
    parse.add_argument("--copy", action="store_true", help="Copy the JSON output to the clipboard")
    add_parse_options(parse)

    # commit
    commit = sub.add_parser("commit", help="Parse a file and add the members to the store")
    commit.add_argument("file", help="Text file, one person per line")
    commit.add_argument("--group-id", required=True, help="Group (bacenta) the members join")
    commit.add_argument("--join-date", help="YYYY-MM-DD (default: today)")
    commit.add_argument(
        "--dry-run",
        action="store_true",
        help="Use an in-memory store instead of the configured sheet",
    )
    add_parse_options(commit)

    # config
    cfg = sub.add_parser("config", help="Print resolved config (secrets redacted)")
    cfg.add_argument("--profile", choices=["local", "dev", "prod"], help="Override MI_PROFILE")

    return p


def _read_input(args: argparse.Namespace) -> str:
    if getattr(args, "clipboard", False):
        return read_clipboard()
    if args.file and args.file != "-":
        return Path(args.file).read_text(encoding="utf-8")
    return sys.stdin.read()


def _parse(args: argparse.Namespace, cfg: AppConfig, text: str) -> BatchParseResult:
    capture = cfg.capture_address if args.capture_address is None else args.capture_address
    result = parse_text(
        text,
        capture_address=capture,
        country_code=(args.country_code or cfg.country_code).lstrip("+"),
    )
    if args.min_confidence > 0:
        kept = [r for r in result.records if r.confidence >= args.min_confidence]
        result = BatchParseResult(
            records=kept, total_lines=result.total_lines, errors=result.errors
        )
    return result


def _batch_payload(result: BatchParseResult) -> dict[str, Any]:
    payload = result.to_dict()
    for rec_payload, record in zip(payload["records"], result.records, strict=True):
        rec_payload["band"] = confidence_band(record.confidence)
    return payload


def _print_commit_banner(
    *, ctx: RunContext, result: BulkAddResult, parsed: BatchParseResult
) -> None:
    print("=== MI COMMIT RESULT ===")
    print(f"status={'OK' if result.ok else 'FAILED'}")
    print(f"run_id={ctx.run_id}")
    print(f"lines={parsed.total_lines}")
    print(f"parsed={parsed.successfully_parsed}")
    print(f"added={len(result.successful)}")
    print(f"failed={len(result.failed)}")
    print(f"logs={ctx.logs_path}")
    for message in parsed.errors + result.failure_messages():
        print(f"error={message}")
    print("========================")


def _build_store(args: argparse.Namespace, cfg: AppConfig, log: JsonlLogger) -> MemberStore:
    if args.dry_run:
        return InMemoryMemberStore()
    if not cfg.sheet_id:
        raise SystemExit("MI_SHEET_ID is not set. Configure it or pass --dry-run.")
    try:
        settings = settings_from_env()
        service = build_sheets_service(cfg=cfg, settings=settings)
    except ClientFactoryError as e:
        raise SystemExit(str(e)) from e
    return SheetsMemberStore(
        service,
        cfg.sheet_id,
        logger=log.child("sheets_store"),
        tab=cfg.sheet_tab,
        retry=settings.retry,
    )


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    if args.cmd == "config":
        if args.profile:
            os.environ["MI_PROFILE"] = args.profile
        try:
            cfg_obj = load_config()
        except ConfigError as e:
            raise SystemExit(str(e)) from e

        for k, v in cfg_obj.to_safe_dict().items():
            print(f"{k}={v}")
        return

    try:
        cfg = load_config()
    except ConfigError as e:
        raise SystemExit(str(e)) from e

    ctx = RunContext.create(cfg.runs_dir)
    log = JsonlLogger(path=ctx.logs_path, component="cli", min_level=cfg.log_level)

    try:
        text = _read_input(args)
    except (OSError, ClipboardUnavailable) as e:
        log.error(
            "input_error",
            run_id=ctx.run_id,
            error_type=type(e).__name__,
            error_message=str(e),
        )
        raise SystemExit(str(e)) from e

    start = now_ms()
    log.info("parse_start", run_id=ctx.run_id, cmd=args.cmd, chars=len(text))
    try:
        parsed = _parse(args, cfg, text)
    except ValueError as e:
        log.error("parse_error", run_id=ctx.run_id, error_message=str(e))
        raise SystemExit(f"Invalid --country-code: {e}") from e
    log.info(
        "parse_end",
        run_id=ctx.run_id,
        total_lines=parsed.total_lines,
        parsed=parsed.successfully_parsed,
        errors=len(parsed.errors),
        duration_ms=duration_ms(start, now_ms()),
    )

    if args.cmd == "parse":
        output = json.dumps(_batch_payload(parsed), indent=2, ensure_ascii=False)
        print(output)
        if args.copy:

            def report(ok: bool, message: str) -> None:
                log.info("clipboard_copy", run_id=ctx.run_id, ok=ok, message=message)
                print(message, file=sys.stderr)

            copy_to_clipboard(output, report)
        return

    if args.cmd == "commit":
        if not parsed.records:
            raise SystemExit("No members detected; nothing to add.")

        store = _build_store(args, cfg, log)
        records = [
            convert_to_persistence_record(r, args.group_id, args.join_date) for r in parsed.records
        ]
        result = add_members(store, records, log=log.child("bulk_add"))

        ctx.summary_path.write_text(
            json.dumps(
                {
                    "run_id": ctx.run_id,
                    "parse": parsed.to_dict(),
                    "added": [m.to_document() for m in result.successful],
                    "failed": result.failure_messages(),
                },
                indent=2,
                sort_keys=True,
            )
            + "\n",
            encoding="utf-8",
        )
        _print_commit_banner(ctx=ctx, result=result, parsed=parsed)
        if not result.ok:
            raise SystemExit(f"{len(result.failed)} member(s) could not be added")
        return
