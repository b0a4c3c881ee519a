from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

import yaml

from bracketsmith.config import AppConfig, load_config
from bracketsmith.core.normalizer import BracketNormalizer
from bracketsmith.core.segmenter import available_segmenters
from bracketsmith.engine.runner import BracketSmith
from bracketsmith.results.store import write_report


def _load_app_config(args: argparse.Namespace) -> AppConfig:
    try:
        cfg = load_config(args.config)
    except FileNotFoundError:
        raise SystemExit(f"Missing config file: {args.config}")
    except (ValueError, yaml.YAMLError) as e:
        raise SystemExit(f"Invalid config file: {e}")

    if getattr(args, "strategy", None):
        cfg = replace(cfg, normalization=replace(cfg.normalization, strategy=args.strategy))
    return cfg


def _build_runner(args: argparse.Namespace, dry_run: bool) -> BracketSmith:
    cfg = _load_app_config(args)
    try:
        normalizer = BracketNormalizer(cfg.normalization)
    except ValueError as e:
        raise SystemExit(f"Invalid config: {e}")
    return BracketSmith(
        normalizer=normalizer,
        walk_cfg=cfg.walk,
        dry_run=dry_run,
        verbose=args.verbose,
        progress=args.progress,
    )


def _finish(runner: BracketSmith, args: argparse.Namespace) -> None:
    if args.report:
        try:
            out = write_report(Path(args.report), runner.report())
        except OSError as e:
            raise SystemExit(f"Could not write report: {e}")
        print(f"Wrote {out}")


def cmd_fix(args: argparse.Namespace) -> int:
    runner = _build_runner(args, dry_run=args.dry_run)
    ok = runner.run(args.paths)
    _finish(runner, args)
    return 0 if ok else 1


def cmd_check(args: argparse.Namespace) -> int:
    runner = _build_runner(args, dry_run=True)
    ok = runner.run(args.paths)
    _finish(runner, args)
    if runner.changed_count:
        for path in runner.changed_files:
            print(f"would reformat {path}")
    return 0 if ok and not runner.changed_count else 1


def cmd_format(args: argparse.Namespace) -> int:
    cfg = _load_app_config(args)
    try:
        normalizer = BracketNormalizer(cfg.normalization)
    except ValueError as e:
        raise SystemExit(f"Invalid config: {e}")
    result = normalizer.normalize(sys.stdin.read())
    sys.stdout.write(result.text)
    return 0


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("paths", nargs="*", help="Files or directories (defaults to the configured directories).")
    p.add_argument("--config", default=None, help="Path to bracketsmith.yaml.")
    p.add_argument("--strategy", choices=available_segmenters(), help="Override the configured strategy.")
    p.add_argument("--verbose", "-v", action="store_true", help="Print a line for every file.")
    p.add_argument("--progress", action="store_true", help="Show a progress bar per directory.")
    p.add_argument("--report", default=None, help="Write a JSON run report to this path.")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="bracketsmith", description="Normalize spacing inside single-line array brackets.")
    sub = p.add_subparsers(dest="cmd", required=True)

    s_fix = sub.add_parser("fix", help="Rewrite files in place.")
    _add_common(s_fix)
    s_fix.add_argument("--dry-run", action="store_true", help="Only report files that would change.")
    s_fix.set_defaults(func=cmd_fix)

    s_check = sub.add_parser("check", help="Dry run; exit 1 when any file would change.")
    _add_common(s_check)
    s_check.set_defaults(func=cmd_check)

    s_fmt = sub.add_parser("format", help="Normalize stdin and write the result to stdout.")
    s_fmt.add_argument("--config", default=None, help="Path to bracketsmith.yaml.")
    s_fmt.add_argument("--strategy", choices=available_segmenters(), help="Override the configured strategy.")
    s_fmt.set_defaults(func=cmd_format)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
