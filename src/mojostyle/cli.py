"""
CLI entry point for mojostyle.

Usage:
    mojostyle scan <dir>                    Check every Mojo file under a directory
    mojostyle validate <file>               Check a single file
    mojostyle fix <file>                    List automatic fixes (dry run)
    mojostyle fix <file> --enable-auto-fix  Apply fixes with backup and rollback
    mojostyle report <dir>                  Full report, clean files included
    mojostyle cleanup <dir>                 Delete expired .backup files

Exit codes:
    0  no error-severity violations, fix succeeded
    1  error-severity violations found, or a fix failed
    2  bad arguments or configuration
"""

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .checker import ComplianceChecker
from .config import CheckerConfig, load_config
from .errors import MojostyleError
from .fixer import AutoFixer, BackupManager
from .reporting import render_full, render_report

logger = logging.getLogger(__name__)


def build_config(args) -> CheckerConfig:
    """Config file and environment first, then command-line flags."""
    cfg = load_config(Path(args.config) if args.config else None)
    return cfg.with_overrides(
        show_observations=True if args.show_observations else None,
        check_docstring_code=True if args.check_docstring_code else None,
        enable_backup=False if args.disable_backup else None,
        keep_backups=True if args.keep_backups else None,
        auto_cleanup=True if args.auto_cleanup else None,
        retention_days=args.retention_days,
    )


def _require(path: Path, kind: str) -> bool:
    exists = path.is_dir() if kind == "directory" else path.is_file()
    if not exists:
        print(f"Error: {kind} not found: {path}", file=sys.stderr)
    return exists


def cmd_scan(args, cfg: CheckerConfig) -> int:
    """Scan a directory and print the summary plus files with findings."""
    root = Path(args.directory)
    if not _require(root, "directory"):
        return 2

    reports = ComplianceChecker(cfg).scan_directory(root)
    print(render_full(reports, include_clean=False))
    return 1 if any(r.has_errors for r in reports) else 0


def cmd_validate(args, cfg: CheckerConfig) -> int:
    """Check one file."""
    path = Path(args.file)
    if not _require(path, "file"):
        return 2

    report = ComplianceChecker(cfg).check_file(path)
    print(render_report(report))
    return 1 if report.has_errors else 0


def cmd_fix(args, cfg: CheckerConfig) -> int:
    """Show or apply automatic fixes for one file."""
    path = Path(args.file)
    if not _require(path, "file"):
        return 2

    fixer = AutoFixer(cfg)
    result = fixer.fix_file(path, dry_run=not args.enable_auto_fix)

    for change in result.changes:
        print(f"  line {change.line} [{change.kind}] {change.description}")
    print(result.message)

    if result.validation is not None and result.validation.failed and result.validation.output:
        print(result.validation.output, file=sys.stderr)
    if result.backup_path:
        print(f"Backup: {result.backup_path}")
    if not args.enable_auto_fix and result.changes:
        print("Re-run with --enable-auto-fix to apply.")

    return 0 if result.success else 1


def cmd_report(args, cfg: CheckerConfig) -> int:
    """Full report for every file under a directory."""
    root = Path(args.directory)
    if not _require(root, "directory"):
        return 2

    reports = ComplianceChecker(cfg).scan_directory(root)
    text = render_full(reports, include_clean=True)

    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
        print(f"Report written to {args.output}")
    else:
        print(text)
    return 1 if any(r.has_errors for r in reports) else 0


def cmd_cleanup(args, cfg: CheckerConfig) -> int:
    """Delete backups older than the retention window."""
    root = Path(args.directory)
    if not root.exists():
        print(f"Error: path not found: {root}", file=sys.stderr)
        return 2

    removed = BackupManager(cfg.retention_days).cleanup(root)
    for backup in removed:
        print(f"Removed {backup}")
    print(f"{len(removed)} backups removed (retention {cfg.retention_days} days)")
    return 0


def _common_options() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--config', help='Path to a YAML config file')
    common.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    common.add_argument('--show-observations', action='store_true',
                        help='Include informational observations')
    common.add_argument('--check-docstring-code', action='store_true',
                        help='Also check code inside docstrings')
    common.add_argument('--disable-backup', action='store_true',
                        help='Do not write .backup files (rollback uses memory)')
    common.add_argument('--keep-backups', action='store_true',
                        help='Never delete backups after a successful fix')
    common.add_argument('--auto-cleanup', action='store_true',
                        help='Delete the backup once a fix validates')
    common.add_argument('--retention-days', type=int, metavar='N',
                        help='Age in days after which backups are cleaned up')
    return common


def main(argv=None) -> int:
    """Main CLI entry point."""
    common = _common_options()
    parser = argparse.ArgumentParser(
        prog='mojostyle',
        description="Mojo style and design-pattern compliance checker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    mojostyle scan src/
    mojostyle validate src/kernels/matmul.mojo --show-observations
    mojostyle fix src/main.mojo --enable-auto-fix --auto-cleanup
    mojostyle cleanup src/ --retention-days 3
"""
    )
    parser.add_argument('--version', action='version', version=f'mojostyle {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # scan
    scan_p = subparsers.add_parser('scan', parents=[common], help='Check a directory')
    scan_p.add_argument('directory', help='Directory to scan')
    scan_p.set_defaults(func=cmd_scan)

    # validate
    validate_p = subparsers.add_parser('validate', parents=[common], help='Check one file')
    validate_p.add_argument('file', help='File to check')
    validate_p.set_defaults(func=cmd_validate)

    # fix
    fix_p = subparsers.add_parser('fix', parents=[common], help='Apply automatic fixes')
    fix_p.add_argument('file', help='File to fix')
    fix_p.add_argument('--enable-auto-fix', action='store_true',
                       help='Write the fixes (default is a dry run)')
    fix_p.set_defaults(func=cmd_fix)

    # report
    report_p = subparsers.add_parser('report', parents=[common], help='Full compliance report')
    report_p.add_argument('directory', help='Directory to report on')
    report_p.add_argument('-o', '--output', help='Write the report to a file')
    report_p.set_defaults(func=cmd_report)

    # cleanup
    cleanup_p = subparsers.add_parser('cleanup', parents=[common], help='Delete expired backups')
    cleanup_p.add_argument('directory', help='Directory to clean')
    cleanup_p.set_defaults(func=cmd_cleanup)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S',
    )

    try:
        cfg = build_config(args)
    except MojostyleError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    try:
        return args.func(args, cfg)
    except MojostyleError as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
