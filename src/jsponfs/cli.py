from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Iterator

from .core.collapse import collapse
from .core.errors import CodecError
from .core.serde import json_dumps_pretty
from .io.backend import JsponBackend
from .io.errors import IoError
from .io.paths import entry_id_from_path


def _backend(args: argparse.Namespace) -> JsponBackend:
    overrides = {"root_dir": args.root} if args.root else {}
    return JsponBackend.from_settings(args.config, **overrides)


def _cmd_ls(args: argparse.Namespace) -> int:
    backend = _backend(args)
    if args.roots:
        ids = backend.root_ids()
    else:
        ids = list(_iter_ids(backend))
    for entry_id in sorted(ids):
        print(entry_id)
    return 0


def _iter_ids(backend: JsponBackend) -> Iterator[str]:
    for path in backend.store.iter_object_paths():
        yield entry_id_from_path(path)


def _cmd_show(args: argparse.Namespace) -> int:
    backend = _backend(args)
    entry = backend.get_entry(args.id)
    print(json_dumps_pretty(collapse(entry)))
    if entry.root:
        print(f"[INFO] {args.id} is a root", file=sys.stderr)
    return 0


def _cmd_rm(args: argparse.Namespace) -> int:
    backend = _backend(args)
    backend.delete(*args.ids)
    print(f"[INFO] Deleted {len(args.ids)} id(s)")
    return 0


def _cmd_clear(args: argparse.Namespace) -> int:
    if not args.yes:
        print("[WARN] Refusing to clear without --yes", file=sys.stderr)
        return 2
    backend = _backend(args)
    backend.clear()
    print(f"[INFO] Cleared {backend.settings.root_dir}")
    return 0


def _cmd_stats(args: argparse.Namespace) -> int:
    backend = _backend(args)
    n_entries = sum(1 for _ in _iter_ids(backend))
    n_roots = len(backend.root_ids())
    print(f"root_dir: {backend.settings.root_dir}")
    print(f"entries:  {n_entries}")
    print(f"roots:    {n_roots}")
    return 0


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="jsponfs", description="Inspect a jsponfs entry store.")
    p.add_argument("--root", type=str, default="", help="Store root directory (overrides config).")
    p.add_argument("--config", type=str, default=None, help="Explicit TOML config path.")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = p.add_subparsers(dest="cmd", required=True)

    ls = sub.add_parser("ls", help="List entry ids (sorted).")
    ls.add_argument("--roots", action="store_true", help="List root ids only.")
    ls.set_defaults(func=_cmd_ls)

    show = sub.add_parser("show", help="Print an entry as a pretty JSPON document.")
    show.add_argument("id", type=str)
    show.set_defaults(func=_cmd_show)

    rm = sub.add_parser("rm", help="Delete entries (missing ids are ignored).")
    rm.add_argument("ids", nargs="+")
    rm.set_defaults(func=_cmd_rm)

    clear = sub.add_parser("clear", help="Remove every entry and root marker.")
    clear.add_argument("--yes", action="store_true", help="Confirm clearing the store.")
    clear.set_defaults(func=_cmd_clear)

    stats = sub.add_parser("stats", help="Count entries and roots.")
    stats.set_defaults(func=_cmd_stats)
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_argparser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    try:
        return int(args.func(args))
    except (IoError, CodecError) as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
