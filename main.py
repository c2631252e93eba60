"""LM Player entry point.

Usage:
    python main.py import ~/Movies/clip.mp4 ~/Downloads/talk.mov
    python main.py import --pick
    python main.py list --filter favorites --sort title-asc --search cat
    python main.py play <video-id>
    python main.py settings --default-speed 1.25 --remember-position
"""

import argparse
import logging
import sys
from pathlib import Path

from PySide6.QtCore import QCoreApplication
from PySide6.QtWidgets import QApplication

from lm_player.app_context import AppContext
from lm_player.models.library_query import VideoFilter, VideoSortOption
from lm_player.services.import_sources import MoviesFolderSource
from lm_player.services.video_importer import VideoImportError
from lm_player.utils.config import APP_NAME, APP_VERSION, ORG_NAME, get_log_dir
from lm_player.utils.time_utils import (
    format_duration,
    format_file_size,
    format_relative_date,
    speed_label,
)


def _setup_logging(verbose: bool) -> None:
    """Console output plus a persistent log file under ~/.lmplayer/logs."""
    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    console = logging.StreamHandler()
    console.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console.setFormatter(fmt)

    file_handler = logging.FileHandler(get_log_dir() / "lmplayer.log", encoding="utf-8")
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(fmt)

    root = logging.getLogger("lm_player")
    root.setLevel(logging.DEBUG)
    root.addHandler(console)
    root.addHandler(file_handler)


# ── Commands ──────────────────────────────────────────────────────────────────

def _print_added(record) -> None:
    print(f"  ADDED  {record.video_id}  {record.title}  ({format_duration(record.duration_sec)})")


def cmd_import(ctx: AppContext, args: argparse.Namespace) -> int:
    if not args.files and not args.pick:
        print("Nothing to import: pass FILE arguments or --pick.", file=sys.stderr)
        return 2

    failures = 0
    for raw in args.files:
        try:
            record = ctx.library.import_video(Path(raw).expanduser())
        except VideoImportError as e:
            failures += 1
            print(f"  ERROR  {raw}: {e}", file=sys.stderr)
            continue
        _print_added(record)

    if args.pick:
        try:
            record = ctx.library.import_from(MoviesFolderSource())
        except VideoImportError as e:
            failures += 1
            print(f"  ERROR  {e}", file=sys.stderr)
        else:
            if record is not None:
                _print_added(record)
    return 1 if failures else 0


def cmd_list(ctx: AppContext, args: argparse.Namespace) -> int:
    videos = ctx.library.query(
        VideoFilter.from_name(args.filter),
        VideoSortOption.from_name(args.sort),
        args.search or "",
    )
    if not videos:
        print("No videos found.")
        return 0
    show_thumbs = ctx.settings.get_show_thumbnails()
    for v in videos:
        star = "*" if v.is_favorite else " "
        if show_thumbs:
            star += " [T]" if v.has_thumbnail else " [ ]"
        line = (
            f"{star} {v.video_id}  {v.title:<40.40}  {format_duration(v.duration_sec):>8}"
            f"  {format_file_size(v.file_size):>9}  {v.view_count} views"
        )
        if v.last_watched:
            line += f"  (last watched {format_relative_date(v.last_watched)})"
        print(line)
    return 0


def cmd_stats(ctx: AppContext, args: argparse.Namespace) -> int:
    print(f"Total videos : {ctx.library.video_count():,}")
    print(f"Total size   : {format_file_size(ctx.library.total_size())}")
    print(f"Storage      : {ctx.library.storage_dir}")
    return 0


def cmd_settings(ctx: AppContext, args: argparse.Namespace) -> int:
    if args.default_speed is not None and args.default_speed <= 0:
        print("Default speed must be greater than zero.", file=sys.stderr)
        return 1

    settings = ctx.settings
    if args.reset:
        settings.reset_to_defaults()
    if args.default_speed is not None:
        settings.set_default_playback_speed(args.default_speed)
    if args.remember_position is not None:
        settings.set_remember_position(args.remember_position)
    if args.auto_play_next is not None:
        settings.set_auto_play_next(args.auto_play_next)
    if args.show_thumbnails is not None:
        settings.set_show_thumbnails(args.show_thumbnails)

    print(f"Default speed     : {speed_label(settings.get_default_playback_speed())}")
    print(f"Remember position : {_on_off(settings.get_remember_position())}")
    print(f"Auto-play next    : {_on_off(settings.get_auto_play_next())}")
    print(f"Show thumbnails   : {_on_off(settings.get_show_thumbnails())}")
    return 0


def _on_off(value: bool) -> str:
    return "on" if value else "off"


def cmd_rename(ctx: AppContext, args: argparse.Namespace) -> int:
    if not ctx.library.rename_video(args.video_id, args.title):
        print("Nothing renamed (unknown id or empty title).", file=sys.stderr)
        return 1
    return 0


def cmd_favorite(ctx: AppContext, args: argparse.Namespace) -> int:
    if not ctx.library.set_favorite(args.video_id, not args.off):
        print(f"Unknown video: {args.video_id}", file=sys.stderr)
        return 1
    return 0


def cmd_delete(ctx: AppContext, args: argparse.Namespace) -> int:
    if not ctx.library.delete_video(args.video_id):
        print(f"Unknown video: {args.video_id}", file=sys.stderr)
        return 1
    return 0


def cmd_play(ctx: AppContext, args: argparse.Namespace) -> int:
    from lm_player.ui.player_window import PlayerWindow

    session = ctx.open_session(args.video_id)
    if session is None:
        print(f"Unknown video: {args.video_id}", file=sys.stderr)
        return 1
    window = PlayerWindow(session)
    window.show()
    session.play()
    return QApplication.instance().exec()


# ── CLI ───────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lm-player",
        description="Import, browse and play a personal video library.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    parser.add_argument("--verbose", action="store_true", help="Log debug output to the console.")
    parser.add_argument(
        "--data-dir",
        metavar="PATH",
        default=None,
        help="Keep the library and video files here instead of ~/.lmplayer.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("import", help="Copy video files into the library.")
    p.add_argument("files", nargs="*", metavar="FILE")
    p.add_argument(
        "--pick",
        action="store_true",
        help="Also choose a file from the Movies folder in a dialog.",
    )
    p.set_defaults(func=cmd_import)

    p = sub.add_parser("list", help="List videos.")
    p.add_argument(
        "--filter",
        choices=["all", "favorites", "recently-watched"],
        default="all",
    )
    p.add_argument(
        "--sort",
        choices=[o.name.lower().replace("_", "-") for o in VideoSortOption],
        default="date-added-newest",
    )
    p.add_argument("--search", default="", help="Case-insensitive title search.")
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("stats", help="Show library totals.")
    p.set_defaults(func=cmd_stats)

    p = sub.add_parser("settings", help="Show or change preferences.")
    p.add_argument("--default-speed", type=float, metavar="RATE")
    p.add_argument("--remember-position", action=argparse.BooleanOptionalAction)
    p.add_argument("--auto-play-next", action=argparse.BooleanOptionalAction)
    p.add_argument("--show-thumbnails", action=argparse.BooleanOptionalAction)
    p.add_argument("--reset", action="store_true", help="Restore defaults before applying changes.")
    p.set_defaults(func=cmd_settings)

    p = sub.add_parser("rename", help="Change a video's title.")
    p.add_argument("video_id")
    p.add_argument("title")
    p.set_defaults(func=cmd_rename)

    p = sub.add_parser("favorite", help="Mark a video as favorite.")
    p.add_argument("video_id")
    p.add_argument("--off", action="store_true", help="Remove the favorite mark instead.")
    p.set_defaults(func=cmd_favorite)

    p = sub.add_parser("delete", help="Delete a video and its file.")
    p.add_argument("video_id")
    p.set_defaults(func=cmd_delete)

    p = sub.add_parser("play", help="Open a video in the player window.")
    p.add_argument("video_id")
    p.set_defaults(func=cmd_play)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _setup_logging(args.verbose)

    QCoreApplication.setOrganizationName(ORG_NAME)
    QCoreApplication.setApplicationName(APP_NAME)
    if args.command == "play" or getattr(args, "pick", False):
        app = QApplication.instance() or QApplication(sys.argv[:1])
    else:
        app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])

    data_dir = Path(args.data_dir).expanduser().resolve() if args.data_dir else None
    ctx = AppContext.create(data_dir)
    try:
        return args.func(ctx, args)
    finally:
        ctx.shutdown()


if __name__ == "__main__":
    sys.exit(main())
