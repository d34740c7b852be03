"""Cavemesh CLI entry point.

Provides subcommands for running the HTTP API server and for generating a
single cave layout from the terminal (ASCII preview, JSON dump, OBJ export).
Accepts configuration via flags and environment variables, with optional
.env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

_color_init()
# Disable colors if output is not a real terminal (e.g., during pytest capture)
_COLOR_ENABLED = sys.stdout.isatty()


def _load_version() -> str:
    try:
        with open(os.path.join(os.path.dirname(os.path.abspath(__file__)), "VERSION"), "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Cavemesh cave generator

    Run the HTTP API server or generate a single layout from the command line.
    Configuration can be provided via CLI flags or environment variables. If
    both are present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                 Bind address for the web server (default: 0.0.0.0)
          PORT                 Port for the web server (default: 5000)
          DATABASE_URL         SQLAlchemy database URI (default: sqlite:///instance/cavemesh.db)
          CAVEMESH_MAX_GRID    Largest width/height accepted by the API (default: 200)
          CAVEMESH_LOG_LEVEL   debug | info | warn | error (default: info)

        Examples:
          # Run the server on the default host and port
          python run.py server

          # Preview a seeded 60x40 cave as ASCII
          python run.py generate --seed 42 --width 60 --height 40 --ascii

          # Export the mesh and walls as OBJ plus the full result as JSON
          python run.py generate --seed test --obj out/cave.obj --json out/cave.json
        """
    )

    parser = argparse.ArgumentParser(
        prog="Cavemesh",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Cavemesh {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # server subcommand
    server_parser = subparsers.add_parser(
        "server",
        help="Run the HTTP API server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the Flask API server",
    )
    server_parser.add_argument("--host", default=None, help="Host interface to bind (default: env HOST or 0.0.0.0)")
    server_parser.add_argument("--port", type=int, default=None, help="Port to listen on (default: env PORT or 5000)")
    server_parser.add_argument(
        "--db",
        dest="db_uri",
        default=None,
        help="Database URI (default: env DATABASE_URL or sqlite:///instance/cavemesh.db)",
    )
    server_parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    server_parser.set_defaults(command="server")

    # generate subcommand
    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate one layout and print or export it",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Generate a cave layout, mesh and outlines without starting the server.",
    )
    gen_parser.add_argument("--seed", default=None, help="Integer or string seed (default: random)")
    gen_parser.add_argument("--width", type=int, default=None, help="Grid width in cells (default: 100)")
    gen_parser.add_argument("--height", type=int, default=None, help="Grid height in cells (default: 100)")
    gen_parser.add_argument("--fill", dest="fill_percent", type=int, default=None, help="Noise fill percent 0-100 (default: 45)")
    gen_parser.add_argument("--min-room", dest="min_room_size", type=int, default=None, help="Smallest room side")
    gen_parser.add_argument("--max-room", dest="max_room_size", type=int, default=None, help="Largest room side")
    gen_parser.add_argument("--rooms", dest="room_attempts", type=int, default=None, help="Room placement attempts")
    gen_parser.add_argument("--smooth", dest="smooth_passes", type=int, default=None, help="Smoothing passes")
    gen_parser.add_argument(
        "--connect", dest="connect_regions", action="store_true", default=None,
        help="Carve extra passages so every cave region is reachable",
    )
    gen_parser.add_argument("--2d", dest="is_2d", action="store_true", default=None, help="Emit 2D edge paths instead of walls")
    gen_parser.add_argument("--obj", dest="obj_path", default=None, help="Write the mesh (and walls) as Wavefront OBJ")
    gen_parser.add_argument("--json", dest="json_path", default=None, help="Write the full result as JSON")
    gen_parser.add_argument("--ascii", action="store_true", help="Print the finished grid as ASCII")
    gen_parser.set_defaults(command="generate")

    # If no subcommand provided, default to server
    if len(argv) == 0:
        argv = ["server"]

    args = parser.parse_args(argv)
    return args


_CONFIG_FLAGS = (
    "seed",
    "width",
    "height",
    "fill_percent",
    "min_room_size",
    "max_room_size",
    "room_attempts",
    "smooth_passes",
    "connect_regions",
    "is_2d",
)


def _paint(color: str, text: str) -> str:
    return f"{color}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text


def _banner(title: str, rows: list[tuple[str, object]]) -> str:
    divider = _paint(Fore.MAGENTA, "=" * 40)
    lines = [divider, f"  {_paint(Fore.CYAN + Style.BRIGHT, title)}", divider]
    for key, val in rows:
        lines.append(f"  {_paint(Fore.YELLOW, key):12} {_paint(Fore.GREEN, str(val))}")
    lines.extend([divider, ""])
    return "\n".join(lines)


def run_generate(args: argparse.Namespace) -> int:
    from cavemesh.dungeon import DungeonConfig, DungeonError, generate
    from cavemesh.dungeon.export import grid_to_ascii, result_to_dict, write_obj

    overrides = {k: getattr(args, k) for k in _CONFIG_FLAGS if getattr(args, k, None) is not None}
    try:
        result = generate(DungeonConfig.from_mapping(overrides))
    except DungeonError as exc:
        print(_paint(Fore.RED, f"[ERROR] {exc}"), file=sys.stderr)
        return 1

    m = result.metrics
    print(
        _banner(
            "Cave Generated",
            [
                ("Seed:", result.seed),
                ("Size:", f"{result.width}x{result.height}"),
                ("Rooms:", m["rooms_placed"]),
                ("Caves:", m["cave_rooms"]),
                ("Outlines:", m["outlines"]),
                ("Triangles:", m["triangles"]),
                ("Runtime:", f"{m['runtime_ms']} ms"),
            ],
        )
    )
    if args.ascii:
        print(grid_to_ascii(result.grid))
    if args.obj_path:
        write_obj(result.mesh, args.obj_path, walls=result.walls)
        print(f"[INFO] Wrote OBJ to {args.obj_path}")
    if args.json_path:
        directory = os.path.dirname(args.json_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(args.json_path, "w", encoding="utf-8") as f:
            json.dump(result_to_dict(result), f)
        print(f"[INFO] Wrote JSON to {args.json_path}")
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    mode = (getattr(args, "command", None) or "server").lower()
    if mode == "generate":
        return run_generate(args)

    # Resolve configuration from CLI flags or env vars
    env_host = os.getenv("HOST", "0.0.0.0")
    env_port = int(os.getenv("PORT", "5000"))
    env_db = os.getenv("DATABASE_URL")

    host = getattr(args, "host", None) or env_host
    port = int(getattr(args, "port", None) or env_port)
    db_uri_cli = getattr(args, "db_uri", None)

    # DATABASE_URL must be in the environment BEFORE the Flask app is imported
    if db_uri_cli:
        os.environ["DATABASE_URL"] = db_uri_cli
    db_banner = db_uri_cli or env_db or "auto (instance/cavemesh.db)"

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    # Import server entrypoint only after environment is ready
    from cavemesh.logging_utils import log
    from cavemesh.server import start_server

    print(
        _banner(
            "Cavemesh Server Bootup",
            [("Mode:", mode.upper()), ("Host:", host), ("Port:", port), ("Database:", db_banner)],
        )
    )
    debug = bool(getattr(args, "debug", False) or os.getenv("FLASK_DEBUG") == "1")
    log.info(event="startup", mode=mode, host=host, port=port, db=db_banner, debug=debug)
    start_server(host=host, port=port, debug=debug)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
