import argparse
import os
from functools import lru_cache
from pathlib import Path


@lru_cache
def get_cli_args(argv: tuple[str, ...] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="equiring",
        description=(
            "Balance a single-token ring across datacenters.\n\n"
            "Every datacenter gets evenly spaced tokens shifted by its own small "
            "offset. Offsets are chosen so that as few nodes as possible have to "
            "move; nodes already on a valid position keep it."
        ),
        formatter_class=argparse.RawTextHelpFormatter
    )

    parser.add_argument(
        "-c", "--config",
        type=str,
        help="Path to an equiring configuration file"
    )

    parser.add_argument(
        "-i", "--inventory",
        type=str,
        help="Path to the cluster inventory (YAML). Overrides inventory.file."
    )

    parser.add_argument(
        "-d", "--dry-run",
        action="store_true",
        default=None,
        help="Print the plan without moving any node."
    )

    parser.add_argument(
        "-f", "--force",
        action="store_true",
        default=None,
        help=(
            "Move nodes even though the cluster already holds data.\n"
            "Without it, a cluster reporting MB/GB/TB of load is only planned."
        )
    )

    parser.add_argument(
        "-r", "--no-resolve",
        dest="resolve",
        action="store_false",
        default=None,
        help="Don't resolve host names; identify hosts by address only."
    )

    parser.add_argument(
        "-o", "--output",
        type=str,
        choices=["text", "yaml", "json"],
        help="Report format (default: text)."
    )

    parser.add_argument(
        "-l", "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help=(
            "Logging verbosity.\n"
            "DEBUG    → every planned move is logged.\n"
            "INFO     → chosen offsets and executed commands (default).\n"
            "WARNING  → only warnings and errors.\n"
        ),
    )

    return parser.parse_args(argv)


@lru_cache
def get_configfile() -> Path | None:
    args = get_cli_args()

    # Priority: CLI > ENV > default file in current working directory
    raw = args.config or os.getenv("EQUIRINGCONFIG")

    if raw is None:
        file = Path.cwd() / "equiring.yaml"
        return file if file.is_file() else None

    file = Path(raw)
    if not file.is_file():
        raise SystemExit(
            f"[config] Configuration file not found: '{file}'.\n"
            "  - Use --config <file.yaml>\n"
            "  - Or set the EQUIRINGCONFIG environment variable\n"
            "  - Or place an 'equiring.yaml' file in the current working directory."
        )

    return file


def get_overrides(args: argparse.Namespace) -> dict:
    """
    Translate command line flags into a nested settings mapping. Flags that
    were not given are left out so the configuration file still applies.
    """
    overrides: dict[str, dict] = {}

    def put(section: str, key: str, value) -> None:
        if value is not None:
            overrides.setdefault(section, {})[key] = value

    put("inventory", "file", args.inventory)
    put("inventory", "resolve", args.resolve)
    put("balance", "dry_run", args.dry_run)
    put("balance", "force", args.force)
    put("output", "format", args.output)

    return overrides
