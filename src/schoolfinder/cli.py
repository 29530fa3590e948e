import argparse
from pathlib import Path

from schoolfinder.errors import SchoolFinderError
from schoolfinder.settings import load_settings


def _build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", default="config/default.yaml", help="Path to config YAML")
    common.add_argument("--profile", default=None, help="Profile name (config/profiles/<name>.yaml)")

    parser = argparse.ArgumentParser(prog="schoolfinder", description="Primary school finder CLI", parents=[common])

    sub = parser.add_subparsers(dest="command", required=True)
    search = sub.add_parser("search", parents=[common], help="Find primary schools in a city")
    search.add_argument("city", help="City name, e.g. 'Oslo'")
    search.add_argument(
        "--type",
        dest="type_selector",
        default="All",
        choices=["All", "Public", "Private", "Unknown"],
        help="Only list schools of this type",
    )
    search.add_argument("--name", dest="name_substring", default="", help="Case-insensitive name filter")
    search.add_argument(
        "--csv",
        nargs="?",
        const="",
        default=None,
        help="Write the filtered list as CSV (default file name derived from the city, under exports_dir)",
    )
    sub.add_parser("api-info", parents=[common], help="Print API run instructions")
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = load_settings(Path(args.config), profile=args.profile)

    if args.command == "api-info":
        host = settings["api"]["host"]
        port = settings["api"]["port"]
        print(f"Run: uvicorn schoolfinder.api.main:app --reload --host {host} --port {port}")
        return

    if args.command == "search":
        from schoolfinder.pipeline import SchoolFinder
        from schoolfinder.results.filtering import FilterCriteria

        finder = SchoolFinder.from_settings(settings)
        try:
            session = finder.search(args.city)
        except SchoolFinderError as e:
            raise SystemExit(f"Error: {e}") from e

        criteria = FilterCriteria(type_selector=args.type_selector, name_substring=args.name_substring)
        schools = session.filtered(criteria)
        print(f"{session.city_info.display_name}: {len(schools)} schools (source={session.source})")
        for s in schools:
            extras = " | ".join(x for x in (s.website, s.contact) if x)
            print(f"- [{s.type.value}] {s.name}" + (f" | {extras}" if extras else ""))

        if args.csv is not None:
            out = Path(args.csv) if args.csv else Path(settings["paths"]["exports_dir"]) / session.export_filename
            out.parent.mkdir(parents=True, exist_ok=True)
            out.write_text(session.to_csv(criteria), encoding="utf-8")
            print(f"Wrote {out}")
        return

    raise SystemExit(f"Unknown command: {args.command}")


if __name__ == "__main__":
    main()
