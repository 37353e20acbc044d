import argparse
from pathlib import Path

from . import __version__
from .artifact import load_mapping, load_mapping_url
from .browser import load_detail, load_listing, render_detail, render_listing
from .catalog import CatalogError, list_url
from .config import Settings, load_settings
from .env import load_env
from .http import HttpClient
from .logger import configure_logger
from .resolver import run
from .slugs import DATABANK_SLUG_OVERRIDES, databank_slug, slug_candidates


def _settings(args: argparse.Namespace) -> Settings:
    try:
        settings = load_settings().with_overrides(
            images_path=getattr(args, "output", None) or _local_images(args),
            timeout=getattr(args, "timeout", None),
        )
    except ValueError as e:
        raise SystemExit(str(e))
    configure_logger(
        level=settings.log_level,
        log_dir=settings.log_dir,
        enable_file=getattr(args, "command", None) == "build-images",
    )
    return settings


def _client(settings: Settings) -> HttpClient:
    return HttpClient(timeout=settings.timeout, user_agent=settings.user_agent)


def _is_url(value) -> bool:
    return isinstance(value, str) and value.startswith(("http://", "https://"))


def _local_images(args: argparse.Namespace):
    images = getattr(args, "images", None)
    return None if _is_url(images) else images


def _images(args: argparse.Namespace, settings: Settings, client: HttpClient):
    """Image mapping from a published URL or the local mapping file."""
    if _is_url(args.images):
        return load_mapping_url(client, args.images)
    return load_mapping(settings.images_path)


def cmd_build_images(args: argparse.Namespace) -> None:
    settings = _settings(args)
    try:
        mapping = run(settings)
    except CatalogError as e:
        print(f"[error] {e}")
        raise SystemExit(1)
    found = sum(1 for v in mapping.values() if v)
    print(f"Done. starships={len(mapping)} with-image={found} missing={len(mapping) - found}")


def cmd_list(args: argparse.Namespace) -> None:
    settings = _settings(args)
    query = (args.search or "").strip()
    with _client(settings) as client:
        mapping = _images(args, settings, client)
        state = load_listing(client, list_url(settings.swapi_base, query), query=query)
        for _ in range(max(args.pages, 1) - 1):
            if not state.has_more:
                break
            state = load_listing(client, state.next_url, previous=state, append=True)
    print(render_listing(state, mapping))


def cmd_show(args: argparse.Namespace) -> None:
    settings = _settings(args)
    with _client(settings) as client:
        mapping = _images(args, settings, client)
        state = load_detail(client, settings.swapi_base, args.id)
    print(render_detail(state, mapping))


def cmd_slug(args: argparse.Namespace) -> None:
    slug = databank_slug(args.name)
    origin = "override" if args.name in DATABANK_SLUG_OVERRIDES else "generated"
    print(f"Slug: {slug} ({origin})")
    print("Candidates:")
    for c in slug_candidates(slug):
        print(f" - {c}")


def main(argv=None):
    # Load .env if present (STARCHART_* settings)
    load_env()
    parser = argparse.ArgumentParser(prog="starchart", description="Starship catalog browser and image resolver")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    bld = subparsers.add_parser("build-images", help="Resolve an image for every starship and write the mapping file")
    bld.add_argument("--output", type=Path, help="Mapping file to write (default: public/starship-images.json)")
    bld.add_argument("--timeout", type=float, help="Per-request timeout in seconds (default: 15)")
    bld.set_defaults(func=cmd_build_images)

    lst = subparsers.add_parser("list", help="List starships, optionally filtered by name/model")
    lst.add_argument("--search", help="Substring to search for")
    lst.add_argument("--pages", type=int, default=1, help="Number of pages to load (default: 1)")
    lst.add_argument("--images", help="Image mapping file or http(s) URL to join by name")
    lst.add_argument("--timeout", type=float, help="Per-request timeout in seconds")
    lst.set_defaults(func=cmd_list)

    shw = subparsers.add_parser("show", help="Show one starship by id")
    shw.add_argument("id", type=int, help="Starship id from its /starships/<id> route")
    shw.add_argument("--images", help="Image mapping file or http(s) URL to join by name")
    shw.add_argument("--timeout", type=float, help="Per-request timeout in seconds")
    shw.set_defaults(func=cmd_show)

    slg = subparsers.add_parser("slug", help="Show the databank slug candidates for a starship name")
    slg.add_argument("name", help="Starship name exactly as in the catalog")
    slg.set_defaults(func=cmd_slug)

    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
