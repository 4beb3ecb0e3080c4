from argparse import ArgumentParser
import logging
from pathlib import Path
import sys

from cms_snippets.cms_client import HttpResourceStore
from cms_snippets.collaborators import (
    ClientAssets,
    CmsHost,
    JsonResourceStore,
    ResourceSource,
)
from cms_snippets.config import Settings, load_settings
from cms_snippets.map_renderer import render_map
from cms_snippets.models import MapOptions
from cms_snippets.value_index import extract_value_by_index

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def build_host(
    settings: Settings,
    assets: ClientAssets,
    data_file: Path | None = None,
    api_url: str | None = None,
) -> CmsHost:
    store: ResourceSource
    if api_url or (data_file is None and settings.api_url):
        store = HttpResourceStore(api_url or settings.api_url or "")
    else:
        store = JsonResourceStore.from_file(data_file or settings.data_file)
    return CmsHost.from_store(store, settings.site_url, assets)


def render_map_html(
    settings: Settings,
    properties: dict[str, object],
    data_file: Path | None = None,
    api_url: str | None = None,
    current_id: int | None = None,
) -> str:
    assets = ClientAssets()
    host = build_host(settings, assets, data_file=data_file, api_url=api_url)
    current = host.store.get(current_id) if current_id is not None else None
    options = MapOptions.from_properties(properties)
    result = render_map(options, host, current, leaflet_version=settings.leaflet_version)
    logger.info(f"Map rendered with status {result.status.value}")

    return "\n".join(part for part in (assets.head_html(), result.html) if part)


def main(argv: list[str] | None = None) -> int:
    parser = ArgumentParser(description="CMS output snippets")
    parser.add_argument("--log-level", default=None, help="Logging level (default: LOG_LEVEL or INFO)")
    sub = parser.add_subparsers(dest="command", required=True)

    extract = sub.add_parser("extract", help="Pick one value out of a delimited string")
    extract.add_argument("input", help="Delimited input, e.g. 'pomme;orange;banane'")
    extract.add_argument("options", nargs="?", default="", help="Index or 'index=N&delimiter=X&default=Y'")

    render = sub.add_parser("render-map", help="Render the Leaflet map snippet as HTML")
    render.add_argument("--data-file", type=Path, default=None, help="JSON export of resources")
    render.add_argument("--api-url", default=None, help="CMS JSON API base URL (overrides --data-file)")
    render.add_argument("--resources", default="", help="Comma-separated resource ids")
    render.add_argument("--parent", default="", help="Parent id whose descendants are mapped")
    render.add_argument("--resource", type=int, default=None, help="Current resource id for single-marker mode")
    render.add_argument("--coords-field", default="", help="Template variable holding coordinates")
    render.add_argument("--title-field", default="", help="Field used as marker title")
    render.add_argument("--subtitle-field", default="", help="Field used as marker subtitle")
    render.add_argument("--height", default="", help="Map height (default: 350px)")
    render.add_argument("--width", default="", help="Map width (default: 100%%)")
    render.add_argument("--zoom", default="", help="Initial zoom level (default: 13)")
    render.add_argument("--output", type=Path, default=None, help="Write HTML here instead of stdout")

    args = parser.parse_args(argv)
    settings = load_settings()
    configure_logging(args.log_level or settings.log_level)

    if args.command == "extract":
        print(extract_value_by_index(args.input, args.options))
        return 0
    if args.command == "render-map":
        properties: dict[str, object] = {
            "resources": args.resources,
            "parent": args.parent,
            "coordsField": args.coords_field,
            "titleField": args.title_field,
            "subtitleField": args.subtitle_field,
            "height": args.height,
            "width": args.width,
            "zoom": args.zoom,
        }
        html = render_map_html(
            settings,
            properties,
            data_file=args.data_file,
            api_url=args.api_url,
            current_id=args.resource,
        )
        if args.output:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(html, encoding="utf-8")
            print(f"Map written to {args.output}")
        else:
            sys.stdout.write(html + "\n")
        return 0
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
