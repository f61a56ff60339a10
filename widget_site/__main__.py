"""Build, serve and wait for the widget site."""

import argparse
import sys
import tempfile

from widget_site.config import Settings
from widget_site.errors import ServerNotReady, SiteConfigError
from widget_site.models import default_site, load_site
from widget_site.render import build_site
from widget_site.server import serve, wait_on


def _site(path):
    return load_site(path) if path else default_site()


def cmd_build(args, settings):
    out = build_site(args.out, _site(args.config or settings.SITE_CONFIG))
    print(f"Site written to {out}")


def cmd_serve(args, settings):
    if args.dir:
        _serve_dir(args, settings, args.dir)
        return
    with tempfile.TemporaryDirectory(prefix="widget-site-") as directory:
        _serve_dir(args, settings, directory)


def _serve_dir(args, settings, directory):
    if not args.no_build:
        build_site(directory, _site(args.config or settings.SITE_CONFIG))
    serve(directory, host=args.host or settings.HOST,
          port=settings.PORT if args.port is None else args.port,
          verbose=not args.quiet)


def cmd_wait(args, settings):
    url = args.url or settings.base_url
    delay = settings.WAIT_DELAY if args.delay is None else args.delay
    timeout = settings.HTTP_TIMEOUT if args.timeout is None else args.timeout
    wait_on(url, delay=delay, timeout=timeout)
    print(f"{url} is up")


def build_parser():
    parser = argparse.ArgumentParser(prog="widget_site", description=__doc__)
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("build", help="write index.html and widgets.js")
    p.add_argument("--out", required=True)
    p.add_argument("--config", help="JSON file describing dropdowns and rows")
    p.set_defaults(func=cmd_build)

    p = sub.add_parser("serve", help="build the site and serve it over HTTP")
    p.add_argument("--dir", help="directory to build into and serve")
    p.add_argument("--host")
    p.add_argument("--port", type=int)
    p.add_argument("--config", help="JSON file describing dropdowns and rows")
    p.add_argument("--no-build", action="store_true", help="serve --dir as it is")
    p.add_argument("--quiet", action="store_true", help="do not log requests")
    p.set_defaults(func=cmd_serve)

    p = sub.add_parser("wait", help="block until a URL answers")
    p.add_argument("url", nargs="?")
    p.add_argument("--delay", type=float)
    p.add_argument("--timeout", type=float)
    p.set_defaults(func=cmd_wait)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        if args.command == "serve" and args.no_build and not args.dir:
            raise SiteConfigError("--no-build needs --dir")
        args.func(args, Settings.from_env())
    except (SiteConfigError, ServerNotReady) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
