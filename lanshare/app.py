import os
from urllib.parse import quote

from flask import Flask, Response, jsonify, redirect, render_template, request, send_file

from . import router
from .build import build_registry, describe_registry
from .config import load_settings
from .log import logger, setup_logging
from .models import MODE_ALL, MODE_VIDEOS, ConfigError, Registry
from .netinfo import lan_addresses


def render(template_name, data) -> bytes:
    """Render one of the bundled templates with data; needs an app context"""
    return render_template(template_name, data=data).encode("utf-8")


def listing_key(name, path):
    """Directories first, then files; both case-insensitive"""
    return (0 if os.path.isdir(path) else 1, name.lower())


def list_directory(prefix, url_path, dir_path, root):
    """Entries of dir_path for the listing page; symlinks leading outside root are left out"""
    items = []
    for name in os.listdir(dir_path):
        path = os.path.join(dir_path, name)
        try:
            router.safe_resolve_within_root(root, path)
        except ValueError:
            continue
        suffix = "/" if os.path.isdir(path) else ""
        items.append({
            "name": name + suffix,
            "url": quote(url_path + name) + suffix,
            "type": "dir" if suffix else "file",
            "key": listing_key(name, path),
        })

    items.sort(key=lambda e: e["key"])
    return {"prefix": prefix, "path": url_path, "items": items}


def error_response(e, status=500):
    logger.exception("Error serving %s", request.path)
    return Response(str(e), status=status, mimetype="text/plain")


def create_app(registry: Registry) -> Flask:
    """Flask app serving the given registry; the registry is never modified here"""
    app = Flask(__name__, static_folder="static", template_folder="templates")

    @app.route("/", defaults={"path": ""})
    @app.route("/<path:path>")
    def dispatch(path):
        route = router.resolve(registry, request.path)

        try:
            if route.state == router.ROOT:
                return Response(render("welcome.html", {"mode": registry.mode, "entries": registry.entries}),
                                mimetype="text/html")

            if route.state == router.REDIRECT:
                return redirect(route.location, code=301)

            if route.state == router.DISCOVERY:
                return jsonify(router.discovery_document(registry))

            if route.state == router.DIRECTORY:
                if registry.mode == MODE_ALL:
                    root = registry.entries[route.prefix].path
                    listing = list_directory(route.prefix, request.path, route.path, root)
                    return Response(render("listing.html", listing), mimetype="text/html")
                return Response(render("videos.html", {"prefix": route.prefix, "videos": route.videos}),
                                mimetype="text/html")

            if route.state == router.FILE:
                return send_file(route.path)
        except Exception as e:
            return error_response(e)

        return Response("404 page not found", status=404, mimetype="text/plain")

    return app


def main(argv=None):
    """Prompt for settings, build the registry once, then serve it until interrupted"""
    setup_logging()

    try:
        settings = load_settings(argv)
        if settings.debug:
            setup_logging(debug=True)
        addresses = lan_addresses()
    except ConfigError as e:
        logger.error(str(e))
        return 2

    if settings.mode == MODE_VIDEOS:
        print("[" + " ".join(settings.extensions) + "]")

    registry = build_registry(settings.directories, settings.mode, settings.extensions)

    host = addresses[-1] if addresses else "localhost"
    for line in describe_registry(registry, host, settings.port):
        print(line)
    for address in addresses:
        print(f"Server listening on: http://{address}:{settings.port}")

    app = create_app(registry)
    try:
        app.run(host="0.0.0.0", port=settings.port, threaded=True)
    except OSError as e:
        logger.error("Error starting server: %s", e)
        return 1
    return 0
