#!/usr/bin/env python3
"""
Starts the BASIC IDE web server.
"""
import logging
import os
import sys
import webbrowser
from threading import Timer

import uvicorn

from config import get_settings

log = logging.getLogger(__name__)


def open_browser(url):
    """Opens the browser once the server had a moment to start"""
    log.info("opening %s", url)
    webbrowser.open(url)


def main():
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper(),
                        format="%(levelname)s %(name)s: %(message)s")

    print("BASIC Interpreter IDE")
    print("=" * 50)

    if not os.path.isdir(settings.static_dir):
        log.warning("static directory %r not found, serving the API only", settings.static_dir)

    if settings.open_browser:
        host = "localhost" if settings.host == "0.0.0.0" else settings.host
        timer = Timer(2.0, open_browser, args=(f"http://{host}:{settings.port}",))
        timer.daemon = True
        timer.start()

    try:
        uvicorn.run("main:app", host=settings.host, port=settings.port,
                    reload=settings.reload, log_level=settings.log_level.lower())
    except KeyboardInterrupt:
        print("\nServer stopped.")
        sys.exit(0)


if __name__ == "__main__":
    main()
