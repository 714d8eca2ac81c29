#!/usr/bin/env python3
import logging
import os
import sys
from craftshelf import create_app, BIND, PORT, SETTINGS_FILE

def _resolve_settings_file() -> str:
    if len(sys.argv) >= 2:
        return os.path.abspath(sys.argv[1])
    return os.path.abspath(SETTINGS_FILE)

if __name__ == "__main__":
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app = create_app(_resolve_settings_file())
    app.run(host=BIND, port=PORT, debug=False)
