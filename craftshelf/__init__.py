import os
from pathlib import Path
from flask import Flask
from .accounts import AccountStore
from .routes import bp as routes_bp

# Bind only localhost unless overridden
BIND = os.environ.get("BIND", "127.0.0.1")
PORT = int(os.environ.get("PORT", "5000"))
SETTINGS_FILE = os.environ.get("CRAFTSHELF_SETTINGS", str(Path.home() / ".craftshelf.json"))

def create_app(settings_file: str = SETTINGS_FILE) -> Flask:
    app = Flask(__name__)
    app.secret_key = os.environ.get("FLASK_SECRET", "dev-" + os.urandom(8).hex())
    app.config["SETTINGS_FILE"] = settings_file
    app.config["ACCOUNTS"] = AccountStore()

    app.register_blueprint(routes_bp)
    return app
