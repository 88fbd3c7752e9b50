from datetime import datetime, timezone

from flask import Flask

from .app_utils import make_ok
from .config import DEV_SERVER_HOST, DEV_SERVER_PORT, setup_logger
from .routes.api import bp as api_bp

app = Flask(__name__)

logger = setup_logger(__name__)

app.register_blueprint(api_bp)
app.logger.info("api_routes_registered")


@app.route("/health", methods=["GET"])
def health():
    return make_ok(
        {"ok": True, "ts": datetime.now(timezone.utc).isoformat()},
        "OK",
        status_code=200,
    )


if __name__ == "__main__":
    app.run(host=DEV_SERVER_HOST, port=DEV_SERVER_PORT)
