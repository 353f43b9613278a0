import logging
import time

from quart import Quart, g, request, send_from_directory
from quart_schema import QuartSchema, hide

from app_init.app_init import BeanFactory
from common.config.config import PORT, UPLOAD_DIR
from common.config.conts import UPLOADS_URL_PATH
from common.exception.exception_handler import register_error_handlers
# Import blueprints for different route groups
from routes.categories import categories_bp
from routes.orders import orders_bp
from routes.products import products_bp
from routes.users import users_bp

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)
factory = BeanFactory()

app = Quart(__name__)

QuartSchema(app,
            info={"title": "E-Commerce API", "version": "1.0.0"},
            tags=[{"name": "E-Commerce", "description": "Catalog, users and orders"}],
            security_schemes={
                "bearerAuth": {
                    "type": "http",
                    "scheme": "bearer",
                }
            })

# Register blueprints
app.register_blueprint(categories_bp)
app.register_blueprint(products_bp)
app.register_blueprint(users_bp)
app.register_blueprint(orders_bp)

register_error_handlers(app)

@app.route("/favicon.ico")
@hide
def favicon():
    return "", 200


@app.route(f"/{UPLOADS_URL_PATH}/<path:file_name>")
@hide
async def uploaded_file(file_name):
    return await send_from_directory(UPLOAD_DIR, file_name)


# Startup tasks: open the storage connection once for the whole process
@app.before_serving
async def startup():
    await factory.startup()


# Shutdown tasks: release the storage connection
@app.after_serving
async def shutdown():
    await factory.shutdown()


@app.before_request
async def start_timer():
    g.request_started = time.monotonic()


# Access log and CORS headers for every response
@app.after_request
async def apply_cors(response):
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Methods"] = "GET, POST, PUT, DELETE, OPTIONS"
    response.headers["Access-Control-Allow-Headers"] = "*"
    response.headers["Access-Control-Allow-Credentials"] = "true"
    elapsed_ms = (time.monotonic() - g.get("request_started", time.monotonic())) * 1000
    logger.info(f"{request.method} {request.path} {response.status_code} - {elapsed_ms:.1f} ms")
    return response


if __name__ == "__main__":
    app.run(use_reloader=False, debug=True, host="0.0.0.0", port=PORT)
