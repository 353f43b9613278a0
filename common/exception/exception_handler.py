import logging

from quart import jsonify
from quart_schema import RequestSchemaValidationError
from werkzeug.exceptions import HTTPException

from common.exception.exceptions import AppException, StorageException

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


def register_error_handlers(app):
    """
    Maps application exceptions to JSON error responses.
    """

    @app.errorhandler(RequestSchemaValidationError)
    async def handle_request_validation_error(error):
        return jsonify({"success": False, "error": "VALIDATION", "message": str(error.validation_error)}), 400

    @app.errorhandler(StorageException)
    async def handle_storage_exception(error):
        logger.error(f"Storage failure: {error.message}", exc_info=error)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(AppException)
    async def handle_app_exception(error):
        logger.info(f"{error.__class__.__name__}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    async def handle_http_exception(error):
        error_code = error.name.upper().replace(" ", "_")
        return jsonify({"success": False, "error": error_code, "message": error.description}), error.code

    @app.errorhandler(Exception)
    async def handle_unexpected_exception(error):
        logger.exception(error)
        return jsonify({"success": False, "error": "INTERNAL", "message": "Internal Server Error"}), 500
