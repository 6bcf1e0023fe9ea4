from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from ..exceptions import SnapListError
from ..extensions import db
from .response import api_response


def register_error_handlers(app):
    @app.errorhandler(SnapListError)
    def snaplist_error(e):
        return api_response(False, e.message, None, e.status_code)

    @app.errorhandler(SQLAlchemyError)
    def database_error(e):
        db.session.rollback()
        app.logger.exception(f"Database error: {e}")
        return api_response(False, "Server Error", None, 500)

    @app.errorhandler(HTTPException)
    def http_error(e):
        messages = {
            400: "Bad Request",
            401: "Unauthorized",
            403: "Forbidden",
            404: "Not Found",
            405: "Method Not Allowed",
        }
        return api_response(False, messages.get(e.code, e.name), None, e.code)

    @app.errorhandler(500)
    def server_error(e):
        return api_response(False, "Server Error", None, 500)
