# contacts_server/api/__init__.py
from flask import Flask, request, jsonify
from flask_cors import CORS
from ariadne import format_error, make_executable_schema, graphql_sync
from ariadne.explorer import ExplorerGraphiQL
from pymongo.errors import PyMongoError

from .schema import type_defs
from .routes import query, mutation, person, user, yes_no
from .context import build_context
from .db.store import connect
from .settings import load_settings
from .utils.logger import write_log

schema = make_executable_schema(type_defs, [query, mutation, person, user, yes_no])


def _client_error_code(error) -> str:
    if error.message.startswith("Syntax Error"):
        return "GRAPHQL_PARSE_FAILED"
    return "GRAPHQL_VALIDATION_FAILED"


def format_contacts_error(error, debug: bool = False) -> dict:
    formatted = format_error(error, debug)
    extensions = formatted.setdefault("extensions", {})
    if "code" in extensions:
        return formatted
    # parse and validation errors never wrap a resolver exception
    if error.original_error is None:
        extensions["code"] = _client_error_code(error)
    else:
        extensions["code"] = "INTERNAL_SERVER_ERROR"
        write_log({"event": "unhandled_error", "error": str(error), "path": formatted.get("path")}, stream="error")
    return formatted


def create_app(settings=None, store=None, debug: bool = False):
    settings = settings or load_settings()
    store = store or connect(settings)
    try:
        store.ensure_indexes()
    except PyMongoError as e:
        write_log({"event": "store_index_error", "error": str(e)}, stream="system")

    app = Flask(__name__)
    CORS(app)

    @app.route("/graphql", methods=["GET"])
    def graphql_playground():
        return ExplorerGraphiQL().html(None), 200

    @app.route("/graphql", methods=["POST"])
    def graphql_server():
        data = request.get_json(silent=True)
        context = build_context(request, settings, store)

        success, result = graphql_sync(
            schema,
            data,
            context_value=context,
            debug=debug,
            error_formatter=format_contacts_error,
        )
        status_code = 200 if success else 400
        return jsonify(result), status_code

    return app
