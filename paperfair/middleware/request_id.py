import time
import uuid
from flask import current_app, g, request

REQUEST_ID_HEADER = "X-Request-Id"

def init_request_id(app):
    @app.before_request
    def _assign_request_id():
        g.request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        g.request_started = time.perf_counter()

    @app.after_request
    def _add_request_id_header(response):
        if hasattr(g, "request_id"):
            response.headers[REQUEST_ID_HEADER] = g.request_id
            elapsed_ms = (time.perf_counter() - g.get("request_started", time.perf_counter())) * 1000
            current_app.logger.debug(
                "%s %s -> %s (%.1fms) request_id=%s",
                request.method, request.path, response.status_code, elapsed_ms, g.request_id,
            )
        return response
