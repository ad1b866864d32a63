from dotenv import load_dotenv
from flask import Flask
from flasgger import Swagger

from .config import Config
from .errors import register_error_handlers
from .extensions import db, migrate, jwt, ma
from .middleware.request_id import init_request_id
from .swagger_config import swagger_template

load_dotenv()

def create_app(config_class=Config) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))
    Swagger(app, template=swagger_template(app))

    # Extensions
    from . import models  # noqa: F401  (register tables before migrate/create_all)
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    ma.init_app(app)

    # Services share one persistence gateway over db.session
    from .services import init_services
    init_services(app)

    # Middleware + errors
    init_request_id(app)
    register_error_handlers(app)

    # Blueprint imports
    from .api.submissions.routes import submissions_bp
    from .api.voting.routes import voting_bp
    from .api.uploads.routes import uploads_bp
    from .api.admin.routes import admin_bp

    # Blueprints
    app.register_blueprint(submissions_bp, url_prefix="/api")
    app.register_blueprint(voting_bp, url_prefix="/api")
    app.register_blueprint(uploads_bp, url_prefix="/api")
    app.register_blueprint(admin_bp, url_prefix="/api/admin")

    from .commands import register_commands
    register_commands(app)

    # Health check
    @app.get("/health")
    def health():
        return {"status": "ok"}, 200

    return app
