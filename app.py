import logging
import os

from config import config
from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from services.llm_provider_factory import get_api_key

__version__ = "1.0.0"


def create_app(config_name=None):
    """Application factory pattern"""
    if config_name is None:
        config_name = os.getenv("FLASK_ENV", "development")

    app = Flask(__name__)
    app.config.from_object(config[config_name])

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )

    # Initialize CORS for the translator UI
    CORS(
        app,
        resources={
            r"/api/*": {"origins": app.config["ALLOWED_ORIGINS"]},
        },
    )

    # Register API blueprints
    from routes.translation import bp as translation_bp

    app.register_blueprint(translation_bp)

    # Home route
    @app.route("/")
    def home():
        return jsonify({"message": "Welcome to the translator API!", "version": __version__})

    # Health check route
    @app.route("/health")
    def health_check():
        provider = app.config["LLM_PROVIDER"]
        return jsonify({
            "status": "healthy",
            "provider": provider,
            "credentials": get_api_key(provider) is not None,
        }), 200

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        # Let Flask render its own 404/405/... responses
        if isinstance(e, HTTPException):
            return e
        app.logger.error(f"Unhandled error: {e}", exc_info=True)
        return jsonify({"error": "Internal server error"}), 500

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=True, port=5001)
