"""Investment Simulator Flask Application Factory."""

from typing import Optional

from flask import Flask

from investment_simulator.config import get_global_settings
from investment_simulator.models.rate_feed import create_default_rate_provider
from investment_simulator.models.simulation.protocols import RateProvider


def create_app(
    config_name: Optional[str] = None, rate_provider: Optional[RateProvider] = None
) -> Flask:
    """Create and configure the Flask application.

    Args:
        config_name: Configuration name (development, testing, production)
        rate_provider: Benchmark feed to serve; defaults to the public sources

    Returns:
        Flask: Configured Flask application instance
    """
    app = Flask(__name__)

    # Configuration from Pydantic Settings
    settings = get_global_settings()
    app.config["SECRET_KEY"] = settings.secret_key
    app.config["ENV"] = config_name or settings.flask_env
    app.config["DEBUG"] = settings.app_env == "development"
    app.config["TESTING"] = config_name == "testing"
    app.logger.setLevel(settings.log_level)

    app.extensions["rate_provider"] = rate_provider or create_default_rate_provider(
        settings
    )

    # Register blueprints
    from investment_simulator.blueprints.health import health_bp
    from investment_simulator.blueprints.simulation import simulation_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(simulation_bp)

    return app
