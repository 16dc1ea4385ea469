"""
ZoneMap - Zone Map Position Service
Flask application factory and initialization
"""

import os
import click
import logging
from flask import Flask, g
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Import configuration
from config import config

# Import database functions
from database import close_db, init_db
from utils.api_response import api_error
from utils.messages import get_message


def create_app(config_name=None):
    """
    Application factory for Flask app.

    Args:
        config_name: Configuration name ('development', 'production', 'test')

    Returns:
        Flask application instance
    """
    # Determine config
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    # Create Flask app
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config[config_name])

    # Keep envelope order: success first, then data/error
    app.json.sort_keys = False

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Register CLI commands
    register_cli_commands(app)

    # Register teardown handlers
    register_teardown_handlers(app)

    # Configure logging
    configure_logging(app)

    return app


def register_blueprints(app):
    """Register Flask blueprints."""
    from blueprints.api.routes import api_bp

    app.register_blueprint(api_bp, url_prefix='/api')

    @app.route('/')
    def index():
        """Service summary."""
        from flask import url_for
        return {
            'app': app.config.get('APP_NAME', 'ZoneMap'),
            'zones': url_for('api.api_zones'),
            'health': url_for('api.health_check'),
        }


def register_error_handlers(app):
    """Register JSON error handlers."""

    @app.errorhandler(404)
    def not_found_error(error):
        """Handle 404 errors."""
        return api_error(get_message('not_found'), status=404)

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        """Handle 405 errors."""
        return api_error(str(error.description), status=405)

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        # Rollback database on error
        db = g.get('db')
        if db:
            db.rollback()
        return api_error(get_message('internal_error'), status=500)


def register_cli_commands(app):
    """Register Flask CLI commands."""

    @app.cli.command('init-db')
    @click.option('--empty', is_flag=True, help='Skip the demo establishments.')
    def init_db_command(empty):
        """Initialize database with schema and seed data."""
        click.echo('Initializing database...')
        with app.app_context():
            init_db(seed=not empty)
        click.echo(get_message('db_initialized'))

    @app.cli.command('check-layouts')
    def check_layouts_command():
        """Print registered zone layouts and flag misplaced establishments."""
        from map_engine.zones import get_layout, list_zones
        from models.establishment import get_establishments

        with app.app_context():
            for zone in list_zones():
                layout = get_layout(zone)
                click.echo(f'{zone}: {layout.shape}, {layout.max_rows}x{layout.max_cols}, '
                           f'{layout.cell_count} cells')
                for establishment in get_establishments(zone=zone):
                    row, col = establishment['grid_row'], establishment['grid_col']
                    if not layout.is_valid_cell(row, col):
                        click.echo(f"  unplaceable: {establishment['name']} at ({row}, {col})",
                                   err=True)


def register_teardown_handlers(app):
    """Register teardown handlers."""

    @app.teardown_appcontext
    def teardown_db(error):
        """Close database connection at end of request."""
        close_db(error)


def configure_logging(app):
    """Configure application logging."""
    engine_logger = logging.getLogger('map_engine')

    if not app.debug and not app.testing:
        # Production logging
        if not os.path.exists('logs'):
            os.mkdir('logs')

        file_handler = logging.FileHandler('logs/zonemap.log')
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)
        app.logger.addHandler(file_handler)
        engine_logger.addHandler(file_handler)

        app.logger.setLevel(logging.INFO)
        engine_logger.setLevel(logging.INFO)
        app.logger.info('ZoneMap startup')
    else:
        # Development logging
        app.logger.setLevel(logging.DEBUG)
        engine_logger.setLevel(logging.DEBUG)


# Create application instance for development server
if __name__ == '__main__':
    app = create_app()
    # host='0.0.0.0' allows access from other devices on the network
    app.run(host='0.0.0.0', debug=True)
