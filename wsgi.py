"""WSGI entry point for production deployment."""
import os
from app import create_app
from config import config

config_name = os.environ.get('FLASK_ENV', 'production')
if hasattr(config[config_name], 'validate'):
    config[config_name].validate()

application = create_app(config_name)
