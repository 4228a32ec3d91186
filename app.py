#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import logging
import os

from flask import Flask, jsonify

from config import Config
from db import DatabaseSession
from services_init import init_services
from routes.calendar_routes import calendar_bp
from routes.schedule_routes import schedule_bp
from routes.proposal_routes import proposal_bp


def create_app(config_object=None):
    """
    Build the Flask application.

    Args:
        config_object: Config class or instance (defaults to Config)
    """
    app = Flask(__name__)
    app.config.from_object(config_object or Config)
    app.json.sort_keys = app.config.get('JSON_SORT_KEYS', False)

    logging.basicConfig(
        level=getattr(logging, str(app.config['LOG_LEVEL']).upper(), logging.INFO),
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
    )

    db = DatabaseSession(app.config['DATABASE_URL'])
    db.create_all_tables()
    services = init_services(app, db)

    app.register_blueprint(calendar_bp)
    app.register_blueprint(schedule_bp)
    app.register_blueprint(proposal_bp)

    @app.route('/health')
    def health():
        """Liveness check"""
        return jsonify({'status': 'ok', 'database': db.get_db_type()})

    if app.config.get('CLEANUP_ENABLED'):
        services.cleanup_scheduler.start()

    app.logger.info(f"Scheduling backend ready ({db.get_db_type()})")
    return app


if __name__ == '__main__':
    app = create_app()
    port = int(os.environ.get('PORT', 5000))
    # Reloader would start the cleanup scheduler twice
    app.run(host='0.0.0.0', port=port, debug=False, use_reloader=False)
