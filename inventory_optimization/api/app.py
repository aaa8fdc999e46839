"""Flask application factory for the inventory optimization API."""
from flask import Flask

from inventory_optimization.db import db
from inventory_optimization.api.routes import optimization_bp

def create_app(database_url=None, create_tables=True):
    """Create the Flask application.
    
    Args:
        database_url: Optional SQLAlchemy URL overriding the configuration
        create_tables: Create missing tables on startup
        
    Returns:
        Configured Flask application
    """
    app = Flask(__name__)
    
    db.initialize(database_url)
    if create_tables:
        db.create_all_tables()
    
    app.register_blueprint(optimization_bp)
    
    @app.teardown_appcontext
    def remove_session(exception=None):
        db.session.remove()
    
    return app
