from .routes import optimization_bp
from .app import create_app

__all__ = ['optimization_bp', 'create_app']
