"""
SneakZone Storefront
Application Entry Point

This file serves as the entry point for the Flask application.
It uses the application factory pattern defined in the storefront package.
"""

import os

from storefront import create_app
from storefront.config import Config, ProductionConfig

# Create the Flask application using the factory
app = create_app(ProductionConfig if os.environ.get('STOREFRONT_ENV') == 'production' else Config)

if __name__ == '__main__':
    app.run(debug=os.environ.get('FLASK_DEBUG') == '1', host='0.0.0.0', port=int(os.environ.get('PORT', 3000)))
