#!/usr/bin/env python3
"""
Property Marketplace API Runner
"""
import os
from marketplace import create_app, db
from marketplace.models import User, Property, Favorite, Recommendation

app = create_app()

@app.shell_context_processor
def make_shell_context():
    return {
        'db': db,
        'User': User,
        'Property': Property,
        'Favorite': Favorite,
        'Recommendation': Recommendation
    }

if __name__ == '__main__':
    port = int(os.getenv('PORT', 5000))
    debug = os.getenv('FLASK_ENV') == 'development'
    app.run(host='0.0.0.0', port=port, debug=debug)
