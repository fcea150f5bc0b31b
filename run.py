#!/usr/bin/env python3
"""
ServiceHub backend - main application entry point
"""
from servicehub import create_app, db
import os

app = create_app()

if __name__ == '__main__':
    port = int(os.getenv('PORT', 5000))
    debug = os.getenv('DEBUG', 'True').lower() == 'true'

    with app.app_context():
        db.create_all()

    app.run(
        host='0.0.0.0',
        port=port,
        debug=debug
    )
