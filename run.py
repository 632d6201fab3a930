# /run.py
import os

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()

from clinicsync import create_app
from clinicsync.extensions import socketio

app = create_app(os.getenv('FLASK_CONFIG'))

if __name__ == '__main__':
    # Serves both the HTTP API and the Socket.IO channel on one port.
    print(f"Starting server on {app.config['HOST']}:{app.config['PORT']}...")
    socketio.run(app,
                 host=app.config['HOST'],
                 port=app.config['PORT'],
                 debug=app.debug,
                 allow_unsafe_werkzeug=True)
