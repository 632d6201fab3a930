# /clinicsync/socket_handlers/broadcast_handler.py
import logging

from flask import current_app, request
from flask_socketio import emit

from clinicsync.extensions import socketio
from clinicsync.utils.broadcaster import broadcaster
from clinicsync.utils.token_service import token_service


def get_token_from_handshake(auth):
    """Token from the Socket.IO auth payload, falling back to the query string."""
    if isinstance(auth, dict) and auth.get('token'):
        return auth['token']
    return request.args.get('token')


@socketio.on('connect')
def handle_connect(auth=None):
    """Register the client as an observer of record mutations."""
    if current_app.config.get('REALTIME_REQUIRE_AUTH', True):
        user_id = token_service.verify(get_token_from_handshake(auth))
        if user_id is None:
            logging.warning(f"Rejected observer connection {request.sid}: invalid or missing token")
            return False
    else:
        user_id = None

    broadcaster.register(request.sid)
    emit('connected', {
        'message': 'Connected successfully',
        'user_id': user_id
    })


@socketio.on('disconnect')
def handle_disconnect(reason=None):
    broadcaster.unregister(request.sid)
