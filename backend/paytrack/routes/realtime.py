# Overview: Websocket endpoint for server-to-client notification pushes.

from flask import Blueprint, current_app

from ..components import get_components
from ..extensions import sock


realtime_bp = Blueprint("realtime", __name__)


def subscribe(ws):
    """
    Keep the socket registered until the client goes away.

    There is no client-to-server protocol; inbound frames are read and dropped.
    """
    registry = get_components().registry
    registry.add(ws)
    try:
        while ws.connected:
            ws.receive()
    finally:
        registry.discard(ws)
        current_app.logger.debug("Realtime subscriber closed")


# Sock.route's decorator returns None; register explicitly so subscribe stays callable
sock.route("/", bp=realtime_bp)(subscribe)
