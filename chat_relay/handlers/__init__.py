"""Transport-side handlers around the session relay.

connections.py:
    Admission control (max concurrent WebSocket connections).

limits.py:
    Sliding-window rate limiter used per connection.

history.py:
    Transcript lookup for the history endpoint.

websocket/:
    Chat socket handling: session key, outbound queue, message loop,
    idle/max-duration watchdog, and rejection helpers.
"""
