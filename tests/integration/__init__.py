"""Integration tests for RunHare.

End-to-end flows where a client sends through a mock event service that
relays each delivery to a consumer dispatcher.
"""
