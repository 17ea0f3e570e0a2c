from .broadcaster import BoardBroadcaster

__all__ = ["BoardBroadcaster"]
