from race_logger.broadcasting.broadcaster import (
    STREAMS,
    Broadcaster,
    DeletedRecord,
    NullBroadcaster,
    RecordingBroadcaster,
    RedisBroadcaster,
    build_broadcaster,
    build_message,
)

__all__ = [
    "STREAMS",
    "Broadcaster",
    "DeletedRecord",
    "NullBroadcaster",
    "RecordingBroadcaster",
    "RedisBroadcaster",
    "build_broadcaster",
    "build_message",
]
