"""Change notification after repository writes.

Delivery is fire-and-forget: a broadcaster NEVER raises into the write path.
Streams are resolved through an explicit struct class -> stream mapping.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Literal, Protocol

import redis
from loguru import logger

from race_logger.db import structs
from race_logger.db.struct import Struct

Action = Literal["created", "updated", "deleted"]

STREAMS: dict[type[Struct], str] = {
    structs.User: "users",
    structs.Role: "roles",
    structs.Session: "sessions",
    structs.MagicLink: "magic_links",
    structs.Competition: "competitions",
    structs.RaceType: "race_types",
    structs.Race: "races",
    structs.RaceTypeLocationTemplate: "race_type_location_templates",
    structs.RaceLocation: "race_locations",
    structs.Athlete: "athletes",
    structs.RaceParticipation: "race_participations",
    structs.Penalty: "penalties",
    structs.Incident: "incidents",
    structs.Report: "reports",
}


@dataclass(frozen=True)
class DeletedRecord:
    """Payload for ``deleted`` events: the row is gone, only its identity remains."""

    struct_class: type[Struct]
    id: int


Payload = Struct | DeletedRecord


def stream_for(payload: Payload) -> str | None:
    struct_class = payload.struct_class if isinstance(payload, DeletedRecord) else type(payload)
    return STREAMS.get(struct_class)


def build_message(action: Action, payload: Payload) -> dict[str, Any]:
    """JSON-ready message: {"action", "entity", "id", "data"}."""
    if isinstance(payload, DeletedRecord):
        return {"action": action, "entity": payload.struct_class.__name__, "id": payload.id, "data": None}
    return {
        "action": action,
        "entity": type(payload).__name__,
        "id": getattr(payload, "id", None),
        "data": payload.model_dump(mode="json"),
    }


class Broadcaster(Protocol):
    def broadcast(self, action: Action, payload: Payload) -> None: ...


class NullBroadcaster:
    """Discards every event."""

    def broadcast(self, action: Action, payload: Payload) -> None:
        return None


@dataclass
class RecordingBroadcaster:
    """Keeps events in memory, in order."""

    events: list[tuple[Action, Payload]] = field(default_factory=list)

    def broadcast(self, action: Action, payload: Payload) -> None:
        self.events.append((action, payload))

    def actions(self) -> list[Action]:
        return [action for action, _ in self.events]

    def clear(self) -> None:
        self.events.clear()


class RedisBroadcaster:
    """Publishes change messages on ``{prefix}:{stream}`` Redis channels."""

    def __init__(self, client: redis.Redis, prefix: str = "race_logger"):
        self.client = client
        self.prefix = prefix

    def channel_for(self, payload: Payload) -> str | None:
        stream = stream_for(payload)
        return f"{self.prefix}:{stream}" if stream else None

    def broadcast(self, action: Action, payload: Payload) -> None:
        channel = self.channel_for(payload)
        if channel is None:
            logger.bind(payload_type=type(payload).__name__).debug("No broadcast stream registered, skipping")
            return
        try:
            message = json.dumps(build_message(action, payload), default=str)
            self.client.publish(channel, message)
            logger.bind(channel=channel, action=action).debug("Broadcast published")
        except redis.RedisError as e:
            logger.bind(channel=channel, action=action, error=str(e)).warning("Broadcast failed (non-fatal)")
        except (TypeError, ValueError) as e:
            logger.bind(channel=channel, action=action, error=str(e)).warning("Broadcast payload not serializable")


def build_broadcaster(settings: Any) -> Broadcaster:
    """Redis broadcaster when BROADCAST_ENABLED, otherwise a no-op."""
    if not settings.broadcast_enabled:
        return NullBroadcaster()
    logger.info(f"Broadcasting repository changes to Redis ({settings.redis_url})")
    return RedisBroadcaster(redis.from_url(settings.redis_url, decode_responses=True), prefix=settings.broadcast_channel_prefix)
