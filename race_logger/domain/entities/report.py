from __future__ import annotations


class ReportRules:
    """Field report predicates."""

    __slots__ = ()

    def has_video(self) -> bool:
        return self.video_url is not None

    def athlete_display_name(self) -> str:
        return self.athlete_name or "Unknown Athlete"

    def is_linked_to_incident(self) -> bool:
        return self.incident_id is not None

    def is_from_fop_device(self) -> bool:
        return self.client_uuid is not None
