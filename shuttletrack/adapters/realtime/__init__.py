from .http_gtfs_realtime_location_feed import HttpGtfsRealtimeLocationFeed

__all__ = ["HttpGtfsRealtimeLocationFeed"]
