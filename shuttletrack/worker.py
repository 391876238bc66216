from __future__ import annotations

import logging
import os
import threading

from shuttletrack.adapters.api.dependencies import (
    build_location_feed,
    build_model_service,
    build_tracking_manager,
)
from shuttletrack.domain.models import Prediction

logger = logging.getLogger("shuttletrack.worker")


def _log_prediction(prediction: Prediction) -> None:
    logger.info(
        "vehicle=%s index=%d lat=%f lon=%f angle=%.1f",
        prediction.vehicle_id,
        prediction.index,
        prediction.point.lat,
        prediction.point.lon,
        prediction.angle,
    )


def main() -> None:
    """Run the location feed and the prediction loop without the HTTP API."""

    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    model_service = build_model_service()
    manager = build_tracking_manager(model_service)
    manager.subscribe(_log_prediction)

    feed = build_location_feed(model_service)
    if feed is None:
        logger.error("Neither REPLAY_ENABLED nor GTFS_RT_VEHICLE_POSITIONS_URL set")
        return
    feed.subscribe(manager.on_location)

    feed_thread = threading.Thread(target=feed.run, name="location-feed", daemon=True)
    feed_thread.start()
    try:
        if manager.enabled:
            manager.run()
        else:
            feed_thread.join()
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    finally:
        manager.stop()
        feed.stop()
        feed_thread.join(timeout=5.0)


if __name__ == "__main__":
    main()
