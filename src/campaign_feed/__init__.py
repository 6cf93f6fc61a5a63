from campaign_feed.pipeline import map_rows

__all__ = ["map_rows"]
