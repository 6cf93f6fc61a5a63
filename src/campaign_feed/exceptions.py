class CampaignFeedError(Exception):
    """Base exception for campaign feed errors."""
    pass

class ConfigError(CampaignFeedError):
    """Configuration loading specific errors."""
    pass

class DataSourceError(CampaignFeedError):
    """Sheet fetch / CSV parsing specific errors."""
    pass
