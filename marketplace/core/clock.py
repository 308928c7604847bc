from datetime import datetime

import pytz

from marketplace.core.config import settings


def default_clock() -> datetime:
    """Current time in the marketplace's configured timezone."""
    return datetime.now(pytz.timezone(settings.TIMEZONE))
