"""Platform-owned workflow services.

These services are the import surface for the web and CLI clients.
"""

from .admin_service import (
    add_affiliation,
    clear_decisions,
    get_affiliation,
    list_affiliations,
    require_admin,
    require_affiliation,
)
from .announcement_service import (
    announce_match,
    apply_announcement,
    reschedule_pending_announcements,
    schedule_announcement,
)
from .comper_service import (
    get_comper,
    get_submission,
    list_compers_for_group,
    submit_preferences,
)
from .decision_service import get_default_scheduler, record_group_decision
from .delay_service import get_delay_config, random_delay_ms, set_delay_config
from .feed_service import format_update, list_update_feed
