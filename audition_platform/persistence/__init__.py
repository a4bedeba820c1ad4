"""Platform-owned persistence layer (database and stores)."""

from .database import SCHEMA_VERSION, connect, get_connection, init_db, transaction
from .affiliation_store import AffiliationStore
from .comper_store import ComperStore
from .delay_store import DelayStore
from .update_store import UpdateStore
