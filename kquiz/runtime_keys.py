from __future__ import annotations

DB_POOL_KEY = "db_pool"
KV_STORE_KEY = "kv_store"
COMMAND_ROUTER_KEY = "command_router"
BUCKETS_KEY = "buckets"
