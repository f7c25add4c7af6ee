# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit a real .env.

This file exists to make the repo self-documenting even without opening the settings module.
"""

ENV_VARS = {
    # App / logging
    "TODO_APP_NAME": "App display name (default: todo).",
    "TODO_LOG_LEVEL": "Console logging level (default: INFO).",
    "TODO_DATA_DIR": "Local data dir for logs (default: .local/todo).",
    # Remote API
    "TODO_API_URL": "GraphQL endpoint. When unset the app runs against an offline in-memory API.",
    "TODO_API_CONNECT_TIMEOUT_SECONDS": "HTTP connect timeout (default: 5).",
    "TODO_API_READ_TIMEOUT_SECONDS": "HTTP read timeout (default: 15, never below connect).",
    # Cache reconciliation
    "TODO_PATCH_APPLIES_FIELDS": "Write toggle results into the cached todo (default: false).",
    "TODO_DEDUPE_INSERTS": "Replace a cached todo with the same id on insert (default: false).",
}

EXAMPLE_DOTENV = """
TODO_API_URL=http://localhost:4000/graphql
TODO_LOG_LEVEL=INFO
TODO_PATCH_APPLIES_FIELDS=false
TODO_DEDUPE_INSERTS=false
"""
