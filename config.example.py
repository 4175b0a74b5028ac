# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "DAYLIST_APP_NAME": "App display name (default: daylist).",
    "DAYLIST_LOG_LEVEL": "Console logging level (default: WARNING; the log file always gets DEBUG).",
    # Paths (gitignored)
    "DAYLIST_DATA_DIR": "Local data directory for the database and logs (default: .local/daylist).",
    "DAYLIST_TASKS_DB_PATH": "SQLite path for tasks and categories (default: <data_dir>/daylist.sqlite3).",
    # Store
    "DAYLIST_STORE_TIMEOUT_SECONDS": "Timeout for one load/save call; 0 disables it (default: 10).",
    # Day view
    "DAYLIST_DEFAULT_FILTER_FIELD": "Place tasks on days by due_date or created_at (default: due_date).",
    "DAYLIST_CONFIRM_DELETE": "Ask before deleting a task in the console (true/false, default: true).",
}
