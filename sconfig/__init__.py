# ==============================================
# sconfig: plugin configuration & storage persistence
# ==============================================
#
# Package Structure:
#
# sconfig/
# ├── properties/       # Human-editable YAML properties (template, repair, reconcile)
# ├── storage/          # Key-value data on JSON files or SQLite tables
# ├── config.py         # AppConfig from environment / .env
# ├── diagnostics.py    # Verbosity handle passed to every store
# ├── errors.py         # Exception types
# ├── lifecycle.py      # StoreState
# ├── logging_config.py # Console logging setup
# ├── paths.py          # config/, playerdata/, plugindata/, worlds/ layout
# ├── examples.py       # Example schema, template and defaults
# └── plugin.py         # Host-facing facade and store registry
#
# ==============================================

__version__ = "0.1.0"
