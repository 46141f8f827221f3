"""GitHub → Motion issue relay.

Receives GitHub ``issues`` webhook deliveries and keeps one Motion task per
GitHub issue, inside one Motion project per repository:
- configuration loaded from `.env`
- structured logging
- JSON-file mapping state with self-healing when Motion objects disappear
"""

__version__ = "0.1.0"

from github_motion_relay.config import RelaySettings

__all__ = ["__version__", "RelaySettings"]
