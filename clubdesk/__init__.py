"""Club back office on SQLite: members, announcements, contests, events, teams and one-time codes."""

__version__ = "0.1.0"