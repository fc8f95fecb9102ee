"""Account directory: account records addressed by internal or CRM id."""

__version__ = "1.0.0"
