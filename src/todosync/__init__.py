"""todosync - optimistic task list client for local and hosted backends."""

__version__ = "0.3.0"
