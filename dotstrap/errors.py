class SetupError(RuntimeError):
    """A fatal, user-facing setup failure. The run stops when one is raised."""
