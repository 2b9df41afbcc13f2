"""Terminal pipeline failures. Each carries a message fit to show the user."""


class PipelineError(Exception):
    """Raised when the pipeline cannot produce any result."""


class ExpansionError(PipelineError):
    """The perspective expander call failed outright."""


class NoSolutionsError(PipelineError):
    """No candidates existed and every direct fallback backend failed."""
