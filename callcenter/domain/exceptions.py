"""Domain exceptions raised by the assignment engine.

Two families matter to callers. ``NothingToDoError`` subclasses describe
routine emptiness (no roster today, no cases left) and are safe to ignore;
everything else means the request was refused and needs correcting.
"""


class AssignmentEngineError(Exception):
    """Base class for every error raised by the engine."""

    kind = "assignment_error"

    def __init__(self, detail: str = "Assignment engine error"):
        self.detail = detail
        super().__init__(detail)


class NothingToDoError(AssignmentEngineError):
    """Preconditions are empty; there is simply no work to do."""

    kind = "nothing_to_do"


class NoAgentsAvailableError(NothingToDoError):
    kind = "no_agents"

    def __init__(self, detail: str = "No agents available for assignment"):
        super().__init__(detail)


class NoCasesAvailableError(NothingToDoError):
    kind = "no_cases"

    def __init__(self, detail: str = "No unassigned cases available"):
        super().__init__(detail)


class SuggestionUnavailableError(NothingToDoError):
    kind = "no_data_to_suggest"

    def __init__(self, detail: str = "No roster or cases to suggest a config from"):
        super().__init__(detail)


class ConfigNotFoundError(AssignmentEngineError):
    kind = "config_not_found"

    def __init__(self, detail: str = "Config not found"):
        super().__init__(detail)


class ConfigStateError(AssignmentEngineError):
    """The config is in the wrong lifecycle state for the operation."""

    kind = "config_state"

    def __init__(self, detail: str = "Config is in the wrong state"):
        super().__init__(detail)


class ConfigAlreadyUsedError(ConfigStateError):
    kind = "config_already_used"

    def __init__(self, detail: str = "Config has already been used for assignment"):
        super().__init__(detail)


class InvalidPercentagesError(AssignmentEngineError):
    kind = "invalid_percentages"

    def __init__(self, detail: str = "Percentages must sum to 100"):
        super().__init__(detail)


class AgentNotFoundError(AssignmentEngineError):
    kind = "agent_not_found"

    def __init__(self, detail: str = "Agent not found"):
        super().__init__(detail)


class LevelUnchangedError(AssignmentEngineError):
    kind = "level_unchanged"

    def __init__(self, detail: str = "Agent already has this level"):
        super().__init__(detail)


class RosterLockedError(AssignmentEngineError):
    kind = "roster_locked"

    def __init__(self, detail: str = "Duty roster entry can no longer be changed"):
        super().__init__(detail)


class InvalidDateRangeError(AssignmentEngineError):
    kind = "invalid_date_range"

    def __init__(self, detail: str = "End date must not be before start date"):
        super().__init__(detail)
