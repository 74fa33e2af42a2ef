"""
Error taxonomy for the study planner.

Overlap and range rejections are not exceptions: the validator returns a
ConflictError value (see studyplan.timetable.model).
"""


class StudyPlanError(Exception):
    """Base class for study planner errors."""

    pass


class PersistenceError(StudyPlanError):
    """Raised when the timetable could not be written to local storage."""

    pass


class NotFoundError(StudyPlanError):
    """Raised when an operation references a study block id that does not exist."""

    def __init__(self, block_id: str):
        self.block_id = block_id
        super().__init__(f"Study block not found: {block_id}")
