"""Motion API access."""

from github_motion_relay.motion.client import (
    MotionClient,
    MotionProject,
    MotionStatus,
    MotionWorkspace,
    TaskData,
)

__all__ = ["MotionClient", "MotionProject", "MotionStatus", "MotionWorkspace", "TaskData"]
