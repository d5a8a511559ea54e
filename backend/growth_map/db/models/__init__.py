"""ORM models exposed for metadata discovery."""
from growth_map.db.models.goal import Goal
from growth_map.db.models.progress_log import ProgressLog
from growth_map.db.models.skill_tree import SkillTree, SkillTreeNode
from growth_map.db.models.sprint import Sprint, SprintTask

__all__ = [
    "Goal",
    "ProgressLog",
    "SkillTree",
    "SkillTreeNode",
    "Sprint",
    "SprintTask",
]
