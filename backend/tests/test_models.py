from growth_map.db.base import Base
from growth_map.db import models  # noqa: F401  ensure models are loaded


def test_metadata_contains_planning_tables() -> None:
    table_names = set(Base.metadata.tables.keys())

    assert {
        "goals",
        "skill_trees",
        "skill_tree_nodes",
        "sprints",
        "sprint_tasks",
        "progress_logs",
    } == table_names


def test_node_paths_are_unique_per_tree() -> None:
    constraints = {constraint.name for constraint in Base.metadata.tables["skill_tree_nodes"].constraints}

    assert "uq_skill_tree_nodes_path" in constraints


def test_progress_log_sprint_link_survives_sprint_deletion() -> None:
    (foreign_key,) = Base.metadata.tables["progress_logs"].c.sprint_id.foreign_keys

    assert foreign_key.ondelete == "SET NULL"
