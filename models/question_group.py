"""CRUD for question_groups and their question memberships."""
import uuid

from db.database import query_db, execute_db, update_db

DEFAULT_COLOR = '#1890ff'
DEFAULT_ICON = 'folder'


class GroupNotFound(LookupError):
    """No question group with the given id."""


def _with_question_ids(group):
    if group is not None:
        rows = query_db(
            "SELECT question_id FROM question_group_relations WHERE group_id=? ORDER BY rowid",
            (group['id'],),
        )
        group['question_ids'] = [r['question_id'] for r in rows]
    return group


def create(name, description='', parent_id=None, color=DEFAULT_COLOR,
           icon=DEFAULT_ICON, group_id=None):
    group_id = group_id or f'group_{uuid.uuid4().hex}'
    execute_db(
        """INSERT INTO question_groups (id, name, description, parent_id, color, icon)
           VALUES (?, ?, ?, ?, ?, ?)""",
        (group_id, name, description, parent_id, color, icon),
    )
    return group_id


def get_by_id(group_id):
    return _with_question_ids(
        query_db("SELECT * FROM question_groups WHERE id=?", (group_id,), one=True))


def get_by_name(name):
    return _with_question_ids(
        query_db("SELECT * FROM question_groups WHERE name=? ORDER BY rowid LIMIT 1",
                 (name,), one=True))


def get_all():
    rows = query_db("SELECT * FROM question_groups ORDER BY created_at DESC, rowid DESC")
    return [_with_question_ids(g) for g in rows]


def get_or_create(name):
    """Id of the group named `name`, created on first use."""
    group = get_by_name(name)
    if group:
        return group['id']
    return create(name, description=f'Auto-created group: {name}')


def update(group_id, name, description='', parent_id=None, color=DEFAULT_COLOR,
           icon=DEFAULT_ICON):
    if parent_id == group_id:
        raise ValueError('a group cannot be its own parent')
    count = update_db(
        """UPDATE question_groups
           SET name=?, description=?, parent_id=?, color=?, icon=?,
               updated_at=CURRENT_TIMESTAMP
           WHERE id=?""",
        (name, description, parent_id, color, icon, group_id),
    )
    if count == 0:
        raise GroupNotFound(group_id)


def delete(group_id):
    """Remove a group; memberships cascade, questions stay."""
    return update_db("DELETE FROM question_groups WHERE id=?", (group_id,)) > 0


def add_question(group_id, question_id):
    execute_db(
        "INSERT OR IGNORE INTO question_group_relations (group_id, question_id) VALUES (?, ?)",
        (group_id, question_id),
    )


def remove_question(group_id, question_id):
    return update_db(
        "DELETE FROM question_group_relations WHERE group_id=? AND question_id=?",
        (group_id, question_id),
    ) > 0


def set_parent(group_id, parent_id):
    if parent_id == group_id:
        raise ValueError('a group cannot be its own parent')
    update_db("UPDATE question_groups SET parent_id=? WHERE id=?", (parent_id, group_id))
