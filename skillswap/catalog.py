from sqlalchemy import text

from skillswap.errors import Forbidden, NotFound, parse_payload
from skillswap.schemas import SkillPayload
from skillswap.store import fetch_all, fetch_one, transaction


def escape_like(value):
    """Make %, _ and \\ match themselves in a LIKE pattern escaped with \\."""
    return value.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


class SkillCatalog:
    """Skill listings, each owned by exactly one user."""

    def __init__(self, session):
        self.session = session

    def list(self, category=None, skill_type=None, search=None, user_id=None):
        query = """
        SELECT s.*, u.name AS user_name, u.photo AS user_photo, u.location AS user_location
        FROM skills s
        JOIN users u ON s.user_id = u.id
        WHERE 1=1
        """
        params = {}

        if category:
            query += " AND s.category = :category"
            params['category'] = category

        if skill_type:
            query += " AND s.skill_type = :skill_type"
            params['skill_type'] = skill_type

        if search:
            query += (
                " AND (casefold(s.title) LIKE :search ESCAPE '\\'"
                " OR casefold(COALESCE(s.description, '')) LIKE :search ESCAPE '\\')"
            )
            params['search'] = f"%{escape_like(search.casefold())}%"

        if user_id is not None:
            query += " AND s.user_id = :user_id"
            params['user_id'] = user_id

        query += " ORDER BY s.created_at DESC, s.id DESC"
        return fetch_all(self.session, query, params)

    def list_categories(self):
        rows = fetch_all(self.session, "SELECT DISTINCT category FROM skills ORDER BY category")
        return [row['category'] for row in rows]

    def get(self, skill_id):
        return fetch_one(self.session, "SELECT * FROM skills WHERE id = :skill_id", {'skill_id': skill_id})

    def create(self, owner_id, data):
        payload = parse_payload(SkillPayload, data)

        insert_query = """
        INSERT INTO skills (user_id, title, description, category, skill_type, level)
        VALUES (:user_id, :title, :description, :category, :skill_type, :level);
        """
        with transaction(self.session, 'Failed to create skill'):
            result = self.session.execute(text(insert_query), {'user_id': owner_id, **payload.model_dump()})
            skill_id = result.lastrowid

        print(f"[DEBUG] User {owner_id} created skill {skill_id} ({payload.skill_type})")
        return self.get(skill_id)

    def update(self, skill_id, owner_id, data):
        self._get_owned(skill_id, owner_id, 'update')
        payload = parse_payload(SkillPayload, data)

        update_query = """
        UPDATE skills
        SET title = :title, description = :description, category = :category,
            skill_type = :skill_type, level = :level
        WHERE id = :skill_id;
        """
        with transaction(self.session, 'Failed to update skill'):
            self.session.execute(text(update_query), {'skill_id': skill_id, **payload.model_dump()})
        return self.get(skill_id)

    def delete(self, skill_id, owner_id):
        self._get_owned(skill_id, owner_id, 'delete')

        with transaction(
            self.session,
            'Failed to delete skill',
            conflict_message='Skill is part of a swap request and cannot be deleted',
        ):
            self.session.execute(text("DELETE FROM skills WHERE id = :skill_id"), {'skill_id': skill_id})
        print(f"[DEBUG] User {owner_id} deleted skill {skill_id}")

    def _get_owned(self, skill_id, owner_id, action):
        skill = self.get(skill_id)
        if not skill:
            raise NotFound('Skill not found')
        if skill['user_id'] != owner_id:
            raise Forbidden(f'Not authorized to {action} this skill')
        return skill
