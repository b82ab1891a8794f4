from flask import Blueprint, jsonify, request
from skillswap import db
from skillswap.auth import current_user_id, login_required
from skillswap.catalog import SkillCatalog

skill_bp = Blueprint('skills', __name__)


# Get all skills with filters
@skill_bp.route('', methods=['GET'])
@login_required
def list_skills():
    skills = SkillCatalog(db.session).list(
        category=request.args.get('category'),
        skill_type=request.args.get('skill_type'),
        search=request.args.get('search'),
        user_id=request.args.get('user_id', type=int),
    )
    print(f"[DEBUG] Retrieved {len(skills)} skills for filters {dict(request.args)}")
    return jsonify(skills), 200


@skill_bp.route('/categories', methods=['GET'])
@login_required
def list_categories():
    return jsonify(SkillCatalog(db.session).list_categories()), 200


@skill_bp.route('', methods=['POST'])
@login_required
def create_skill():
    skill = SkillCatalog(db.session).create(current_user_id(), request.get_json(silent=True))
    return jsonify({'message': 'Skill created successfully', 'skill': skill}), 201


@skill_bp.route('/<int:skill_id>', methods=['PUT'])
@login_required
def update_skill(skill_id):
    skill = SkillCatalog(db.session).update(skill_id, current_user_id(), request.get_json(silent=True))
    return jsonify({'message': 'Skill updated successfully', 'skill': skill}), 200


@skill_bp.route('/<int:skill_id>', methods=['DELETE'])
@login_required
def delete_skill(skill_id):
    SkillCatalog(db.session).delete(skill_id, current_user_id())
    return jsonify({'message': 'Skill deleted successfully'}), 200
