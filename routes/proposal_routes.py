from flask import Blueprint, jsonify, request, current_app
from services_init import get_services
from services.errors import SchedulingError
from services.validation import parse_schedule_payload, parse_attendance, parse_window

proposal_bp = Blueprint('proposals', __name__)


@proposal_bp.route('/api/groups/<int:group_id>/votes', methods=['POST'])
def create_proposal(group_id):
    """Open a candidate schedule for voting"""
    try:
        fields = parse_schedule_payload(request.get_json(silent=True))
        result = get_services().proposal_service.create_proposal(group_id, fields)
        return jsonify(result), 201
    except SchedulingError as e:
        current_app.logger.warning(f"Error creating proposal for group {group_id}: {e.message}")
        return jsonify({'success': False, 'message': e.message}), e.status_code
    except Exception as e:
        current_app.logger.error(f"Error creating proposal for group {group_id}: {e}", exc_info=True)
        return jsonify({'success': False, 'message': 'Internal server error'}), 500


@proposal_bp.route('/api/groups/<int:group_id>/votes', methods=['GET'])
def list_proposals(group_id):
    try:
        return jsonify(get_services().proposal_service.list_proposals(group_id))
    except SchedulingError as e:
        current_app.logger.warning(f"Error listing proposals of group {group_id}: {e.message}")
        return jsonify({'success': False, 'message': e.message}), e.status_code
    except Exception as e:
        current_app.logger.error(f"Error listing proposals of group {group_id}: {e}", exc_info=True)
        return jsonify({'success': False, 'message': 'Internal server error'}), 500


@proposal_bp.route('/api/groups/<int:group_id>/votes/<int:vote_id>', methods=['GET'])
def get_proposal(group_id, vote_id):
    try:
        return jsonify(get_services().proposal_service.get_proposal(group_id, vote_id))
    except SchedulingError as e:
        current_app.logger.warning(f"Error getting proposal {vote_id} of group {group_id}: {e.message}")
        return jsonify({'success': False, 'message': e.message}), e.status_code
    except Exception as e:
        current_app.logger.error(f"Error getting proposal {vote_id} of group {group_id}: {e}", exc_info=True)
        return jsonify({'success': False, 'message': 'Internal server error'}), 500


@proposal_bp.route('/api/groups/<int:group_id>/votes/<int:vote_id>', methods=['DELETE'])
def delete_proposal(group_id, vote_id):
    try:
        return jsonify(get_services().proposal_service.delete_proposal(group_id, vote_id))
    except SchedulingError as e:
        current_app.logger.warning(f"Error deleting proposal {vote_id} of group {group_id}: {e.message}")
        return jsonify({'success': False, 'message': e.message}), e.status_code
    except Exception as e:
        current_app.logger.error(f"Error deleting proposal {vote_id} of group {group_id}: {e}", exc_info=True)
        return jsonify({'success': False, 'message': 'Internal server error'}), 500


@proposal_bp.route('/api/groups/<int:group_id>/votes/<int:vote_id>/results', methods=['POST'])
def cast_vote(group_id, vote_id):
    """Record a member's attendance answer; voting again replaces it"""
    try:
        user_id, attendance = parse_attendance(request.get_json(silent=True))
        result = get_services().proposal_service.cast_vote(group_id, vote_id, user_id, attendance)
        return jsonify(result)
    except SchedulingError as e:
        current_app.logger.warning(f"Error voting on proposal {vote_id} of group {group_id}: {e.message}")
        return jsonify({'success': False, 'message': e.message}), e.status_code
    except Exception as e:
        current_app.logger.error(f"Error voting on proposal {vote_id} of group {group_id}: {e}", exc_info=True)
        return jsonify({'success': False, 'message': 'Internal server error'}), 500


@proposal_bp.route('/api/groups/<int:group_id>/votes/<int:vote_id>/confirm', methods=['POST'])
def confirm_proposal(group_id, vote_id):
    """
    Turn the proposal into a group schedule and close every proposal of the group.

    The body carries the day the client shows as requestStartDateTime /
    requestEndDateTime (a local day converted to UTC).
    """
    try:
        body = request.get_json(silent=True) or {}
        request_start, request_end = parse_window(body, 'requestStartDateTime', 'requestEndDateTime')
        result = get_services().proposal_service.confirm_proposal(group_id, vote_id, request_start, request_end)
        return jsonify(result), 201
    except SchedulingError as e:
        current_app.logger.warning(f"Error confirming proposal {vote_id} of group {group_id}: {e.message}")
        return jsonify({'success': False, 'message': e.message}), e.status_code
    except Exception as e:
        current_app.logger.error(f"Error confirming proposal {vote_id} of group {group_id}: {e}", exc_info=True)
        return jsonify({'success': False, 'message': 'Internal server error'}), 500
