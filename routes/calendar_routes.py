from flask import Blueprint, jsonify, request, current_app
from services_init import get_services
from services.errors import SchedulingError
from services.validation import parse_window, parse_duration

calendar_bp = Blueprint('calendar', __name__)


@calendar_bp.route('/api/users/<int:user_id>/calendar', methods=['GET'])
def get_user_calendar(user_id):
    """Personal schedules plus the schedules of the user's groups"""
    try:
        start, end = parse_window(request.args)
        result = get_services().calendar_service.get_user_calendar(user_id, start, end)
        return jsonify(result)

    except SchedulingError as e:
        current_app.logger.warning(f"Error getting calendar of user {user_id}: {e.message}")
        return jsonify({'success': False, 'message': e.message}), e.status_code
    except Exception as e:
        current_app.logger.error(f"Error getting calendar of user {user_id}: {e}", exc_info=True)
        return jsonify({'success': False, 'message': 'Internal server error'}), 500


@calendar_bp.route('/api/groups/<int:group_id>/calendar', methods=['GET'])
def get_group_calendar(group_id):
    """Group schedules plus those of members sharing their calendar"""
    try:
        start, end = parse_window(request.args)
        result = get_services().calendar_service.get_group_calendar(group_id, start, end)
        return jsonify(result)

    except SchedulingError as e:
        current_app.logger.warning(f"Error getting calendar of group {group_id}: {e.message}")
        return jsonify({'success': False, 'message': e.message}), e.status_code
    except Exception as e:
        current_app.logger.error(f"Error getting calendar of group {group_id}: {e}", exc_info=True)
        return jsonify({'success': False, 'message': 'Internal server error'}), 500


@calendar_bp.route('/api/groups/<int:group_id>/calendar/summary', methods=['GET'])
def get_group_calendar_summary(group_id):
    """Same as the group calendar without titles, one occurrence per rule"""
    try:
        start, end = parse_window(request.args)
        result = get_services().calendar_service.get_group_calendar(group_id, start, end, summary=True)
        return jsonify(result)

    except SchedulingError as e:
        current_app.logger.warning(f"Error getting calendar summary of group {group_id}: {e.message}")
        return jsonify({'success': False, 'message': e.message}), e.status_code
    except Exception as e:
        current_app.logger.error(f"Error getting calendar summary of group {group_id}: {e}", exc_info=True)
        return jsonify({'success': False, 'message': 'Internal server error'}), 500


@calendar_bp.route('/api/groups/<int:group_id>/proposals', methods=['GET'])
def get_meeting_proposals(group_id):
    """Free time slots of the group, daytime slots first"""
    try:
        start, end = parse_window(request.args)
        duration = parse_duration(request.args)
        result = get_services().calendar_service.propose_meeting_times(group_id, start, end, duration)
        return jsonify(result)

    except SchedulingError as e:
        current_app.logger.warning(f"Error proposing meeting times for group {group_id}: {e.message}")
        return jsonify({'success': False, 'message': e.message}), e.status_code
    except Exception as e:
        current_app.logger.error(f"Error proposing meeting times for group {group_id}: {e}", exc_info=True)
        return jsonify({'success': False, 'message': 'Internal server error'}), 500
