from flask import Blueprint, jsonify, request, current_app
from services_init import get_services
from services.errors import SchedulingError
from services.validation import parse_schedule_payload, parse_request_window

schedule_bp = Blueprint('schedules', __name__)


# Personal schedules

@schedule_bp.route('/api/users/<int:user_id>/calendar', methods=['POST'])
def create_personal_schedule(user_id):
    try:
        body = request.get_json(silent=True)
        fields = parse_schedule_payload(body)
        request_window = parse_request_window(body)
        result = get_services().schedule_service.create_personal_schedule(user_id, fields, request_window)
        return jsonify(result), 201
    except SchedulingError as e:
        current_app.logger.warning(f"Error creating schedule for user {user_id}: {e.message}")
        return jsonify({'success': False, 'message': e.message}), e.status_code
    except Exception as e:
        current_app.logger.error(f"Error creating schedule for user {user_id}: {e}", exc_info=True)
        return jsonify({'success': False, 'message': 'Internal server error'}), 500


@schedule_bp.route('/api/users/<int:user_id>/calendar/<int:schedule_id>', methods=['GET'])
def get_personal_schedule(user_id, schedule_id):
    try:
        return jsonify(get_services().schedule_service.get_personal_schedule(user_id, schedule_id))
    except SchedulingError as e:
        current_app.logger.warning(f"Error getting schedule {schedule_id} of user {user_id}: {e.message}")
        return jsonify({'success': False, 'message': e.message}), e.status_code
    except Exception as e:
        current_app.logger.error(f"Error getting schedule {schedule_id} of user {user_id}: {e}", exc_info=True)
        return jsonify({'success': False, 'message': 'Internal server error'}), 500


@schedule_bp.route('/api/users/<int:user_id>/calendar/<int:schedule_id>', methods=['PUT'])
def update_personal_schedule(user_id, schedule_id):
    try:
        body = request.get_json(silent=True)
        fields = parse_schedule_payload(body)
        request_window = parse_request_window(body)
        result = get_services().schedule_service.update_personal_schedule(
            user_id, schedule_id, fields, request_window
        )
        return jsonify(result)
    except SchedulingError as e:
        current_app.logger.warning(f"Error updating schedule {schedule_id} of user {user_id}: {e.message}")
        return jsonify({'success': False, 'message': e.message}), e.status_code
    except Exception as e:
        current_app.logger.error(f"Error updating schedule {schedule_id} of user {user_id}: {e}", exc_info=True)
        return jsonify({'success': False, 'message': 'Internal server error'}), 500


@schedule_bp.route('/api/users/<int:user_id>/calendar/<int:schedule_id>', methods=['DELETE'])
def delete_personal_schedule(user_id, schedule_id):
    try:
        return jsonify(get_services().schedule_service.delete_personal_schedule(user_id, schedule_id))
    except SchedulingError as e:
        current_app.logger.warning(f"Error deleting schedule {schedule_id} of user {user_id}: {e.message}")
        return jsonify({'success': False, 'message': e.message}), e.status_code
    except Exception as e:
        current_app.logger.error(f"Error deleting schedule {schedule_id} of user {user_id}: {e}", exc_info=True)
        return jsonify({'success': False, 'message': 'Internal server error'}), 500


# Group schedules

@schedule_bp.route('/api/groups/<int:group_id>/calendar', methods=['POST'])
def create_group_schedule(group_id):
    try:
        body = request.get_json(silent=True)
        fields = parse_schedule_payload(body)
        request_window = parse_request_window(body)
        result = get_services().schedule_service.create_group_schedule(group_id, fields, request_window)
        return jsonify(result), 201
    except SchedulingError as e:
        current_app.logger.warning(f"Error creating schedule for group {group_id}: {e.message}")
        return jsonify({'success': False, 'message': e.message}), e.status_code
    except Exception as e:
        current_app.logger.error(f"Error creating schedule for group {group_id}: {e}", exc_info=True)
        return jsonify({'success': False, 'message': 'Internal server error'}), 500


@schedule_bp.route('/api/groups/<int:group_id>/calendar/<int:schedule_id>', methods=['GET'])
def get_group_schedule(group_id, schedule_id):
    try:
        return jsonify(get_services().schedule_service.get_group_schedule(group_id, schedule_id))
    except SchedulingError as e:
        current_app.logger.warning(f"Error getting schedule {schedule_id} of group {group_id}: {e.message}")
        return jsonify({'success': False, 'message': e.message}), e.status_code
    except Exception as e:
        current_app.logger.error(f"Error getting schedule {schedule_id} of group {group_id}: {e}", exc_info=True)
        return jsonify({'success': False, 'message': 'Internal server error'}), 500


@schedule_bp.route('/api/groups/<int:group_id>/calendar/<int:schedule_id>', methods=['PUT'])
def update_group_schedule(group_id, schedule_id):
    try:
        body = request.get_json(silent=True)
        fields = parse_schedule_payload(body)
        request_window = parse_request_window(body)
        result = get_services().schedule_service.update_group_schedule(
            group_id, schedule_id, fields, request_window
        )
        return jsonify(result)
    except SchedulingError as e:
        current_app.logger.warning(f"Error updating schedule {schedule_id} of group {group_id}: {e.message}")
        return jsonify({'success': False, 'message': e.message}), e.status_code
    except Exception as e:
        current_app.logger.error(f"Error updating schedule {schedule_id} of group {group_id}: {e}", exc_info=True)
        return jsonify({'success': False, 'message': 'Internal server error'}), 500


@schedule_bp.route('/api/groups/<int:group_id>/calendar/<int:schedule_id>', methods=['DELETE'])
def delete_group_schedule(group_id, schedule_id):
    try:
        return jsonify(get_services().schedule_service.delete_group_schedule(group_id, schedule_id))
    except SchedulingError as e:
        current_app.logger.warning(f"Error deleting schedule {schedule_id} of group {group_id}: {e.message}")
        return jsonify({'success': False, 'message': e.message}), e.status_code
    except Exception as e:
        current_app.logger.error(f"Error deleting schedule {schedule_id} of group {group_id}: {e}", exc_info=True)
        return jsonify({'success': False, 'message': 'Internal server error'}), 500
