"""
Service wiring.

Services are built once per Flask app by init_services() and looked up by the
routes through get_services().
"""

from dataclasses import dataclass

from flask import current_app

from db import DatabaseSession
from services.calendar_service import CalendarService
from services.cleanup_scheduler import CleanupScheduler
from services.proposal_service import ProposalService
from services.recurrence import RecurrenceEvaluator
from services.schedule_service import ScheduleService

EXTENSION_KEY = 'scheduling'


@dataclass
class Services:
    db: DatabaseSession
    calendar_service: CalendarService
    schedule_service: ScheduleService
    proposal_service: ProposalService
    cleanup_scheduler: CleanupScheduler


def init_services(app, db: DatabaseSession) -> Services:
    """Build the services from app.config and attach them to the app."""
    config = app.config
    evaluator = RecurrenceEvaluator(max_occurrences=config['MAX_OCCURRENCES_PER_RULE'])

    services = Services(
        db=db,
        calendar_service=CalendarService(
            db, evaluator,
            daytime_start_offset_hours=config['DAYTIME_START_OFFSET_HOURS'],
            daytime_end_offset_hours=config['DAYTIME_END_OFFSET_HOURS'],
        ),
        schedule_service=ScheduleService(db, evaluator, week_starts_on=config['WEEK_STARTS_ON']),
        proposal_service=ProposalService(
            db, evaluator,
            voting_days=config['PROPOSAL_VOTING_DAYS'],
            week_starts_on=config['WEEK_STARTS_ON'],
        ),
        cleanup_scheduler=CleanupScheduler(db, retention_months=config['CLEANUP_RETENTION_MONTHS']),
    )
    app.extensions[EXTENSION_KEY] = services
    return services


def get_services() -> Services:
    return current_app.extensions[EXTENSION_KEY]
