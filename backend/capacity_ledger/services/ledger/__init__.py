from capacity_ledger.services.ledger.ledger import CapacityLedger
from capacity_ledger.services.ledger.aggregation import AggregationEngine
from capacity_ledger.services.ledger.conflicts import ConflictValidator
from capacity_ledger.services.ledger.overview import OverviewProjector
from capacity_ledger.core.config import Settings


def build_engine(settings: Settings) -> tuple[CapacityLedger, AggregationEngine, ConflictValidator]:
    ledger = CapacityLedger(settings.WORKING_DAYS_DIVISOR)
    aggregation = AggregationEngine(ledger, settings.SKILL_ORDER, settings.ABSENCE_PROJECT_PREFIX)
    validator = ConflictValidator(settings.WORKING_DAYS_DIVISOR, count_absences=settings.CONFLICTS_COUNT_ABSENCES)
    return ledger, aggregation, validator
