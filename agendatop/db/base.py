# Garante o registro de TODAS as models no mesmo registry
from agendatop.db.base_class import Base  # noqa
from agendatop.models.appointment import Appointment  # noqa
from agendatop.models.audit_log import AuditLog  # noqa
from agendatop.models.company import Company, CompanyAddress  # noqa
from agendatop.models.customer import Customer  # noqa
from agendatop.models.finance import FinancialCategory, LedgerEntry  # noqa
from agendatop.models.service import Service  # noqa
from agendatop.models.user import User  # noqa
from agendatop.models.working_hours import WorkingHourSlot  # noqa
