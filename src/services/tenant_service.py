"""Tenant registry: onboarding, contract edits, vacating and login."""

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, NamedTuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.models.building import Building
from src.models.room import Room
from src.models.tenant import Tenant, TenantStatus
from src.services.credentials import (
    TenantCredentials,
    generate_building_code,
    generate_tenant_credentials,
    hash_password,
    verify_password,
)
from src.services.errors import ConflictError, NotAuthorizedError, NotFoundError, ValidationError
from src.services.rent_ledger import BillingTerms, TenantTerms

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset(
    {"name", "phone", "rent", "maintenance", "advance_paid", "agreement_start", "agreement_end"}
)


class CreatedTenant(NamedTuple):
    """New tenant plus the one-time plaintext credentials to hand over."""

    tenant: Tenant
    credentials: TenantCredentials


def parse_amount(value: Any, field: str, allow_zero: bool = True) -> Decimal:
    """Convert form/JSON input to a non-negative Decimal.

    Amounts are stored with two decimal places, so finer values are rejected
    rather than rounded.

    Raises:
        ValidationError: If value is missing, not a number, has sub-cent
            precision, is negative, or is zero when allow_zero is False
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        if allow_zero:
            return Decimal("0")
        raise ValidationError(f"{field} is required.")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation as e:
        raise ValidationError(f"{field} must be a number.") from e
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a number.")
    if amount.as_tuple().exponent < -2:
        raise ValidationError(f"{field} cannot have more than 2 decimal places.")
    if amount < 0 or (amount == 0 and not allow_zero):
        raise ValidationError(
            f"{field} must be greater than zero." if not allow_zero else f"{field} cannot be negative."
        )
    return amount


def terms_of(tenant: Tenant) -> BillingTerms:
    return BillingTerms(
        monthly_rent=tenant.rent or Decimal("0"),
        monthly_maintenance=tenant.maintenance or Decimal("0"),
    )


def tenant_terms(tenant: Tenant) -> TenantTerms:
    return TenantTerms(tenant_id=tenant.id, terms=terms_of(tenant), is_active=tenant.is_active)


def _check_agreement(start: date | None, end: date | None) -> None:
    if start and end and end < start:
        raise ValidationError("Agreement end date cannot be before the start date.")


class TenantService:
    """Service for tenant database operations.

    Keeps Room.is_occupied in sync with tenant lifecycle.
    """

    def __init__(self, db_session: Session):
        """Initialize with database session."""
        self.db = db_session

    def create_tenant(
        self,
        building_id: int,
        room_id: int,
        name: str,
        rent: Any,
        maintenance: Any = None,
        advance_paid: Any = None,
        phone: str | None = None,
        agreement_start: date | None = None,
        agreement_end: date | None = None,
    ) -> CreatedTenant:
        """Onboard a tenant into a vacant room and issue credentials.

        Raises:
            NotFoundError: If building or room does not exist
            ValidationError: On missing name, invalid amounts or dates, or an
                occupied room / room from another building
            ConflictError: If the generated username is already taken
        """
        building = self.db.get(Building, building_id)
        if not building:
            raise NotFoundError("Building not found.")
        room = self.db.get(Room, room_id)
        if not room:
            raise NotFoundError("Room not found.")
        if room.building_id != building.id:
            raise ValidationError("Invalid building or room selection.")
        if room.is_occupied:
            raise ValidationError(f"Room {room.room_number} is already occupied.")

        name = (name or "").strip()
        if not name:
            raise ValidationError("Please enter tenant name.")
        rent_amount = parse_amount(rent, "Rent", allow_zero=False)
        maintenance_amount = parse_amount(maintenance, "Maintenance")
        advance_amount = parse_amount(advance_paid, "Advance")
        _check_agreement(agreement_start, agreement_end)

        code = building.code or generate_building_code(building.name)
        credentials = generate_tenant_credentials(room.room_number, code)

        holder = self.db.query(Tenant).filter(Tenant.username == credentials.username).first()
        if holder and holder.is_active:
            logger.warning(f"Username {credentials.username} already taken")
            raise ConflictError(f"Username '{credentials.username}' already exists.")
        if holder:
            # Vacated tenant keeps history but gives up the room's login
            holder.username = f"{holder.username}#{holder.id}"
            logger.info(f"Retired login of vacated tenant {holder.id}")

        tenant = Tenant(
            building_id=building.id,
            room_id=room.id,
            name=name,
            phone=(phone or "").strip() or None,
            username=credentials.username,
            password_hash=hash_password(credentials.password),
            rent=rent_amount,
            maintenance=maintenance_amount,
            advance_paid=advance_amount,
            agreement_start=agreement_start,
            agreement_end=agreement_end,
            status=TenantStatus.ACTIVE,
        )
        room.is_occupied = True
        self.db.add(tenant)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(f"Username '{credentials.username}' already exists.") from e
        self.db.refresh(tenant)
        logger.info(
            f"Created tenant {tenant.name} (ID={tenant.id}) in room {room.room_number}, "
            f"building {building.id}"
        )
        return CreatedTenant(tenant=tenant, credentials=credentials)

    def get_tenant(self, tenant_id: int) -> Tenant:
        """Get tenant by ID.

        Raises:
            NotFoundError: If tenant does not exist
        """
        tenant = self.db.get(Tenant, tenant_id)
        if not tenant:
            raise NotFoundError("Tenant not found.")
        return tenant

    def list_tenants(
        self, building_id: int | None = None, include_vacated: bool = True
    ) -> list[Tenant]:
        query = self.db.query(Tenant)
        if building_id is not None:
            query = query.filter(Tenant.building_id == building_id)
        if not include_vacated:
            query = query.filter(Tenant.status == TenantStatus.ACTIVE)
        return query.order_by(Tenant.name.asc()).all()

    def update_tenant(self, tenant_id: int, **changes: Any) -> Tenant:
        """Edit contact details, billing terms or agreement dates.

        Raises:
            NotFoundError: If tenant does not exist
            ValidationError: On unknown fields or invalid values
        """
        tenant = self.get_tenant(tenant_id)
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        if "name" in changes:
            name = (changes["name"] or "").strip()
            if not name:
                raise ValidationError("Please enter tenant name.")
            tenant.name = name
        if "phone" in changes:
            tenant.phone = (changes["phone"] or "").strip() or None
        if "rent" in changes:
            tenant.rent = parse_amount(changes["rent"], "Rent", allow_zero=False)
        if "maintenance" in changes:
            tenant.maintenance = parse_amount(changes["maintenance"], "Maintenance")
        if "advance_paid" in changes:
            tenant.advance_paid = parse_amount(changes["advance_paid"], "Advance")
        if "agreement_start" in changes:
            tenant.agreement_start = changes["agreement_start"]
        if "agreement_end" in changes:
            tenant.agreement_end = changes["agreement_end"]
        _check_agreement(tenant.agreement_start, tenant.agreement_end)

        self.db.commit()
        self.db.refresh(tenant)
        logger.info(f"Updated tenant {tenant.id}: {', '.join(sorted(changes))}")
        return tenant

    def vacate_tenant(self, tenant_id: int, vacated_on: date | None = None) -> Tenant:
        """Mark a tenant as vacated and free their room. History is kept.

        Raises:
            NotFoundError: If tenant does not exist
            ValidationError: If tenant is already vacated
        """
        tenant = self.get_tenant(tenant_id)
        if not tenant.is_active:
            raise ValidationError("Tenant has already vacated.")

        tenant.status = TenantStatus.VACATED
        tenant.vacated_on = vacated_on or date.today()
        if tenant.room:
            tenant.room.is_occupied = False
        self.db.commit()
        self.db.refresh(tenant)
        logger.info(f"Tenant {tenant.id} vacated room {tenant.room_id} on {tenant.vacated_on}")
        return tenant

    def delete_tenant(self, tenant_id: int) -> None:
        """Delete a tenant with their payments and document records.

        Raises:
            NotFoundError: If tenant does not exist
        """
        tenant = self.get_tenant(tenant_id)
        if tenant.is_active and tenant.room:
            tenant.room.is_occupied = False
        self.db.delete(tenant)
        self.db.commit()
        logger.info(f"Deleted tenant {tenant_id}")

    def authenticate(self, username: str, password: str) -> Tenant:
        """Check tenant login.

        Raises:
            NotAuthorizedError: On unknown username, wrong password or vacated tenant
        """
        username = (username or "").strip().lower()
        password = (password or "").strip()
        if not username or not password:
            raise NotAuthorizedError("Please enter both username and password.")

        tenant = self.db.query(Tenant).filter(Tenant.username == username).first()
        if not tenant:
            logger.warning(f"Login attempt for unknown tenant {username}")
            raise NotAuthorizedError("Tenant account not found.")
        if not verify_password(password, tenant.password_hash):
            logger.warning(f"Wrong password for tenant {username}")
            raise NotAuthorizedError("Incorrect password.")
        if not tenant.is_active:
            raise NotAuthorizedError("Tenant account is no longer active.")
        return tenant


__all__ = ["CreatedTenant", "TenantService", "parse_amount", "tenant_terms", "terms_of"]
