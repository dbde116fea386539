"""
Pydantic schemas for API requests

Request bodies use camelCase on the wire (``bankId``, ``letterAmount``) and
snake_case in Python. Numeric fields accept numbers or numeric strings;
dates accept ISO ``YYYY-MM-DD`` strings.
"""

from decimal import Decimal
from datetime import date
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..banks import BankStatus
from ..credits import CreditStatus
from ..letters import LetterStatus, LetterType
from ..projects import ProjectStatus


def camelize(data: Any) -> Any:
    """Recursively convert snake_case dict keys to camelCase for responses"""
    if isinstance(data, dict):
        return {to_camel(key): camelize(value) for key, value in data.items()}
    if isinstance(data, list):
        return [camelize(item) for item in data]
    return data


class WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    def values(self) -> Dict[str, Any]:
        """Only the fields the client actually sent, keyed by attribute name"""
        return self.model_dump(exclude_unset=True)


# Project schemas
class CreateProjectRequest(WireModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    status: ProjectStatus = ProjectStatus.ACTIVE


class UpdateProjectRequest(WireModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None


# Bank schemas
class CreateBankRequest(WireModel):
    name: str = Field(..., min_length=1)
    code: Optional[str] = None
    branch_name: Optional[str] = None
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    status: BankStatus = BankStatus.ACTIVE


class UpdateBankRequest(WireModel):
    name: Optional[str] = Field(None, min_length=1)
    code: Optional[str] = None
    branch_name: Optional[str] = None
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    status: Optional[BankStatus] = None


# Currency schemas
class CreateCurrencyRequest(WireModel):
    code: str = Field(..., min_length=1, max_length=10)
    name: str = Field(..., min_length=1)
    symbol: Optional[str] = None
    is_active: bool = True


class UpdateCurrencyRequest(WireModel):
    code: Optional[str] = Field(None, min_length=1, max_length=10)
    name: Optional[str] = Field(None, min_length=1)
    symbol: Optional[str] = None
    is_active: Optional[bool] = None


class ExchangeRateRequest(WireModel):
    from_currency: str = Field(..., min_length=1)
    to_currency: str = Field(..., min_length=1)
    rate: Decimal = Field(..., gt=0, description="Units of toCurrency per one fromCurrency")


class UpdateExchangeRateRequest(WireModel):
    from_currency: Optional[str] = Field(None, min_length=1)
    to_currency: Optional[str] = Field(None, min_length=1)
    rate: Optional[Decimal] = Field(None, gt=0)


# Guarantee letter schemas
class CreateGuaranteeLetterRequest(WireModel):
    bank_id: str = Field(..., min_length=1)
    project_id: str = Field(..., min_length=1)
    letter_type: LetterType
    contract_amount: Decimal = Field(..., ge=0)
    letter_percentage: Decimal = Field(..., ge=0, le=100)
    letter_amount: Decimal = Field(..., ge=0)
    commission_rate: Decimal = Field(..., ge=0)
    bsmv_and_other_costs: Decimal = Field(Decimal('0'), ge=0)
    currency: str = Field(..., min_length=1)
    purchase_date: date
    letter_date: date
    expiry_date: Optional[date] = None
    status: LetterStatus = LetterStatus.ACTIVE
    notes: Optional[str] = None


class UpdateGuaranteeLetterRequest(WireModel):
    bank_id: Optional[str] = Field(None, min_length=1)
    project_id: Optional[str] = Field(None, min_length=1)
    letter_type: Optional[LetterType] = None
    contract_amount: Optional[Decimal] = Field(None, ge=0)
    letter_percentage: Optional[Decimal] = Field(None, ge=0, le=100)
    letter_amount: Optional[Decimal] = Field(None, ge=0)
    commission_rate: Optional[Decimal] = Field(None, ge=0)
    bsmv_and_other_costs: Optional[Decimal] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=1)
    purchase_date: Optional[date] = None
    letter_date: Optional[date] = None
    expiry_date: Optional[date] = None
    status: Optional[LetterStatus] = None
    notes: Optional[str] = None


# Credit schemas
class CreateCreditRequest(WireModel):
    bank_id: str = Field(..., min_length=1)
    project_id: str = Field(..., min_length=1)
    principal_amount: Decimal = Field(..., ge=0)
    interest_amount: Decimal = Field(..., ge=0)
    total_repaid_amount: Decimal = Field(Decimal('0'), ge=0)
    currency: str = Field(..., min_length=1)
    credit_date: date
    maturity_date: date
    status: CreditStatus = CreditStatus.ONGOING
    notes: Optional[str] = None


class UpdateCreditRequest(WireModel):
    bank_id: Optional[str] = Field(None, min_length=1)
    project_id: Optional[str] = Field(None, min_length=1)
    principal_amount: Optional[Decimal] = Field(None, ge=0)
    interest_amount: Optional[Decimal] = Field(None, ge=0)
    total_repaid_amount: Optional[Decimal] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=1)
    credit_date: Optional[date] = None
    maturity_date: Optional[date] = None
    status: Optional[CreditStatus] = None
    notes: Optional[str] = None


# Letter payment schemas
class CreateLetterPaymentRequest(WireModel):
    letter_id: str = Field(..., min_length=1)
    payment_date: date
    amount: Decimal = Field(..., ge=0)
    bsmv: Decimal = Field(Decimal('0'), ge=0)
    receipt_no: Optional[str] = None
    description: Optional[str] = None


class UpdateLetterPaymentRequest(WireModel):
    letter_id: Optional[str] = Field(None, min_length=1)
    payment_date: Optional[date] = None
    amount: Optional[Decimal] = Field(None, ge=0)
    bsmv: Optional[Decimal] = Field(None, ge=0)
    receipt_no: Optional[str] = None
    description: Optional[str] = None
