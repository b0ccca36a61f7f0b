from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, EmailStr, Field

ZIP_PATTERN = r"\b\d{5}(?:-\d{4})?\b"

ROLE_OPTIONS = ("Real Estate Investor", "Borrower", "Broker or Representative")
FICO_OPTIONS = (
    "Below 600",
    "600-619",
    "620-639",
    "640-659",
    "660-679",
    "680-699",
    "700-719",
    "720-739",
    "740-749",
    "750-759",
    "760-769",
    "770-779",
    "780 or Above",
    "Foreign National",
)
PROPERTY_TYPE_OPTIONS = (
    "Single Family",
    "Condo",
    "Townhouse",
    "2-4 Unit",
    "Multi-Family (5+ Units)",
    "Land",
    "Commercial",
)
PURCHASE_OR_REFI_OPTIONS = ("Purchase", "Refinance")
REFI_6_MONTHS_OPTIONS = ("Yes - Purchased Within 6 Months", "No - Owned Longer Than 6 Months")
LOAN_TYPE_OPTIONS = ("Bridge", "Rental", "Fix and Flip", "Ground-Up Construction")
EXPERIENCE_OPTIONS = (
    "None",
    "1 Property",
    "2 Properties",
    "3 Properties",
    "4-5 Properties",
    "6-9 Properties",
    "10-19 Properties",
    "20+ Properties",
)
PREFERRED_CLOSING_OPTIONS = ("7 - 13 Days", "More Than 14 Days", "No preference")
LEAD_SOURCE_SUGGESTIONS = ("BiggerPockets", "Email From Us")


class SubmissionData(BaseModel):
    """Internal intake contract. Aliases are the camelCase keys the wizard posts."""

    email: EmailStr
    first_name: str = Field(..., alias="firstName", min_length=1)
    last_name: str = Field(..., alias="lastName", min_length=1)
    phone: str = Field(..., min_length=7)
    role: str = Field(..., min_length=1)
    fico: str = Field(..., min_length=1)
    property_address: str = Field(..., alias="propertyAddress", min_length=5, pattern=ZIP_PATTERN)
    property_type: str = Field(..., alias="propertyType", min_length=1)
    purchase_or_refi: str = Field(..., alias="purchaseOrRefi", min_length=1)
    refi_6_months: Optional[str] = Field(None, alias="refi6Months")
    loan_type: str = Field(..., alias="loanType", min_length=1)
    purchase_price: Optional[float] = Field(None, alias="purchasePrice")
    # Fix and Flip
    rehab_cost: Optional[float] = Field(None, alias="rehabCost")
    fix_flip_arv: Optional[float] = Field(None, alias="fixFlipArv")
    # Rental
    rental_monthly_income: Optional[float] = Field(None, alias="rentalMonthlyIncome")
    rental_annual_taxes: Optional[float] = Field(None, alias="rentalAnnualTaxes")
    rental_annual_insurance: Optional[float] = Field(None, alias="rentalAnnualInsurance")
    rental_monthly_hoa: Optional[float] = Field(None, alias="rentalMonthlyHoa")
    rental_leased_at_closing: Optional[str] = Field(None, alias="rentalLeasedAtClosing")
    # Ground-Up Construction
    input_land_cost: Optional[float] = Field(None, alias="inputLandCost")
    input_guc_purchase_construction_cost: Optional[float] = Field(None, alias="inputGUCPurchaseConstructionCost")
    input_guc_arv: Optional[float] = Field(None, alias="inputGUCARV")
    experience: Optional[str] = None
    preferred_closing: str = Field(..., alias="preferredClosing", min_length=1)
    broker_fee: str = Field(..., alias="brokerFee", min_length=1)
    lead_source: str = Field(..., alias="leadSource", min_length=1)

    # Infinity and NaN literals are valid JSON to the server but never valid amounts
    model_config = {"populate_by_name": True, "allow_inf_nan": False}

    def to_record(self) -> dict[str, Any]:
        """camelCase dict as stored in the submission row (unset optionals omitted)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SubmissionUpdate(BaseModel):
    data: Optional[dict[str, Any]] = None

