"""
Shared test setup. Import this before any project module: settings are read from
the environment at import time.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("RELAY_MODE", "preview")

from typing import Any

OPERATOR_EMAIL = "relay@operator.example"
ENDPOINT_URL = "https://lender.example/privatelender/intake-form-update.php"


def make_submission(**overrides: Any) -> dict[str, Any]:
    """A valid Bridge purchase; pass key=None to drop a field."""
    data: dict[str, Any] = {
        "email": "jane.doe@example.com",
        "firstName": "Jane",
        "lastName": "Doe",
        "phone": "555-123-4567",
        "role": "Real Estate Investor",
        "fico": "720-739",
        "propertyAddress": "123 Main St, Springfield, IL 62704",
        "propertyType": "Single Family",
        "purchaseOrRefi": "Purchase",
        "loanType": "Bridge",
        "purchasePrice": 250000,
        "preferredClosing": "7 - 13 Days",
        "brokerFee": "1%",
        "leadSource": "BiggerPockets",
    }
    data.update(overrides)
    return {k: v for k, v in data.items() if v is not None}


def make_fix_and_flip(**overrides: Any) -> dict[str, Any]:
    return make_submission(
        **{
            "loanType": "Fix and Flip",
            "rehabCost": 40000,
            "fixFlipArv": 375000,
            "experience": "2 Properties",
            **overrides,
        }
    )


def make_rental(**overrides: Any) -> dict[str, Any]:
    return make_submission(
        **{
            "loanType": "Rental",
            "rentalMonthlyIncome": 2400,
            "rentalAnnualTaxes": 3600,
            "rentalAnnualInsurance": 1200,
            "rentalMonthlyHoa": 0,
            "rentalLeasedAtClosing": "Yes",
            **overrides,
        }
    )


def make_ground_up(**overrides: Any) -> dict[str, Any]:
    return make_submission(
        **{
            "loanType": "Ground-Up Construction",
            "purchasePrice": None,
            "inputLandCost": 90000,
            "inputGUCPurchaseConstructionCost": 310000,
            "inputGUCARV": 550000,
            "experience": "4-5 Properties",
            **overrides,
        }
    )
