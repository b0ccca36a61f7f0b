"""
Submission validation: base shape rules and the loanType / purchaseOrRefi conditional rules.
Run from the project root: python -m pytest tests/test_validation.py -v
"""
import unittest

from support import make_fix_and_flip, make_ground_up, make_rental, make_submission

from services.validation import SubmissionValidationError, validate_submission


class TestBaseRules(unittest.TestCase):
    def test_valid_bridge_purchase(self):
        data = validate_submission(make_submission())
        self.assertEqual(data.loan_type, "Bridge")
        self.assertEqual(data.purchase_price, 250000)
        self.assertEqual(data.first_name, "Jane")

    def test_address_without_zip_rejected(self):
        with self.assertRaises(SubmissionValidationError) as ctx:
            validate_submission(make_submission(propertyAddress="123 Main St, Springfield"))
        self.assertIn("propertyAddress", ctx.exception.field_errors)

    def test_nine_digit_zip_accepted(self):
        data = validate_submission(make_submission(propertyAddress="9 Elm Rd, Austin, TX 78701-1234"))
        self.assertTrue(data.property_address.endswith("78701-1234"))

    def test_missing_required_fields_reported_together(self):
        candidate = make_submission(firstName=None, leadSource="", email="not-an-email")
        with self.assertRaises(SubmissionValidationError) as ctx:
            validate_submission(candidate)
        errors = ctx.exception.field_errors
        self.assertIn("firstName", errors)
        self.assertIn("leadSource", errors)
        self.assertIn("email", errors)

    def test_non_object_rejected(self):
        with self.assertRaises(SubmissionValidationError) as ctx:
            validate_submission(["not", "a", "dict"])
        self.assertEqual(ctx.exception.form_errors, ["Expected an object"])

    def test_non_finite_amounts_rejected(self):
        for value in (float("inf"), float("-inf"), float("nan")):
            with self.subTest(field="purchasePrice", value=value):
                with self.assertRaises(SubmissionValidationError) as ctx:
                    validate_submission(make_submission(purchasePrice=value))
                self.assertEqual(list(ctx.exception.field_errors), ["purchasePrice"])
            with self.subTest(field="rentalMonthlyHoa", value=value):
                with self.assertRaises(SubmissionValidationError) as ctx:
                    validate_submission(make_rental(rentalMonthlyHoa=value))
                self.assertEqual(list(ctx.exception.field_errors), ["rentalMonthlyHoa"])

    def test_flatten_shape(self):
        with self.assertRaises(SubmissionValidationError) as ctx:
            validate_submission(make_fix_and_flip(rehabCost=None))
        flat = ctx.exception.flatten()
        self.assertEqual(flat["formErrors"], [])
        self.assertEqual(flat["fieldErrors"], {"rehabCost": ["Required"]})


class TestConditionalRules(unittest.TestCase):
    def test_fix_and_flip_requires_rehab_arv_experience(self):
        """Each Fix and Flip field is required on its own, whatever else is valid."""
        for field in ("rehabCost", "fixFlipArv", "experience"):
            with self.subTest(field=field):
                with self.assertRaises(SubmissionValidationError) as ctx:
                    validate_submission(make_fix_and_flip(**{field: None}))
                self.assertIn(field, ctx.exception.field_errors)

    def test_fix_and_flip_reports_all_missing_at_once(self):
        candidate = make_fix_and_flip(rehabCost=None, fixFlipArv=0, experience="  ", purchasePrice=None)
        with self.assertRaises(SubmissionValidationError) as ctx:
            validate_submission(candidate)
        self.assertEqual(
            set(ctx.exception.field_errors),
            {"rehabCost", "fixFlipArv", "experience", "purchasePrice"},
        )

    def test_refinance_requires_refi_6_months(self):
        with self.assertRaises(SubmissionValidationError) as ctx:
            validate_submission(make_submission(purchaseOrRefi="Refinance"))
        self.assertIn("refi6Months", ctx.exception.field_errors)

        data = validate_submission(
            make_submission(purchaseOrRefi="Refinance", refi6Months="No - Owned Longer Than 6 Months")
        )
        self.assertEqual(data.refi_6_months, "No - Owned Longer Than 6 Months")

    def test_purchase_never_requires_refi_6_months(self):
        data = validate_submission(make_submission(purchaseOrRefi="Purchase", refi6Months=None))
        self.assertIsNone(data.refi_6_months)

    def test_comparisons_are_case_insensitive(self):
        with self.assertRaises(SubmissionValidationError) as ctx:
            validate_submission(make_submission(purchaseOrRefi="REFINANCE", loanType="fix AND flip"))
        self.assertTrue(
            {"refi6Months", "rehabCost", "fixFlipArv", "experience"} <= set(ctx.exception.field_errors)
        )

    def test_bridge_requires_positive_purchase_price(self):
        for price in (None, 0, -5):
            with self.subTest(price=price):
                with self.assertRaises(SubmissionValidationError) as ctx:
                    validate_submission(make_submission(purchasePrice=price))
                self.assertIn("purchasePrice", ctx.exception.field_errors)

    def test_rental_allows_zero_hoa_but_not_missing(self):
        validate_submission(make_rental(rentalMonthlyHoa=0))
        with self.assertRaises(SubmissionValidationError) as ctx:
            validate_submission(make_rental(rentalMonthlyHoa=None))
        self.assertEqual(set(ctx.exception.field_errors), {"rentalMonthlyHoa"})

    def test_rental_requires_income_taxes_insurance_leased(self):
        candidate = make_rental(
            rentalMonthlyIncome=None, rentalAnnualTaxes=0, rentalAnnualInsurance=None, rentalLeasedAtClosing=""
        )
        with self.assertRaises(SubmissionValidationError) as ctx:
            validate_submission(candidate)
        self.assertEqual(
            set(ctx.exception.field_errors),
            {"rentalMonthlyIncome", "rentalAnnualTaxes", "rentalAnnualInsurance", "rentalLeasedAtClosing"},
        )

    def test_ground_up_requires_costs_and_experience_not_purchase_price(self):
        data = validate_submission(make_ground_up())
        self.assertIsNone(data.purchase_price)

        with self.assertRaises(SubmissionValidationError) as ctx:
            validate_submission(make_ground_up(inputLandCost=None, inputGUCARV=0, experience=None))
        self.assertEqual(set(ctx.exception.field_errors), {"inputLandCost", "inputGUCARV", "experience"})

    def test_fields_of_other_loan_types_not_required(self):
        data = validate_submission(make_submission(loanType="Bridge"))
        self.assertIsNone(data.rehab_cost)
        self.assertIsNone(data.rental_monthly_hoa)


if __name__ == "__main__":
    unittest.main()
