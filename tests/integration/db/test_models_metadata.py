from __future__ import annotations

from rentflow.models import Base
import rentflow.models  # noqa: F401


def test_model_metadata_contains_billing_tables():
    expected = {
        "properties",
        "units",
        "tenants",
        "leases",
        "invoices",
        "payments",
        "invoice_generation_logs",
        "pending_invoices",
        "payment_uploads",
        "imported_payments",
    }
    assert expected == set(Base.metadata.tables.keys())


def test_invoice_numbers_are_unique_and_drafts_cascade_with_their_log():
    invoices = Base.metadata.tables["invoices"]
    assert invoices.c.invoice_number.unique is True
    [fk] = Base.metadata.tables["pending_invoices"].c.generation_log_id.foreign_keys
    assert fk.ondelete == "CASCADE"
