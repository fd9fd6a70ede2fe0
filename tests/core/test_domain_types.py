"""Domain Types — verifies enum values and identity helpers.

Tests:
    - JobStatus values match the persisted layout exactly
    - ACTIVE_STATUSES and CLOSED_STATUSES partition JobStatus
    - new_id produces unique, prefixed ids
"""

from jobbook.core.domain_types import (
    ACTIVE_STATUSES, CLOSED_STATUSES, JobStatus, PaymentMethod,
    PaymentStatus, UNCOUNTED_PAYMENT_STATUSES, new_id,
)


def test_job_status_values_match_stored_strings():
    assert [s.value for s in JobStatus] == [
        "Quoted", "Accepted", "In-Progress", "Completed", "Cancelled",
    ]


def test_active_and_closed_partition_job_status():
    assert ACTIVE_STATUSES | CLOSED_STATUSES == set(JobStatus)
    assert not ACTIVE_STATUSES & CLOSED_STATUSES


def test_payment_methods_include_cash_and_four_gateways():
    assert {m.value for m in PaymentMethod} == {
        "paypal", "gcash", "cash", "card", "venmo",
    }


def test_failed_and_cancelled_payments_are_uncounted():
    assert UNCOUNTED_PAYMENT_STATUSES == {
        PaymentStatus.FAILED, PaymentStatus.CANCELLED,
    }


def test_new_id_is_prefixed_and_unique():
    a, b = new_id("job"), new_id("job")
    assert a.startswith("job_")
    assert a != b


def test_str_enums_compare_equal_to_values():
    assert JobStatus.IN_PROGRESS == "In-Progress"
    assert PaymentMethod.CASH == "cash"
